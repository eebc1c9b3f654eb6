"""
Cluster context resolution

Decides whether kubectl already points at a cluster of the current project,
discovers the candidates when it does not, picks one (automatically when
there is only one), and fetches its credentials. Pod selection builds on
top of that.
"""

from typing import List, Optional, Sequence

import structlog
from rich.console import Console

from .collectors.gcloud import GcloudCollector
from .collectors.kubectl import KubectlCollector
from .errors import NoClustersError, NoPodsError
from .models import ClusterInfo, PodRef
from .parsers.base import parse_gke_context
from .renderers.terminal import echo
from .selection import NumberedMenu

logger = structlog.get_logger(__name__)


def is_current_cluster(cluster: ClusterInfo, current_context: str, project_id: Optional[str] = None) -> bool:
    """Whether kubectl's current context points at this cluster

    GKE contexts are compared part by part. Other context names (renamed
    contexts, for instance) fall back to containing the cluster name.
    """
    if not current_context:
        return False

    parsed = parse_gke_context(current_context)
    if parsed is not None:
        return parsed.matches(cluster, project_id)

    return cluster.name in current_context


def find_current_cluster(
    clusters: Sequence[ClusterInfo],
    current_context: str,
    project_id: Optional[str] = None,
) -> Optional[ClusterInfo]:
    for cluster in clusters:
        if is_current_cluster(cluster, current_context, project_id):
            return cluster
    return None


class ClusterContextResolver:
    """Gets kubectl pointed at a cluster of the current project"""

    def __init__(
        self,
        gcloud: GcloudCollector,
        kubectl: KubectlCollector,
        console: Console,
        menu: Optional[NumberedMenu] = None,
    ):
        self.gcloud = gcloud
        self.kubectl = kubectl
        self.console = console
        self.menu = menu or NumberedMenu(console)

    async def discover_clusters(self, project_id: str) -> List[ClusterInfo]:
        """List the project's clusters, failing when there are none"""
        echo(self.console, "🔍 Getting GKE clusters...")
        clusters = await self.gcloud.list_clusters(project_id)

        if not clusters:
            echo(self.console, "❌ No GKE clusters found in the current project")
            echo(self.console, "Make sure you have GKE clusters set up and configured.")
            raise NoClustersError()

        return clusters

    def select_cluster(self, clusters: Sequence[ClusterInfo]) -> ClusterInfo:
        """Auto-select a single cluster, otherwise ask"""
        if len(clusters) == 1:
            cluster = clusters[0]
            echo(self.console, f"✅ Found 1 cluster: {cluster.name} in {cluster.location}")
            return cluster

        return self.menu.choose(
            clusters,
            "cluster",
            label=lambda c: f"{c.name} ({c.location})",
            heading=f"✅ Found {len(clusters)} clusters:",
        )

    async def configure(self, project_id: str, cluster: ClusterInfo) -> None:
        echo(self.console, f"🔧 Getting credentials for cluster {cluster.name} in {cluster.location}...")
        await self.gcloud.get_credentials(project_id, cluster)

    async def ensure_cluster(self, project_id: str) -> ClusterInfo:
        """Make sure kubectl targets one of the project's clusters

        Keeps the current context when it already names one of them;
        otherwise selects a cluster and fetches its credentials.

        Raises:
            NoClustersError: When the project has no clusters
            SelectionCancelled: When the user quits the menu
        """
        current_context = await self.kubectl.current_context()
        clusters = await self.discover_clusters(project_id)

        active = find_current_cluster(clusters, current_context, project_id)
        if active is not None:
            logger.debug("Reusing current kubectl context", context=current_context)
            echo(self.console, f"✅ Using current cluster: {active.name} in {active.location}")
            return active

        selected = self.select_cluster(clusters)
        echo(self.console, f"🔧 Using cluster: {selected.name} in {selected.location}")

        echo(self.console, "🔧 Configuring kubectl...")
        await self.configure(project_id, selected)
        echo(self.console, "✅ kubectl configured")

        return selected

    async def discover_pods(self) -> List[PodRef]:
        """Running application pods, failing when there are none"""
        echo(self.console, "🔍 Searching for application pods...")
        pods = await self.kubectl.application_pods()

        if not pods:
            echo(self.console, "❌ No pods found")
            echo(self.console, "Make sure your application is deployed and running.")
            raise NoPodsError()

        return pods

    async def select_application_pod(self, project_id: str) -> PodRef:
        """Full flow: cluster, kubectl credentials, pod discovery, pod menu"""
        await self.ensure_cluster(project_id)
        pods = await self.discover_pods()

        return self.menu.choose(
            pods,
            "pod",
            heading=f"📋 Found {len(pods)} pod(s):",
        )
