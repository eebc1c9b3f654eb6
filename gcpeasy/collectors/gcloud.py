"""
gcloud collector

Authentication, project, and GKE cluster operations delegated to the
Google Cloud CLI.
"""

from typing import List, Optional

import structlog

from ..models import ClusterInfo, Project
from ..parsers.base import ClusterListParser, ProjectListParser
from .base import Collector, CommandFailedError

logger = structlog.get_logger(__name__)

ACTIVE_ACCOUNT_ARGS = ["auth", "list", "--filter=status:ACTIVE", "--format=value(account)"]


class GcloudCollector(Collector):
    """Collector for the gcloud CLI"""

    name = "gcloud"
    install_hint = "Please install the Google Cloud SDK: https://cloud.google.com/sdk/docs/install"

    def __init__(self, executable: Optional[str] = None, timeout_seconds: Optional[float] = None):
        super().__init__(executable, timeout_seconds)
        self.project_parser = ProjectListParser()
        self.cluster_parser = ClusterListParser()

    # Authentication

    async def active_account(self) -> Optional[str]:
        """The active account, or None when nobody is logged in"""
        try:
            output = await self.run(ACTIVE_ACCOUNT_ARGS)
        except CommandFailedError as e:
            logger.debug("Could not read active account", error=str(e))
            return None

        lines = output.strip().splitlines()
        return lines[0].strip() if lines else None

    async def is_authenticated(self) -> bool:
        return bool(await self.active_account())

    async def login(self) -> None:
        """Interactive browser login

        Raises:
            CommandFailedError: When `gcloud auth login` fails
        """
        args = ["auth", "login"]
        returncode = await self.run_interactive(args)
        if returncode != 0:
            raise CommandFailedError(self.name, args, returncode)

    async def application_default_login(self) -> bool:
        """Set up application-default credentials; False on failure"""
        returncode = await self.run_interactive(["auth", "application-default", "login"])
        return returncode == 0

    async def revoke(self, account: str) -> None:
        args = ["auth", "revoke", account]
        returncode = await self.run_interactive(args)
        if returncode != 0:
            raise CommandFailedError(self.name, args, returncode)

    # Projects

    async def list_projects(self) -> List[Project]:
        output = await self.run(["projects", "list", "--format=json"])
        return self.project_parser.feed(output)

    async def current_project(self) -> str:
        """The configured project, or an empty string when unset"""
        try:
            output = await self.run(["config", "get-value", "project"])
        except CommandFailedError:
            return ""
        value = output.strip()
        return "" if value == "(unset)" else value

    async def set_project(self, project_id: str) -> None:
        await self.run(["config", "set", "project", project_id])

    async def project_status(self, project_id: str) -> str:
        """Short connectivity summary for `env list --status`"""
        if not await self.succeeds(["projects", "describe", project_id]):
            return "✗ Not accessible"

        try:
            output = await self.run([
                "container", "clusters", "list",
                "--project", project_id,
                "--format=value(name)",
            ])
        except CommandFailedError:
            output = ""

        if output.strip():
            return "✓ Connected (has clusters)"
        return "✓ Accessible"

    # Clusters

    async def list_clusters(self, project_id: str) -> List[ClusterInfo]:
        output = await self.run([
            "container", "clusters", "list",
            "--project", project_id,
            "--format=value(name,location)",
        ])
        return self.cluster_parser.feed(output)

    async def get_credentials(self, project_id: str, cluster: ClusterInfo) -> None:
        """Write kubeconfig credentials and make the cluster kubectl's current context"""
        await self.run([
            "container", "clusters", "get-credentials", cluster.name,
            "--location", cluster.location,
            "--project", project_id,
        ])
