"""
kubectl collector

Pod discovery, log streaming, and interactive exec through kubectl. All
discovery is cluster-wide (`--all-namespaces`); namespace filtering happens
here so callers only ever see application pods.
"""

from typing import Collection, List, Optional, Pattern

import structlog

from ..models import PodInfo, PodRef
from ..parsers.base import PodPhaseParser, PodTableParser
from .base import Collector, ToolError

logger = structlog.get_logger(__name__)

DEFAULT_SYSTEM_NAMESPACES = ("kube-system", "kube-public", "kube-node-lease", "gke-system")
DEFAULT_DETAILED_STATUSES = ("Running", "Pending", "CrashLoopBackOff", "Error")

PHASE_COLUMNS = "custom-columns=NAMESPACE:.metadata.namespace,NAME:.metadata.name,STATUS:.status.phase"


class KubectlCollector(Collector):
    """Collector for the kubectl CLI"""

    name = "kubectl"
    install_hint = "Please install kubectl: https://kubernetes.io/docs/tasks/tools/"

    def __init__(
        self,
        executable: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        system_namespaces: Collection[str] = DEFAULT_SYSTEM_NAMESPACES,
        detailed_statuses: Collection[str] = DEFAULT_DETAILED_STATUSES,
    ):
        super().__init__(executable, timeout_seconds)
        self.system_namespaces = frozenset(system_namespaces)
        self.detailed_statuses = frozenset(detailed_statuses)
        self.phase_parser = PodPhaseParser()
        self.table_parser = PodTableParser()

    def is_system_namespace(self, namespace: str) -> bool:
        return namespace in self.system_namespaces

    async def current_context(self) -> str:
        """kubectl's current context, or an empty string when there is none"""
        try:
            output = await self.run(["config", "current-context"])
        except ToolError as e:
            logger.debug("No current kubectl context", error=str(e))
            return ""
        return output.strip()

    async def application_pods(self) -> List[PodRef]:
        """Running pods outside the system namespaces"""
        output = await self.run([
            "get", "pods", "--all-namespaces",
            "-o", PHASE_COLUMNS,
            "--no-headers",
        ])

        return [
            pod for pod, phase in self.phase_parser.feed(output)
            if phase == "Running" and not self.is_system_namespace(pod.namespace)
        ]

    async def detailed_pods(self) -> List[PodInfo]:
        """Status rows for application pods, including unhealthy ones"""
        output = await self.run(["get", "pods", "--all-namespaces", "-o", "wide", "--no-headers"])

        return [
            pod for pod in self.table_parser.feed(output)
            if not self.is_system_namespace(pod.namespace) and pod.status in self.detailed_statuses
        ]

    async def stream_logs(
        self,
        pod: PodRef,
        follow: bool = False,
        line_filter: Optional[Pattern[str]] = None,
    ) -> int:
        args = ["logs", pod.name, "-n", pod.namespace]
        if follow:
            args.append("-f")
        return await self.stream(args, line_filter=line_filter)

    async def exec_interactive(self, pod: PodRef, command: List[str]) -> int:
        """`kubectl exec -it` attached to the terminal; returns the exit status"""
        return await self.run_interactive(
            ["exec", "-it", pod.name, "-n", pod.namespace, "--"] + list(command)
        )
