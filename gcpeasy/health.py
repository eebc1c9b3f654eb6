"""
Health checks for gcpeasy

Validates:
- gcloud and kubectl installation
- gcloud authentication
- Selected project
- kubectl context
"""

import asyncio
import sys
from dataclasses import dataclass
from typing import List, Optional

import structlog

from .collectors.gcloud import GcloudCollector
from .collectors.kubectl import KubectlCollector
from .errors import GcpeasyError

logger = structlog.get_logger(__name__)


@dataclass
class HealthCheckResult:
    """Result of a health check"""
    name: str
    status: str  # "pass", "warn", "fail"
    message: str
    details: Optional[dict] = None


class HealthChecker:
    """Environment health checker used by `gcpeasy doctor`"""

    def __init__(self, gcloud: GcloudCollector, kubectl: KubectlCollector):
        self.gcloud = gcloud
        self.kubectl = kubectl

    async def run_all_checks(self) -> List[HealthCheckResult]:
        """Run all health checks concurrently; results keep check order"""
        checks = [
            self.check_python_version(),
            self.check_tool_installed(self.gcloud),
            self.check_tool_installed(self.kubectl),
            self.check_authentication(),
            self.check_project(),
            self.check_kube_context(),
        ]
        results = await asyncio.gather(*checks, return_exceptions=True)

        final = []
        for result in results:
            if isinstance(result, GcpeasyError):
                final.append(HealthCheckResult(name="Unexpected", status="fail", message=str(result)))
            elif isinstance(result, BaseException):
                raise result
            else:
                final.append(result)
        return final

    async def check_python_version(self) -> HealthCheckResult:
        version_info = sys.version_info
        version_str = f"{version_info.major}.{version_info.minor}.{version_info.micro}"

        if version_info < (3, 9):
            return HealthCheckResult(
                name="Python Version",
                status="fail",
                message=f"Python {version_str} is too old. Required: Python 3.9+",
            )
        return HealthCheckResult(name="Python Version", status="pass", message=f"Python {version_str} OK")

    async def check_tool_installed(self, tool) -> HealthCheckResult:
        name = f"{tool.name} Installation"
        if tool.installed():
            return HealthCheckResult(
                name=name,
                status="pass",
                message=f"{tool.name} found at {tool.path}",
                details={"path": tool.path},
            )
        message = f"{tool.name} not found in PATH"
        if tool.install_hint:
            message += f". {tool.install_hint}"
        return HealthCheckResult(name=name, status="fail", message=message)

    async def check_authentication(self) -> HealthCheckResult:
        name = "gcloud Authentication"
        if not self.gcloud.installed():
            return HealthCheckResult(name=name, status="fail", message="gcloud not installed")

        account = await self.gcloud.active_account()
        if not account:
            return HealthCheckResult(
                name=name,
                status="fail",
                message="Not authenticated. Run 'gcpeasy login'",
            )
        return HealthCheckResult(name=name, status="pass", message=f"Active account: {account}")

    async def check_project(self) -> HealthCheckResult:
        name = "GCP Project"
        if not self.gcloud.installed():
            return HealthCheckResult(name=name, status="fail", message="gcloud not installed")

        project = await self.gcloud.current_project()
        if not project:
            return HealthCheckResult(
                name=name,
                status="warn",
                message="No project selected. Run 'gcpeasy env select'",
            )
        return HealthCheckResult(name=name, status="pass", message=f"Current project: {project}")

    async def check_kube_context(self) -> HealthCheckResult:
        name = "kubectl Context"
        if not self.kubectl.installed():
            return HealthCheckResult(name=name, status="fail", message="kubectl not installed")

        context = await self.kubectl.current_context()
        if not context:
            return HealthCheckResult(
                name=name,
                status="warn",
                message="No current context. Run 'gcpeasy cluster select'",
            )
        return HealthCheckResult(name=name, status="pass", message=f"Current context: {context}")

    @staticmethod
    def overall_status(results: List[HealthCheckResult]) -> str:
        statuses = {r.status for r in results}
        if "fail" in statuses:
            return "fail"
        if "warn" in statuses:
            return "warn"
        return "pass"
