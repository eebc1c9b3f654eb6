"""
Command implementations

Each command follows the same shape: check authentication, discover
candidates through gcloud or kubectl, select one, act on it. Failures are
reported as a printed message at the call site; only login and logout turn
them into a non-zero exit status.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
import typer
from rich.console import Console

from ..collectors.gcloud import GcloudCollector
from ..collectors.kubectl import KubectlCollector
from ..config import Config, get_config
from ..context import ClusterContextResolver, is_current_cluster
from ..errors import GcpeasyError, InvalidSelection, SelectionCancelled
from ..health import HealthChecker
from ..logs import LogViewer
from ..models import ClusterInfo, OutputFormat, PodRef
from ..remote import RemoteSession
from ..renderers.json_renderer import JSONRenderer
from ..renderers.terminal import TerminalRenderer, echo
from ..selection import NumberedMenu, resolve_identifier
from ..validation import InputValidator

logger = structlog.get_logger(__name__)


@dataclass
class CommandResult:
    """Result of command execution"""
    exit_code: int = 0


class BaseCommand:
    """Base class for all commands

    Human-readable progress goes to `console`; listings (text tables or
    JSON) go to `data_console`, which defaults to the same console.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        gcloud: Optional[GcloudCollector] = None,
        kubectl: Optional[KubectlCollector] = None,
        console: Optional[Console] = None,
        data_console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        menu: Optional[NumberedMenu] = None,
    ):
        self.config = config or get_config()
        self.gcloud = gcloud or GcloudCollector(
            self.config.get("tools.gcloud"),
            timeout_seconds=self.config.get_timeout(),
        )
        self.kubectl = kubectl or KubectlCollector(
            self.config.get("tools.kubectl"),
            timeout_seconds=self.config.get_timeout(),
            system_namespaces=self.config.get_list("kubernetes.system_namespaces"),
            detailed_statuses=self.config.get_list("kubernetes.detailed_statuses"),
        )
        self.console = console or Console(highlight=False)
        self.data_console = data_console or self.console
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.menu = menu or NumberedMenu(self.console)
        self.renderer = TerminalRenderer(colors_enabled=self.config.get("output.colors_enabled", True))
        self.json_renderer = JSONRenderer()
        self.resolver = ClusterContextResolver(self.gcloud, self.kubectl, self.console, self.menu)

    def say(self, message: str = "") -> None:
        echo(self.console, message)

    def emit(self, text: str) -> None:
        """Write a rendered listing to the data console"""
        typer.echo(text, nl=not text.endswith("\n"), file=self.data_console.file)

    def _report(self, action: str, error: GcpeasyError) -> CommandResult:
        """Print a failure at the call site; the command still succeeds"""
        if isinstance(error, SelectionCancelled):
            self.say("Cancelled.")
            return CommandResult()

        logger.debug("Command failed", action=action, error=str(error), error_type=type(error).__name__)
        self.say(f"Error {action}: {error}")
        return CommandResult()

    async def _check_authenticated(self, verbose: bool = False) -> bool:
        if verbose:
            self.say("🔍 Checking authentication...")

        if not await self.gcloud.is_authenticated():
            self.say("❌ Not authenticated with Google Cloud")
            self.say("Please run 'gcpeasy login' first to authenticate.")
            return False

        if verbose:
            self.say("✅ Authenticated")
        return True

    async def _current_project(self, verbose: bool = False) -> Optional[str]:
        """Authenticated current project, or None after printing guidance"""
        if not await self._check_authenticated(verbose):
            return None

        if verbose:
            self.say("🔍 Getting current project...")

        project = await self.gcloud.current_project()
        if not project:
            self.say("❌ No GCP project selected")
            self.say("Please run 'gcpeasy env select' to choose an environment.")
            return None

        if verbose:
            self.say(f"✅ Current project: {project}")
        return project


class AuthCommand(BaseCommand):
    """login and logout"""

    async def login(self) -> CommandResult:
        try:
            self.say("🔐 Authenticating with Google Cloud...")
            self.gcloud.ensure_installed()

            await self.gcloud.login()
            self.say("✅ Successfully authenticated with Google Cloud")

            self.say("🔧 Setting up application-default credentials...")
            if not await self.gcloud.application_default_login():
                self.say("⚠️  Warning: Failed to set up application-default credentials")
                return CommandResult()

            self.say("✅ Authentication complete!")
            return CommandResult()
        except GcpeasyError as e:
            echo(self.error_console, f"Error during login: {e}")
            return CommandResult(exit_code=1)

    async def logout(self) -> CommandResult:
        try:
            self.say("🔐 Logging out from Google Cloud...")
            self.gcloud.ensure_installed()

            account = await self.gcloud.active_account()
            if not account:
                self.say("⚠️  No active authentication found")
                return CommandResult()

            self.say(f"🔓 Revoking credentials for: {account}")
            await self.gcloud.revoke(account)

            self.say("✅ Successfully logged out from Google Cloud")
            return CommandResult()
        except GcpeasyError as e:
            echo(self.error_console, f"Error during logout: {e}")
            return CommandResult(exit_code=1)


class EnvCommand(BaseCommand):
    """Environment (GCP project) listing and switching"""

    async def list(self, show_status: bool = False, output: str = "text") -> CommandResult:
        try:
            return await self._list(show_status, InputValidator.validate_output_format(output))
        except GcpeasyError as e:
            return self._report("listing environments", e)

    async def _list(self, show_status: bool, output: OutputFormat) -> CommandResult:
        if not await self._check_authenticated():
            return CommandResult()

        self.say("Discovering GCP projects...")
        self.say()

        projects = await self.gcloud.list_projects()
        current = await self.gcloud.current_project()

        statuses = None
        if show_status:
            statuses = {}
            for project in projects:
                statuses[project.project_id] = await self.gcloud.project_status(project.project_id)

        if output == OutputFormat.JSON:
            self.emit(self.json_renderer.render_projects(projects, current, statuses))
            return CommandResult()

        if not projects:
            self.say("No GCP projects found.")
            return CommandResult()

        self.say("Available environments:")
        self.say()
        self.emit(self.renderer.render_projects(projects, current, statuses))

        if not show_status:
            self.say()
            self.say("💡 Use 'gcpeasy env list --status' to see connectivity status")

        return CommandResult()

    async def select(self, identifier: Optional[str] = None) -> CommandResult:
        try:
            return await self._select(identifier)
        except GcpeasyError as e:
            return self._report("selecting environment", e)

    async def _select(self, identifier: Optional[str]) -> CommandResult:
        if not await self._check_authenticated():
            return CommandResult()

        projects = await self.gcloud.list_projects()
        if not projects:
            self.say("No GCP projects found.")
            return CommandResult()

        if identifier is None:
            current = await self.gcloud.current_project()
            self.say("Available environments:")
            self.say()
            self.emit(self.renderer.render_projects(projects, current))
            try:
                selected = self.menu.choose(projects, "environment", show_items=False)
            except InvalidSelection as e:
                self.say(f"Invalid selection: {e.answer}")
                return CommandResult()
        else:
            selected = resolve_identifier(projects, identifier, lambda p: (p.project_id, p.name))
            if selected is None:
                self.say(f"Environment '{identifier}' not found.")
                self.say("Use 'gcpeasy env list' to see available environments.")
                return CommandResult()

        self.say(f"Switching to project: {selected.project_id}")
        await self.gcloud.set_project(selected.project_id)
        self.say(f"✅ Successfully switched to project: {selected.project_id}")
        return CommandResult()


class ClusterCommand(BaseCommand):
    """GKE cluster listing and switching"""

    async def list(self, output: str = "text") -> CommandResult:
        try:
            return await self._list(InputValidator.validate_output_format(output))
        except GcpeasyError as e:
            return self._report("listing clusters", e)

    async def _list(self, output: OutputFormat) -> CommandResult:
        project = await self._current_project()
        if project is None:
            return CommandResult()

        self.say(f"Discovering GKE clusters in project: {project}")
        self.say()

        clusters = await self.gcloud.list_clusters(project)
        current_context = await self.kubectl.current_context()
        current = [is_current_cluster(c, current_context, project) for c in clusters]

        if output == OutputFormat.JSON:
            self.emit(self.json_renderer.render_clusters(project, clusters, current, current_context))
            return CommandResult()

        if not clusters:
            self.say("No GKE clusters found.")
            return CommandResult()

        self.say("Available clusters:")
        self.say()
        self.emit(self.renderer.render_clusters(clusters, current))
        self.say()
        self.say("💡 Use 'gcpeasy cluster select' to switch clusters")
        return CommandResult()

    async def select(self, identifier: Optional[str] = None) -> CommandResult:
        try:
            return await self._select(identifier)
        except GcpeasyError as e:
            return self._report("selecting cluster", e)

    async def _select(self, identifier: Optional[str]) -> CommandResult:
        project = await self._current_project()
        if project is None:
            return CommandResult()

        clusters = await self.gcloud.list_clusters(project)
        if not clusters:
            self.say("No GKE clusters found.")
            return CommandResult()

        if identifier is None:
            selected = self.resolver.select_cluster(clusters)
        else:
            selected = resolve_identifier(clusters, identifier, lambda c: (c.name,))
            if selected is None:
                self.say(f"Cluster '{identifier}' not found.")
                self.say("Use 'gcpeasy cluster list' to see available clusters.")
                return CommandResult()

        await self._switch(project, selected)
        return CommandResult()

    async def _switch(self, project: str, cluster: ClusterInfo) -> None:
        self.say(f"Switching to cluster: {cluster.name} in {cluster.location}")
        await self.resolver.configure(project, cluster)
        self.say(f"✅ Successfully switched to cluster: {cluster.name}")


class PodCommand(BaseCommand):
    """Pod listing, logs, and shells"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.viewer = LogViewer(self.kubectl, self.console)
        self.remote = RemoteSession(self.kubectl, self.console)

    async def _locate(self) -> Optional[str]:
        project = await self._current_project(verbose=True)
        if project is not None:
            self.say(f"🔍 Looking for application pods in project: {project}")
        return project

    async def _target_pod(self, project: str, pod: Optional[PodRef]) -> PodRef:
        """The pod given on the command line, or one picked from a menu"""
        if pod is None:
            return await self.resolver.select_application_pod(project)

        await self.resolver.ensure_cluster(project)
        return pod

    async def list(self, show_status: bool = False, output: str = "text") -> CommandResult:
        try:
            return await self._list(show_status, InputValidator.validate_output_format(output))
        except GcpeasyError as e:
            return self._report("listing pods", e)

    async def _list(self, show_status: bool, output: OutputFormat) -> CommandResult:
        project = await self._locate()
        if project is None:
            return CommandResult()

        await self.resolver.ensure_cluster(project)

        self.say("🔍 Gathering pod information...")
        self.say()

        pods = await self.kubectl.detailed_pods()

        if output == OutputFormat.JSON:
            self.emit(self.json_renderer.render_pods(pods))
            return CommandResult()

        if not pods:
            self.say("❌ No application pods found")
            self.say("Make sure your applications are deployed and running.")
            return CommandResult()

        self.say(f"📋 Found {len(pods)} application pod(s):")
        self.say()
        self.emit(self.renderer.render_pods(pods, detailed=show_status))
        self.say()
        self.say("💡 Use 'gcpeasy pod logs', 'gcpeasy pod shell', or 'gcpeasy rails console' to interact with these pods")
        return CommandResult()

    async def logs(
        self,
        follow: bool = False,
        level: Optional[str] = None,
        all_pods: bool = False,
        pod: Optional[str] = None,
    ) -> CommandResult:
        try:
            normalised = InputValidator.validate_log_level(level)
            target = InputValidator.validate_pod_ref(pod) if pod else None
            return await self._logs(follow, normalised.value if normalised else None, all_pods, target)
        except GcpeasyError as e:
            return self._report("viewing logs", e)

    async def _logs(
        self,
        follow: bool,
        level: Optional[str],
        all_pods: bool,
        target: Optional[PodRef],
    ) -> CommandResult:
        project = await self._locate()
        if project is None:
            return CommandResult()

        if all_pods:
            await self.resolver.ensure_cluster(project)

            self.say("🔍 Gathering pod list...")
            pods = await self.kubectl.application_pods()
            if not pods:
                self.say("❌ No application pods found")
                self.say("Make sure your applications are deployed and running.")
                return CommandResult()

            self.say(f"📋 Viewing logs for {len(pods)} pod(s):")
            for p in pods:
                self.say(f" - {p}")
            self.say()

            await self.viewer.view_many(pods, follow=follow, level=level)
            return CommandResult()

        selected = await self._target_pod(project, target)
        self.say(f"📋 Viewing logs for pod: {selected}")
        await self.viewer.view(selected, follow=follow, level=level)
        return CommandResult()

    async def shell(self, pod: Optional[str] = None) -> CommandResult:
        try:
            target = InputValidator.validate_pod_ref(pod) if pod else None

            project = await self._locate()
            if project is None:
                return CommandResult()

            selected = await self._target_pod(project, target)
            self.say(f"🚀 Opening shell in pod: {selected}")
            await self.remote.open_shell(selected)
            return CommandResult()
        except GcpeasyError as e:
            return self._report("accessing shell", e)


class RailsCommand(PodCommand):
    """Rails console access"""

    async def console_session(self, pod: Optional[str] = None) -> CommandResult:
        try:
            target = InputValidator.validate_pod_ref(pod) if pod else None

            project = await self._current_project(verbose=True)
            if project is None:
                return CommandResult()
            self.say(f"🔍 Looking for Rails applications in project: {project}")

            selected = await self._target_pod(project, target)
            self.say(f"🚀 Connecting to Rails console in pod: {selected}")
            await self.remote.open_rails_console(selected)
            return CommandResult()
        except GcpeasyError as e:
            return self._report("accessing Rails console", e)


class DoctorCommand(BaseCommand):
    """Environment health checks"""

    async def run(self) -> CommandResult:
        checker = HealthChecker(self.gcloud, self.kubectl)
        results = await checker.run_all_checks()

        self.say("🩺 gcpeasy environment check")
        self.say()
        self.emit(self.renderer.render_health(results))

        overall = checker.overall_status(results)
        if overall == "fail":
            self.say("❌ Some checks failed")
            return CommandResult(exit_code=1)
        if overall == "warn":
            self.say("⚠️  Ready, with warnings")
        else:
            self.say("✅ All checks passed")
        return CommandResult()
