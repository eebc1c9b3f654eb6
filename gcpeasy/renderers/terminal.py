"""
Terminal renderer using rich for output formatting

Listings are rendered into strings so commands decide where they go;
progress lines are printed straight to a console with `echo`.
"""

from typing import Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import ClusterInfo, PodInfo, Project


def echo(console: Console, message: str = "") -> None:
    """Print a line verbatim, without rich markup, highlighting or wrapping"""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def checkbox(selected: bool) -> str:
    return "- [x]" if selected else "- [ ]"


class TerminalRenderer:
    """ANSI terminal renderer using rich library

    - Honours environment width, capped at 120 columns
    - Long table cells are truncated with an ellipsis, never wrapped
    """

    def __init__(self, colors_enabled: bool = True, width: Optional[int] = None):
        self.colors_enabled = colors_enabled
        self.width = width or min(120, Console().size.width)

    def _console(self) -> Console:
        return Console(
            file=None,
            width=self.width,
            color_system="auto" if self.colors_enabled else None,
            highlight=False,
        )

    def render_projects(
        self,
        projects: Sequence[Project],
        current_project: str,
        statuses: Optional[Dict[str, str]] = None,
    ) -> str:
        """Render the numbered environment list with the current one checked"""
        console = self._console()

        with console.capture() as capture:
            for i, project in enumerate(projects, 1):
                line = f"{checkbox(project.project_id == current_project)} {i}. {project.project_id} ({project.name})"
                if statuses is not None:
                    line += f" {statuses.get(project.project_id, '')}"
                echo(console, line.rstrip())

        return capture.get()

    def render_clusters(self, clusters: Sequence[ClusterInfo], current: Sequence[bool]) -> str:
        """Render the numbered cluster list; `current` flags each row"""
        console = self._console()

        with console.capture() as capture:
            for i, (cluster, is_current) in enumerate(zip(clusters, current), 1):
                echo(console, f"{checkbox(is_current)} {i}. {cluster.name} ({cluster.location})")

        return capture.get()

    def render_pods(self, pods: Sequence[PodInfo], detailed: bool = False) -> str:
        """Render the application pod table

        The plain table shows namespace and name; the detailed table adds
        status, readiness, restarts, age, and node.
        """
        console = self._console()

        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False, header_style="bold")
        table.add_column("NAMESPACE", max_width=15, no_wrap=True, overflow="ellipsis")
        table.add_column("NAME", max_width=35, no_wrap=True, overflow="ellipsis")
        if detailed:
            table.add_column("STATUS", no_wrap=True)
            table.add_column("READY", no_wrap=True)
            table.add_column("RESTARTS", no_wrap=True, justify="right")
            table.add_column("AGE", no_wrap=True)
            table.add_column("NODE", max_width=20, no_wrap=True, overflow="ellipsis")

        for pod in pods:
            row = [escape(pod.namespace), escape(pod.name)]
            if detailed:
                style = self._get_status_style(pod.status)
                row += [
                    f"[{style}]{escape(pod.status)}[/{style}]",
                    escape(pod.ready),
                    escape(pod.restarts),
                    escape(pod.age),
                    escape(pod.node),
                ]
            table.add_row(*row)

        with console.capture() as capture:
            console.print(table)

        return capture.get()

    def render_health(self, results: List) -> str:
        """Render doctor results as a table"""
        console = self._console()

        table = Table(box=box.SIMPLE_HEAD, show_edge=False, header_style="bold")
        table.add_column("CHECK", no_wrap=True)
        table.add_column("STATUS", no_wrap=True)
        table.add_column("DETAILS")

        icons = {"pass": "✅", "warn": "⚠️ ", "fail": "❌"}
        for result in results:
            style = {"pass": "green", "warn": "yellow", "fail": "red"}.get(result.status, "white")
            if not self.colors_enabled:
                style = "white"
            table.add_row(
                escape(result.name),
                f"{icons.get(result.status, '')} [{style}]{result.status}[/{style}]",
                escape(result.message),
            )

        with console.capture() as capture:
            console.print(table)

        return capture.get()

    def _get_status_style(self, status: Optional[str]) -> str:
        """Get rich style for pod status"""
        if not self.colors_enabled or not status:
            return "white"

        style_map = {
            'Running': 'green',
            'Succeeded': 'green',
            'Completed': 'green',
            'Pending': 'yellow',
            'ContainerCreating': 'yellow',
            'CrashLoopBackOff': 'red',
            'Error': 'red',
            'Failed': 'red',
            'Unknown': 'red',
        }
        return style_map.get(status, 'white')
