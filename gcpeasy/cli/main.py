"""
CLI front-end using Typer framework

Command groups:
- env: GCP project listing and switching
- cluster: GKE cluster listing and switching
- pod: pod listing, logs and shells
- rails: Rails console access

plus the login, logout, doctor, pods, logs and shell shortcuts.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from typing_extensions import Annotated

from .. import __version__
from ..config import get_config
from ..logging_config import get_logger, log_command_execution, setup_logging_from_config

logger = get_logger(__name__)

# Create the main Typer app
app = typer.Typer(
    name="gcpeasy",
    help="Simplified Google Cloud and Kubernetes operations",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

env_app = typer.Typer(help="Manage GCP environments (projects)", no_args_is_help=True)
cluster_app = typer.Typer(help="Manage GKE clusters", no_args_is_help=True)
pod_app = typer.Typer(help="Work with application pods", no_args_is_help=True)
rails_app = typer.Typer(help="Rails application helpers", no_args_is_help=True)

app.add_typer(env_app, name="env")
app.add_typer(cluster_app, name="cluster")
app.add_typer(pod_app, name="pod")
app.add_typer(rails_app, name="rails")

OutputOption = Annotated[str, typer.Option("--output", "-o", help="Output format (text, json)")]
PodArgument = Annotated[
    Optional[str],
    typer.Argument(help="Pod as namespace/name; prompts when omitted", show_default=False),
]


def version_callback(value: bool):
    """Show version and exit"""
    if value:
        typer.echo(f"gcpeasy v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[Optional[bool], typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
):
    """
    gcpeasy: Google Cloud and Kubernetes operations without the flags

    [bold]Getting started:[/bold]
      gcpeasy login
      gcpeasy env select
      gcpeasy pods
    """
    setup_logging_from_config(get_config(), debug=debug)


def _run(name: str, args: dict, factory, method: str, **kwargs) -> None:
    """Build a command, run one of its coroutines and exit with its code"""
    log_command_execution(name, args, logger)

    command = factory()
    try:
        result = asyncio.run(getattr(command, method)(**kwargs))
    except KeyboardInterrupt:
        typer.echo("", err=True)
        raise typer.Exit(130)

    raise typer.Exit(result.exit_code)


def _data_consoles(output: str) -> dict:
    """Progress goes to stderr when stdout carries JSON"""
    if output == "json":
        return {"console": Console(stderr=True, highlight=False), "data_console": Console(highlight=False)}
    return {}


def _resolve_level(error: bool, warn: bool, info: bool, debug: bool) -> Optional[str]:
    """The most severe level flag given wins"""
    if error:
        return "error"
    if warn:
        return "warn"
    if info:
        return "info"
    if debug:
        return "debug"
    return None


@app.command()
def login():
    """
    🔐 Authenticate with Google Cloud

    Runs `gcloud auth login` followed by application-default login.
    """
    from .commands import AuthCommand
    _run("login", {}, AuthCommand, "login")


@app.command()
def logout():
    """🔓 Revoke the active Google Cloud credentials"""
    from .commands import AuthCommand
    _run("logout", {}, AuthCommand, "logout")


@app.command()
def doctor():
    """
    🩺 Check that gcpeasy can work

    [bold]Checks:[/bold] gcloud and kubectl installed, authentication,
    selected project and kubectl context.

    [bold]Exit Codes:[/bold] 0=ready (possibly with warnings) | 1=a check failed
    """
    from .commands import DoctorCommand
    _run("doctor", {}, DoctorCommand, "run")


@env_app.command("list")
def env_list(
    status: Annotated[bool, typer.Option("--status", help="Show connectivity status for each project")] = False,
    output: OutputOption = "text",
):
    """List available GCP projects, marking the current one"""
    from .commands import EnvCommand
    _run(
        "env list", {"status": status, "output": output},
        lambda: EnvCommand(**_data_consoles(output)), "list",
        show_status=status, output=output,
    )


@env_app.command("select")
def env_select(
    identifier: Annotated[Optional[str], typer.Argument(help="Project number, ID or name; prompts when omitted", show_default=False)] = None,
):
    """
    Switch the active GCP project

    [bold]Examples:[/bold]
      gcpeasy env select
      gcpeasy env select 2
      gcpeasy env select my-project-id
    """
    from .commands import EnvCommand
    _run("env select", {"identifier": identifier}, EnvCommand, "select", identifier=identifier)


@cluster_app.command("list")
def cluster_list(output: OutputOption = "text"):
    """List GKE clusters in the current project, marking the current one"""
    from .commands import ClusterCommand
    _run(
        "cluster list", {"output": output},
        lambda: ClusterCommand(**_data_consoles(output)), "list",
        output=output,
    )


@cluster_app.command("select")
def cluster_select(
    identifier: Annotated[Optional[str], typer.Argument(help="Cluster number or name; prompts when omitted", show_default=False)] = None,
):
    """Switch kubectl to a GKE cluster of the current project"""
    from .commands import ClusterCommand
    _run("cluster select", {"identifier": identifier}, ClusterCommand, "select", identifier=identifier)


def _pod_list(status: bool, output: str) -> None:
    from .commands import PodCommand
    _run(
        "pod list", {"status": status, "output": output},
        lambda: PodCommand(**_data_consoles(output)), "list",
        show_status=status, output=output,
    )


@pod_app.command("list")
def pod_list(
    status: Annotated[bool, typer.Option("--status", "-s", help="Show status, readiness, restarts, age and node")] = False,
    output: OutputOption = "text",
):
    """List application pods (system namespaces are hidden)"""
    _pod_list(status, output)


@app.command()
def pods(output: OutputOption = "text"):
    """List application pods with status (shortcut for 'pod list --status')"""
    _pod_list(True, output)


def _pod_logs(pod, follow, all_pods, error, warn, info, debug) -> None:
    from .commands import PodCommand
    level = _resolve_level(error, warn, info, debug)
    _run(
        "pod logs", {"pod": pod, "follow": follow, "level": level, "all": all_pods},
        PodCommand, "logs",
        follow=follow, level=level, all_pods=all_pods, pod=pod,
    )


@pod_app.command("logs")
def pod_logs(
    pod: PodArgument = None,
    follow: Annotated[bool, typer.Option("--follow", "-f", help="Follow log output")] = False,
    all_pods: Annotated[bool, typer.Option("--all", "-a", help="Logs from all application pods")] = False,
    error: Annotated[bool, typer.Option("--error", "-e", help="Only error lines")] = False,
    warn: Annotated[bool, typer.Option("--warn", "-w", help="Warning lines and above")] = False,
    info: Annotated[bool, typer.Option("--info", "-i", help="Info lines and above")] = False,
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Debug lines and above")] = False,
):
    """
    📋 View pod logs, optionally filtered by level

    [bold]Level flags:[/bold] when several are given the most severe wins
    (error > warn > info > debug).

    [bold]Examples:[/bold]
      gcpeasy pod logs -f
      gcpeasy pod logs -e -a
      gcpeasy pod logs production/web-7d9f8c6b5-x2x4q -w
    """
    _pod_logs(pod, follow, all_pods, error, warn, info, debug)


@app.command()
def logs(
    pod: PodArgument = None,
    follow: Annotated[bool, typer.Option("--follow", "-f", help="Follow log output")] = False,
    all_pods: Annotated[bool, typer.Option("--all", "-a", help="Logs from all application pods")] = False,
    error: Annotated[bool, typer.Option("--error", "-e", help="Only error lines")] = False,
    warn: Annotated[bool, typer.Option("--warn", "-w", help="Warning lines and above")] = False,
    info: Annotated[bool, typer.Option("--info", "-i", help="Info lines and above")] = False,
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Debug lines and above")] = False,
):
    """📋 View pod logs (shortcut for 'pod logs')"""
    _pod_logs(pod, follow, all_pods, error, warn, info, debug)


def _pod_shell(pod: Optional[str]) -> None:
    from .commands import PodCommand
    _run("pod shell", {"pod": pod}, PodCommand, "shell", pod=pod)


@pod_app.command("shell")
def pod_shell(pod: PodArgument = None):
    """🚀 Open an interactive shell in a pod"""
    _pod_shell(pod)


@app.command()
def shell(pod: PodArgument = None):
    """🚀 Open an interactive shell in a pod (shortcut for 'pod shell')"""
    _pod_shell(pod)


def _rails_console(pod: Optional[str]) -> None:
    from .commands import RailsCommand
    _run("rails console", {"pod": pod}, RailsCommand, "console_session", pod=pod)


@rails_app.command("console")
def rails_console(pod: PodArgument = None):
    """
    💎 Open a Rails console in a pod

    Tries the usual console commands and falls back to a shell.
    """
    _rails_console(pod)


@rails_app.command("c", hidden=True)
def rails_console_alias(pod: PodArgument = None):
    """Alias for 'rails console'"""
    _rails_console(pod)


if __name__ == "__main__":
    app()
