"""
Interactive sessions inside pods

Each session tries a list of commands in order with `kubectl exec -it`;
the first one that exits 0 ends the attempt.
"""

from typing import Sequence

from rich.console import Console

from .collectors.kubectl import KubectlCollector
from .errors import GcpeasyError
from .models import PodRef
from .renderers.terminal import echo

SHELL_CANDIDATES = ("/bin/bash", "/bin/zsh", "/bin/sh")

RAILS_CONSOLE_COMMANDS = (
    "bundle exec rails console",
    "bundle exec rails c",
    "rails console",
    "rails c",
    "bin/rails console",
    "bin/rails c",
)

RAILS_FALLBACK_SHELL = "/bin/bash"


class RemoteSession:
    """Opens shells and Rails consoles in a pod"""

    def __init__(self, kubectl: KubectlCollector, console: Console):
        self.kubectl = kubectl
        self.console = console

    def _banner(self, what: str) -> None:
        echo(self.console, f"🎯 Connecting to {what}...")
        echo(self.console, "(Type 'exit' or press Ctrl+D to disconnect)")
        echo(self.console)

    async def open_shell(self, pod: PodRef, shells: Sequence[str] = SHELL_CANDIDATES) -> str:
        """Open the first shell that works; returns its path

        Raises:
            GcpeasyError: When none of the shells can be started
        """
        self._banner("shell")

        for shell in shells:
            echo(self.console, f"Trying: {shell}")
            if await self.kubectl.exec_interactive(pod, [shell]) == 0:
                return shell
            echo(self.console, f"Shell {shell} not available, trying next option...")

        raise GcpeasyError("no suitable shell found in pod")

    async def open_rails_console(
        self,
        pod: PodRef,
        commands: Sequence[str] = RAILS_CONSOLE_COMMANDS,
    ) -> str:
        """Open a Rails console, falling back to a plain shell

        Returns:
            The command that ended the session

        Raises:
            GcpeasyError: When the fallback shell fails as well
        """
        self._banner("Rails console")

        for command in commands:
            echo(self.console, f"Trying: {command}")
            if await self.kubectl.exec_interactive(pod, ["sh", "-c", command]) == 0:
                return command
            echo(self.console, "Command failed, trying next option...")

        echo(self.console, "Rails console commands failed, opening shell instead...")
        returncode = await self.kubectl.exec_interactive(pod, [RAILS_FALLBACK_SHELL])
        if returncode != 0:
            raise GcpeasyError(f"{RAILS_FALLBACK_SHELL} exited with status {returncode}")
        return RAILS_FALLBACK_SHELL
