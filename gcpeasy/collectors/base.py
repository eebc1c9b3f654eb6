"""
Base collector classes

Collectors are the only place gcpeasy starts external processes. Each one
wraps a single command-line tool and exposes three ways of running it:
captured, interactive (inheriting the terminal), and streamed.
"""

import asyncio
import contextlib
import shutil
import sys
from typing import List, Optional, Pattern, TextIO

import structlog
from async_timeout import timeout

from ..errors import GcpeasyError
from ..logging_config import PerformanceLogger

logger = structlog.get_logger(__name__)

STREAM_CHUNK_SIZE = 64 * 1024


class ToolError(GcpeasyError):
    """Base exception for external tool failures"""
    pass


class ToolNotFoundError(ToolError):
    """Raised when the tool executable is not on PATH"""
    pass


class ToolTimeoutError(ToolError):
    """Raised when a captured command exceeds the configured timeout"""
    pass


class CommandFailedError(ToolError):
    """Raised when a command exits with a non-zero status"""

    def __init__(self, tool: str, args: List[str], returncode: int, stderr: str = ""):
        self.tool = tool
        self.args = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()

        message = f"{tool} {' '.join(self.args[:3])} failed with exit status {returncode}"
        if self.stderr:
            message += f": {self.stderr.splitlines()[-1]}"
        super().__init__(message)


class Collector:
    """Base class wrapping one external command-line tool"""

    name: str = "base"
    install_hint: str = ""

    def __init__(self, executable: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self.executable = executable or self.name
        self.timeout_seconds = timeout_seconds
        self._path: Optional[str] = None

    @property
    def path(self) -> str:
        """Find and cache the executable path"""
        if self._path is None:
            found = shutil.which(self.executable)
            if not found:
                message = f"{self.name} CLI not found."
                if self.install_hint:
                    message += f" {self.install_hint}"
                raise ToolNotFoundError(message)
            self._path = found
        return self._path

    def ensure_installed(self) -> str:
        """Return the executable path

        Raises:
            ToolNotFoundError: When the tool is not on PATH
        """
        return self.path

    def installed(self) -> bool:
        try:
            self.ensure_installed()
        except ToolNotFoundError:
            return False
        return True

    async def run(self, args: List[str], check: bool = True) -> str:
        """Run the tool and return its stdout

        Args:
            args: Tool arguments
            check: Raise on non-zero exit status

        Raises:
            ToolNotFoundError: When the tool is not installed
            ToolTimeoutError: When the configured timeout elapses
            CommandFailedError: When the tool exits non-zero and check is set
        """
        cmd = [self.path] + list(args)

        with PerformanceLogger("run", logger=logger, tool=self.name, args=args):
            try:
                async with timeout(self.timeout_seconds):
                    process = await asyncio.create_subprocess_exec(
                        *cmd,
                        stdout=asyncio.subprocess.PIPE,
                        stderr=asyncio.subprocess.PIPE,
                    )
                    stdout, stderr = await process.communicate()
            except asyncio.TimeoutError:
                raise ToolTimeoutError(
                    f"{self.name} command timed out after {self.timeout_seconds}s"
                ) from None
            except OSError as e:
                raise ToolNotFoundError(f"failed to start {self.name}: {e}") from e

        if check and process.returncode != 0:
            raise CommandFailedError(
                self.name, args, process.returncode,
                stderr.decode(errors="replace") if stderr else "",
            )

        return stdout.decode(errors="replace")

    async def succeeds(self, args: List[str]) -> bool:
        """Run the tool quietly and report whether it exited 0"""
        try:
            await self.run(args)
        except CommandFailedError:
            return False
        return True

    async def run_interactive(self, args: List[str]) -> int:
        """Run the tool attached to the terminal and return its exit status"""
        cmd = [self.path] + list(args)

        logger.debug("Running interactive command", tool=self.name, args=args)
        try:
            process = await asyncio.create_subprocess_exec(*cmd)
        except OSError as e:
            raise ToolNotFoundError(f"failed to start {self.name}: {e}") from e

        return await process.wait()

    async def stream(
        self,
        args: List[str],
        line_filter: Optional[Pattern[str]] = None,
        out: Optional[TextIO] = None,
    ) -> int:
        """Stream the tool's stdout, optionally keeping only matching lines

        Without a filter the process writes to the terminal directly. With a
        filter, stdout is split into lines and matching lines are written to
        `out` (default sys.stdout). stderr is always inherited.

        Returns:
            The tool's exit status
        """
        cmd = [self.path] + list(args)

        logger.debug(
            "Streaming command",
            tool=self.name,
            args=args,
            pattern=line_filter.pattern if line_filter else None,
        )
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE if line_filter else None,
            )
        except OSError as e:
            raise ToolNotFoundError(f"failed to start {self.name}: {e}") from e

        if line_filter is not None:
            try:
                await self._copy_matching(process.stdout, line_filter, out or sys.stdout)
            except BaseException:
                if process.returncode is None:
                    with contextlib.suppress(ProcessLookupError):
                        process.kill()
                    await process.wait()
                raise

        return await process.wait()

    @staticmethod
    async def _copy_matching(reader: asyncio.StreamReader, line_filter: Pattern[str], sink: TextIO) -> None:
        """Copy matching lines from reader to sink

        Reads fixed-size chunks and splits lines itself, so a single line
        longer than the StreamReader buffer limit is still handled.
        """
        pending: List[bytes] = []
        while True:
            chunk = await reader.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            *lines, tail = chunk.split(b"\n")
            for raw in lines:
                pending.append(raw)
                _write_if_matching(b"".join(pending) + b"\n", line_filter, sink)
                pending = []
            if tail:
                pending.append(tail)

        if pending:
            _write_if_matching(b"".join(pending), line_filter, sink)


def _write_if_matching(raw: bytes, line_filter: Pattern[str], sink: TextIO) -> None:
    line = raw.decode(errors="replace")
    if line_filter.search(line):
        sink.write(line)
        sink.flush()
