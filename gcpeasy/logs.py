"""
Pod log viewing

Level filtering keeps only lines mentioning the level's keywords. Viewing
several pods starts one task per pod; their output shares stdout and may
interleave freely.
"""

import asyncio
import re
from typing import List, Optional, Pattern, Sequence

import structlog
from rich.console import Console

from .collectors.kubectl import KubectlCollector
from .errors import GcpeasyError
from .models import LogLevel, PodRef
from .renderers.terminal import echo
from .validation import InputValidator

logger = structlog.get_logger(__name__)

LOG_LEVEL_PATTERNS = {
    LogLevel.ERROR: ["ERROR", "FATAL", "Exception", "Error"],
    LogLevel.WARN: ["WARN", "WARNING"],
    LogLevel.INFO: ["INFO"],
    LogLevel.DEBUG: ["DEBUG"],
}


def get_log_level_patterns(level: Optional[str]) -> List[str]:
    """Keywords for a level name; unknown or empty levels have none"""
    try:
        normalised = InputValidator.validate_log_level(level)
    except GcpeasyError:
        return []
    if normalised is None:
        return []
    return list(LOG_LEVEL_PATTERNS[normalised])


def build_line_filter(level: Optional[str]) -> Optional[Pattern[str]]:
    """Case-insensitive alternation of the level's keywords, or None"""
    patterns = get_log_level_patterns(level)
    if not patterns:
        return None
    return re.compile("|".join(re.escape(p) for p in patterns), re.IGNORECASE)


class LogViewer:
    """Streams logs for one or many pods"""

    def __init__(self, kubectl: KubectlCollector, console: Console):
        self.kubectl = kubectl
        self.console = console

    def _announce(self, level: Optional[str], follow: bool, multiple: bool = False) -> None:
        if level:
            echo(self.console, f"📋 Filtering logs by level: {level.upper()}")

        if follow:
            if multiple:
                echo(self.console, "🔄 Following logs from multiple pods (press Ctrl+C to stop)...")
            else:
                echo(self.console, "🔄 Following logs (press Ctrl+C to stop)...")
        else:
            if multiple:
                echo(self.console, "📋 Fetching logs from multiple pods...")
            else:
                echo(self.console, "📋 Fetching logs...")
        echo(self.console)

    async def view(self, pod: PodRef, follow: bool = False, level: Optional[str] = None) -> None:
        """Stream one pod's logs

        Raises:
            GcpeasyError: When kubectl exits with a non-zero status
        """
        self._announce(level, follow)

        returncode = await self.kubectl.stream_logs(pod, follow=follow, line_filter=build_line_filter(level))
        if returncode != 0:
            raise GcpeasyError(f"kubectl logs exited with status {returncode}")

    async def view_many(
        self,
        pods: Sequence[PodRef],
        follow: bool = False,
        level: Optional[str] = None,
    ) -> None:
        """Stream several pods' logs concurrently

        Waits for every pod, then raises the first failure (in pod order)
        prefixed with the pod it came from.
        """
        if not pods:
            raise GcpeasyError("no pods provided")

        self._announce(level, follow, multiple=True)

        tasks = [asyncio.create_task(self.view(pod, follow, level)) for pod in pods]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        errors = [
            (pod, result) for pod, result in zip(pods, results)
            if isinstance(result, Exception)
        ]
        for pod, error in errors:
            logger.debug("Log stream failed", pod=str(pod), error=str(error))

        if errors:
            pod, error = errors[0]
            raise GcpeasyError(f"{pod}: {error}") from error
