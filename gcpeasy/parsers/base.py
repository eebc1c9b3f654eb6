"""
Parsers for gcloud and kubectl output

Parsers turn captured command output into model objects. They are
deterministic and side-effect free; filtering on namespaces or statuses
is left to the callers.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import structlog

from ..errors import GcpeasyError
from ..models import ClusterInfo, KubeContext, PodInfo, PodRef, Project

logger = structlog.get_logger(__name__)


class ParserError(GcpeasyError):
    """Raised when command output cannot be understood"""
    pass


class Parser(ABC):
    """Abstract base class for all parsers"""

    @abstractmethod
    def feed(self, text: str) -> List[Any]:
        """Parse captured output into model objects

        Raises:
            ParserError: When parsing fails
        """
        pass

    @staticmethod
    def _lines(text: str) -> List[str]:
        """Non-empty lines of the output"""
        return [line for line in text.strip().splitlines() if line.strip()]


class ProjectListParser(Parser):
    """Parser for `gcloud projects list --format=json`"""

    def feed(self, text: str) -> List[Project]:
        if not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParserError(f"failed to parse projects JSON: {e}") from e

        if not isinstance(data, list):
            raise ParserError("failed to parse projects JSON: expected a list")

        projects = []
        for item in data:
            if not isinstance(item, dict) or not item.get("projectId"):
                logger.debug("Skipping project entry without projectId", entry=item)
                continue
            projects.append(Project.model_validate(item))
        return projects


class ClusterListParser(Parser):
    """Parser for `gcloud container clusters list --format=value(name,location)`"""

    def feed(self, text: str) -> List[ClusterInfo]:
        clusters = []
        for line in self._lines(text):
            parts = line.split()
            if len(parts) < 2:
                logger.debug("Skipping malformed cluster line", line=line)
                continue
            clusters.append(ClusterInfo(name=parts[0], location=parts[1]))
        return clusters


class PodPhaseParser(Parser):
    """Parser for the NAMESPACE/NAME/STATUS custom-columns pod listing

    Returns (PodRef, phase) pairs.
    """

    def feed(self, text: str) -> List[tuple]:
        rows = []
        for line in self._lines(text):
            fields = line.split()
            if len(fields) < 3:
                continue
            rows.append((PodRef(namespace=fields[0], name=fields[1]), fields[2]))
        return rows


class PodTableParser(Parser):
    """Parser for `kubectl get pods --all-namespaces -o wide --no-headers`

    Columns: NAMESPACE NAME READY STATUS RESTARTS AGE IP NODE ...
    Recent kubectl versions append the time since the last restart to the
    restart count, e.g. `3 (5m ago)`.
    """

    ROW_PATTERN = re.compile(
        r'^(?P<namespace>\S+)\s+(?P<name>\S+)\s+(?P<ready>\S+)\s+(?P<status>\S+)\s+'
        r'(?P<restarts>\d+)(?:\s+\([^)]*\))?\s+(?P<age>\S+)'
        r'(?:\s+(?P<ip>\S+)\s+(?P<node>\S+))?'
    )

    def feed(self, text: str) -> List[PodInfo]:
        pods = []
        for line in self._lines(text):
            match = self.ROW_PATTERN.match(line.strip())
            if not match:
                logger.debug("Skipping malformed pod line", line=line)
                continue
            pods.append(PodInfo(
                namespace=match.group("namespace"),
                name=match.group("name"),
                ready=match.group("ready"),
                status=match.group("status"),
                restarts=match.group("restarts"),
                age=match.group("age"),
                node=match.group("node") or "",
            ))
        return pods


def parse_gke_context(context: Optional[str]) -> Optional[KubeContext]:
    """Split a `gke_<project>_<location>_<cluster>` context name

    Project IDs, locations and cluster names never contain underscores, so
    the name splits cleanly. Anything else returns None.
    """
    if not context:
        return None

    parts = context.strip().split("_")
    if len(parts) != 4 or parts[0] != "gke" or not all(parts[1:]):
        return None

    return KubeContext(project=parts[1], location=parts[2], cluster=parts[3])
