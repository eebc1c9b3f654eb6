"""
Core data models for gcpeasy

Every value here is parsed fresh from gcloud or kubectl output on each
invocation and thrown away once the command finishes.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import GcpeasyError


class LogLevel(str, Enum):
    """Log levels understood by the log filter"""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class OutputFormat(str, Enum):
    """Listing output formats"""

    TEXT = "text"
    JSON = "json"


class Project(BaseModel):
    """A GCP project as reported by `gcloud projects list --format=json`"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_id: str = Field(..., alias="projectId")
    name: str = ""


class ClusterInfo(BaseModel):
    """A GKE cluster and the location it lives in"""

    name: str
    location: str

    def context_name(self, project_id: str) -> str:
        """kubectl context name written by `get-credentials`"""
        return f"gke_{project_id}_{self.location}_{self.name}"


class KubeContext(BaseModel):
    """Parts of a GKE kubectl context name"""

    project: str
    location: str
    cluster: str

    def matches(self, cluster: ClusterInfo, project_id: Optional[str] = None) -> bool:
        if project_id and self.project != project_id:
            return False
        return self.cluster == cluster.name and self.location == cluster.location


class PodRef(BaseModel):
    """A pod identified by namespace and name"""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, text: str) -> PodRef:
        """Parse the `namespace/name` form

        Raises:
            GcpeasyError: If the text is not exactly two non-empty parts
        """
        parts = text.split("/")
        if len(parts) != 2 or not all(parts):
            raise GcpeasyError(f"invalid pod format: {text}")
        return cls(namespace=parts[0], name=parts[1])


class PodInfo(BaseModel):
    """Status row for a single pod"""

    namespace: str
    name: str
    status: str
    ready: str = ""
    restarts: str = "0"
    age: str = ""
    node: str = ""
