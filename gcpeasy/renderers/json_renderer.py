"""
JSON output renderer for automation and scripting

Used by the listing commands when `--output json` is given.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from ..models import ClusterInfo, PodInfo, Project


class JSONRenderer:
    """Renders listings as JSON"""

    def _envelope(self, command: str, **payload: Any) -> str:
        output = {
            "command": command,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **payload,
        }
        return json.dumps(output, indent=2, default=str)

    def render_projects(
        self,
        projects: Sequence[Project],
        current_project: str,
        statuses: Optional[Dict[str, str]] = None,
    ) -> str:
        items = []
        for project in projects:
            item = {
                "project_id": project.project_id,
                "name": project.name,
                "current": project.project_id == current_project,
            }
            if statuses is not None:
                item["status"] = statuses.get(project.project_id)
            items.append(item)

        return self._envelope("env list", current_project=current_project or None, projects=items)

    def render_clusters(
        self,
        project_id: str,
        clusters: Sequence[ClusterInfo],
        current: Sequence[bool],
        current_context: str = "",
    ) -> str:
        return self._envelope(
            "cluster list",
            project_id=project_id,
            current_context=current_context or None,
            clusters=[
                {**cluster.model_dump(), "current": is_current}
                for cluster, is_current in zip(clusters, current)
            ],
        )

    def render_pods(self, pods: Sequence[PodInfo]) -> str:
        return self._envelope(
            "pod list",
            total=len(pods),
            pods=[pod.model_dump() for pod in pods],
        )
