"""
Unit tests for terminal and JSON renderers
"""

import json

from gcpeasy.health import HealthCheckResult
from gcpeasy.models import ClusterInfo, PodInfo, Project
from gcpeasy.renderers.json_renderer import JSONRenderer
from gcpeasy.renderers.terminal import TerminalRenderer, checkbox

PROJECTS = [
    Project(project_id="my-project", name="My Project"),
    Project(project_id="other-project", name="Other"),
]

PODS = [
    PodInfo(namespace="default", name="web-1", status="Running", ready="1/1", restarts="0", age="2d", node="node-a"),
    PodInfo(
        namespace="a-very-long-namespace-name",
        name="web-2",
        status="CrashLoopBackOff",
        ready="0/1",
        restarts="5",
        age="1h",
        node="gke-prod-default-pool-1234abcd-xyz9",
    ),
]


def test_checkbox():
    assert checkbox(True) == "- [x]"
    assert checkbox(False) == "- [ ]"


class TestTerminalRenderer:
    """Tests for terminal output"""

    def test_projects(self):
        output = TerminalRenderer(colors_enabled=False, width=100).render_projects(PROJECTS, "other-project")
        assert output.splitlines() == [
            "- [ ] 1. my-project (My Project)",
            "- [x] 2. other-project (Other)",
        ]

    def test_projects_with_status(self):
        output = TerminalRenderer(colors_enabled=False, width=100).render_projects(
            PROJECTS, "my-project", {"my-project": "✓ Accessible"}
        )
        assert output.splitlines() == [
            "- [x] 1. my-project (My Project) ✓ Accessible",
            "- [ ] 2. other-project (Other)",
        ]

    def test_clusters(self):
        clusters = [ClusterInfo(name="prod", location="us-central1"), ClusterInfo(name="staging", location="us-east1")]
        output = TerminalRenderer(colors_enabled=False, width=100).render_clusters(clusters, [False, True])
        assert output.splitlines() == [
            "- [ ] 1. prod (us-central1)",
            "- [x] 2. staging (us-east1)",
        ]

    def test_long_rows_are_not_wrapped(self):
        """Rows wider than the terminal stay on one line"""
        project = Project(project_id="acme-payments-production-eu-1", name="ACME Payments Production (Europe West)")
        output = TerminalRenderer(colors_enabled=False, width=80).render_projects(
            [project], "", {"acme-payments-production-eu-1": "✓ Connected (has clusters)"}
        )
        lines = output.splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("- [ ] 1. acme-payments-production-eu-1")
        assert lines[0].endswith("✓ Connected (has clusters)")

    def test_plain_pod_table(self):
        output = TerminalRenderer(colors_enabled=False, width=100).render_pods(PODS)
        assert "NAMESPACE" in output
        assert "web-1" in output
        assert "RESTARTS" not in output

    def test_detailed_pod_table_truncates_long_cells(self):
        output = TerminalRenderer(colors_enabled=False, width=120).render_pods(PODS, detailed=True)
        assert "CrashLoopBackOff" in output
        assert "a-very-long-namespace-name" not in output
        assert "gke-prod-default-pool-1234abcd-xyz9" not in output
        assert "…" in output

    def test_health(self):
        results = [
            HealthCheckResult(name="gcloud Installation", status="pass", message="found"),
            HealthCheckResult(name="kubectl Context", status="warn", message="No current context"),
        ]
        output = TerminalRenderer(colors_enabled=False, width=100).render_health(results)
        assert "gcloud Installation" in output
        assert "warn" in output

    def test_status_styles(self):
        renderer = TerminalRenderer(colors_enabled=True, width=100)
        assert renderer._get_status_style("Running") == "green"
        assert renderer._get_status_style("CrashLoopBackOff") == "red"
        assert renderer._get_status_style("Mystery") == "white"
        assert TerminalRenderer(colors_enabled=False, width=100)._get_status_style("Running") == "white"


class TestJSONRenderer:
    """Tests for JSON output"""

    def test_projects(self):
        data = json.loads(JSONRenderer().render_projects(PROJECTS, "my-project", {"my-project": "✓ Accessible"}))
        assert data["command"] == "env list"
        assert "timestamp" in data
        assert data["projects"][0] == {
            "project_id": "my-project",
            "name": "My Project",
            "current": True,
            "status": "✓ Accessible",
        }
        assert data["projects"][1]["status"] is None

    def test_projects_without_current(self):
        data = json.loads(JSONRenderer().render_projects(PROJECTS, ""))
        assert data["current_project"] is None
        assert "status" not in data["projects"][0]

    def test_clusters(self):
        clusters = [ClusterInfo(name="prod", location="us-central1")]
        data = json.loads(JSONRenderer().render_clusters("my-project", clusters, [False]))
        assert data["current_context"] is None
        assert data["clusters"] == [{"name": "prod", "location": "us-central1", "current": False}]

    def test_pods(self):
        data = json.loads(JSONRenderer().render_pods(PODS))
        assert data["total"] == 2
        assert data["pods"][0]["node"] == "node-a"
