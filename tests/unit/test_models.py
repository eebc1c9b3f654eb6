"""
Unit tests for data models

Tests pydantic models used across gcpeasy.
"""

import pytest
from pydantic import ValidationError

from gcpeasy.errors import GcpeasyError
from gcpeasy.models import ClusterInfo, KubeContext, LogLevel, PodInfo, PodRef, Project


class TestProject:
    """Tests for Project model"""

    def test_from_gcloud_json(self):
        """Test that gcloud's camelCase keys are accepted and extras ignored"""
        project = Project.model_validate({
            "projectId": "my-project",
            "name": "My Project",
            "projectNumber": "1234",
            "lifecycleState": "ACTIVE",
        })
        assert project.project_id == "my-project"
        assert project.name == "My Project"

    def test_populate_by_field_name(self):
        project = Project(project_id="my-project")
        assert project.project_id == "my-project"
        assert project.name == ""

    def test_project_id_required(self):
        with pytest.raises(ValidationError):
            Project.model_validate({"name": "nameless"})


class TestClusterInfo:
    """Tests for ClusterInfo model"""

    def test_context_name(self):
        cluster = ClusterInfo(name="prod", location="us-central1")
        assert cluster.context_name("my-project") == "gke_my-project_us-central1_prod"


class TestKubeContext:
    """Tests for KubeContext matching"""

    def test_matches_name_and_location(self):
        context = KubeContext(project="my-project", location="us-central1", cluster="prod")
        assert context.matches(ClusterInfo(name="prod", location="us-central1"))
        assert not context.matches(ClusterInfo(name="prod", location="us-east1"))
        assert not context.matches(ClusterInfo(name="staging", location="us-central1"))

    def test_project_checked_when_given(self):
        context = KubeContext(project="my-project", location="us-central1", cluster="prod")
        cluster = ClusterInfo(name="prod", location="us-central1")
        assert context.matches(cluster, "my-project")
        assert not context.matches(cluster, "other-project")


class TestPodRef:
    """Tests for PodRef parsing and display"""

    def test_str(self):
        assert str(PodRef(namespace="default", name="web-1")) == "default/web-1"

    def test_parse(self):
        pod = PodRef.parse("production/web-7d9f8c6b5-x2x4q")
        assert pod.namespace == "production"
        assert pod.name == "web-7d9f8c6b5-x2x4q"

    def test_parse_rejects_bad_formats(self):
        """Test that anything other than two non-empty parts is rejected"""
        for text in ["web-1", "a/b/c", "/web-1", "default/", ""]:
            with pytest.raises(GcpeasyError, match="invalid pod format"):
                PodRef.parse(text)


class TestPodInfo:
    """Tests for PodInfo model"""

    def test_defaults(self):
        pod = PodInfo(namespace="default", name="web-1", status="Running")
        assert pod.restarts == "0"
        assert pod.node == ""


def test_log_level_values():
    assert [level.value for level in LogLevel] == ["error", "warn", "info", "debug"]
