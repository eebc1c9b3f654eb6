"""
Unit tests for log level filtering and log viewing
"""

import asyncio

import pytest

from conftest import output_of
from gcpeasy.errors import GcpeasyError
from gcpeasy.logs import LogViewer, build_line_filter, get_log_level_patterns
from gcpeasy.models import PodRef

WEB_1 = PodRef(namespace="default", name="web-1")
WEB_2 = PodRef(namespace="default", name="web-2")


class TestLevelPatterns:
    """Tests for level keyword lookup"""

    def test_known_levels(self):
        assert get_log_level_patterns("error") == ["ERROR", "FATAL", "Exception", "Error"]
        assert get_log_level_patterns("warn") == ["WARN", "WARNING"]
        assert get_log_level_patterns("info") == ["INFO"]
        assert get_log_level_patterns("debug") == ["DEBUG"]

    def test_aliases(self):
        assert get_log_level_patterns("warning") == get_log_level_patterns("warn")
        assert get_log_level_patterns("ERROR") == get_log_level_patterns("error")

    def test_unknown_or_empty(self):
        assert get_log_level_patterns("trace") == []
        assert get_log_level_patterns("") == []
        assert get_log_level_patterns(None) == []


class TestLineFilter:
    """Tests for the compiled line filter"""

    def test_no_level_no_filter(self):
        assert build_line_filter(None) is None
        assert build_line_filter("verbose") is None

    def test_error_filter(self):
        line_filter = build_line_filter("error")
        assert line_filter.search("2024-01-01 ERROR something broke")
        assert line_filter.search("Unhandled exception in worker")
        assert line_filter.search("fatal: disk full")
        assert not line_filter.search("INFO all good")

    def test_warn_filter_is_case_insensitive(self):
        line_filter = build_line_filter("warn")
        assert line_filter.search("[warning] low memory")
        assert not line_filter.search("DEBUG details")


class TestLogViewer:
    """Tests for single and multi-pod log streaming"""

    def test_view(self, kubectl, console):
        asyncio.run(LogViewer(kubectl, console).view(WEB_1, follow=True, level="error"))

        args, line_filter = kubectl.streamed[0]
        assert args == ["logs", "web-1", "-n", "default", "-f"]
        assert line_filter.search("ERROR")

        output = output_of(console)
        assert "📋 Filtering logs by level: ERROR" in output
        assert "🔄 Following logs (press Ctrl+C to stop)..." in output

    def test_view_failure(self, kubectl, console):
        kubectl.stream_codes[("logs", "web-1", "-n", "default")] = 1
        with pytest.raises(GcpeasyError, match="kubectl logs exited with status 1"):
            asyncio.run(LogViewer(kubectl, console).view(WEB_1))

    def test_view_many(self, kubectl, console):
        asyncio.run(LogViewer(kubectl, console).view_many([WEB_1, WEB_2]))

        assert sorted(args[1] for args, _ in kubectl.streamed) == ["web-1", "web-2"]
        assert "📋 Fetching logs from multiple pods..." in output_of(console)

    def test_view_many_reports_failing_pod(self, kubectl, console):
        """Test that every pod is waited for and the failure names its pod"""
        kubectl.stream_codes[("logs", "web-2", "-n", "default")] = 1

        with pytest.raises(GcpeasyError, match="default/web-2: kubectl logs exited with status 1"):
            asyncio.run(LogViewer(kubectl, console).view_many([WEB_1, WEB_2]))
        assert len(kubectl.streamed) == 2

    def test_view_many_without_pods(self, kubectl, console):
        with pytest.raises(GcpeasyError, match="no pods provided"):
            asyncio.run(LogViewer(kubectl, console).view_many([]))
