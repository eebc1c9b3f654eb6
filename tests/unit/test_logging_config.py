"""
Unit tests for logging helpers
"""

import logging

import pytest

from gcpeasy.config import Config
from gcpeasy.logging_config import (
    PerformanceLogger,
    configure_logging,
    log_command_execution,
    setup_logging_from_config,
)


class RecordingLogger:
    """Stands in for a structlog logger"""

    def __init__(self):
        self.records = []

    def debug(self, event, **kw):
        self.records.append(("debug", event, kw))

    def info(self, event, **kw):
        self.records.append(("info", event, kw))


class TestPerformanceLogger:
    """Tests for operation timing"""

    def test_success(self):
        log = RecordingLogger()
        with PerformanceLogger("run", logger=log, tool="kubectl"):
            pass

        assert [r[1] for r in log.records] == ["Operation started", "Operation completed"]
        assert log.records[1][2]["tool"] == "kubectl"
        assert log.records[1][2]["duration_seconds"] >= 0

    def test_failure_is_logged_and_propagated(self):
        log = RecordingLogger()
        with pytest.raises(RuntimeError):
            with PerformanceLogger("run", logger=log):
                raise RuntimeError("boom")

        assert log.records[-1][1] == "Operation failed"
        assert log.records[-1][2]["error"] == "boom"


def test_log_command_execution():
    log = RecordingLogger()
    log_command_execution("pod logs", {"follow": True}, log)

    level, event, fields = log.records[0]
    assert (level, event) == ("info", "Command executed")
    assert fields["command"] == "pod logs"
    assert fields["args"] == {"follow": True}


class TestConfigureLogging:
    """Tests for root logger setup"""

    def test_level_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "gcpeasy.log"
        configure_logging(level="debug", log_file=str(log_file))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert log_file.parent.is_dir()

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging(level="chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_debug_flag_overrides_config(self):
        setup_logging_from_config(Config(environ={"GCPEASY_LOGGING_LEVEL": "ERROR"}), debug=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_disabled(self):
        setup_logging_from_config(Config(environ={"GCPEASY_LOGGING_ENABLED": "false"}))
        assert logging.root.manager.disable == logging.CRITICAL
