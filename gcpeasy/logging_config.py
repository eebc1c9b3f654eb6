"""
Logging configuration for gcpeasy

Features:
- Structured logging with structlog
- Optional file output with size-based rotation
- Timing of external tool invocations
"""

import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    max_size_mb: int = 10,
    backup_count: int = 3,
    enable_colors: bool = True,
) -> None:
    """Configure logging for gcpeasy

    Log records go to stderr so they never mix with command output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (None = stderr only)
        max_size_mb: Max log file size in MB before rotation
        backup_count: Number of backup files to keep
        enable_colors: Enable colored console output
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = level_map.get(str(level).upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if enable_colors and sys.stderr.isatty():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager that logs how long an operation took"""

    def __init__(self, operation: str, logger: Optional[structlog.BoundLogger] = None, **context):
        self.operation = operation
        self.logger = logger or get_logger("performance")
        self.context = context
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.debug("Operation started", operation=self.operation, **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.monotonic() - self.start_time

        if exc_type is None:
            self.logger.debug(
                "Operation completed",
                operation=self.operation,
                duration_seconds=round(duration, 3),
                **self.context,
            )
        else:
            self.logger.debug(
                "Operation failed",
                operation=self.operation,
                duration_seconds=round(duration, 3),
                error=str(exc_val),
                **self.context,
            )


def log_command_execution(
    command: str,
    args: dict,
    logger: Optional[structlog.BoundLogger] = None,
) -> None:
    """Log command execution for audit trail

    Args:
        command: Command name (e.g. "pod logs")
        args: Command arguments
        logger: Logger instance
    """
    log = logger or get_logger("audit")

    log.info(
        "Command executed",
        command=command,
        args=args,
        user=os.getenv("USER", "unknown"),
    )


def setup_logging_from_config(config, debug: bool = False) -> None:
    """Setup logging from a Config instance

    Args:
        config: gcpeasy Config
        debug: Force DEBUG level (the --debug flag)
    """
    if not config.get("logging.enabled", True) and not debug:
        logging.disable(logging.CRITICAL)
        return

    configure_logging(
        level="DEBUG" if debug else config.get("logging.level", "WARNING"),
        log_file=config.get("logging.file"),
        max_size_mb=config.get("logging.max_size_mb", 10),
        backup_count=config.get("logging.backup_count", 3),
        enable_colors=config.get("output.colors_enabled", True),
    )
