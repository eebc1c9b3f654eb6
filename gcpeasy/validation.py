"""
Input validation for gcpeasy

Values typed by the user are checked here before they are handed to gcloud
or kubectl as arguments.
"""

import re
from typing import Optional

import structlog

from .errors import GcpeasyError
from .models import LogLevel, OutputFormat, PodRef

logger = structlog.get_logger(__name__)


class ValidationError(GcpeasyError):
    """Raised when input validation fails"""
    pass


class InputValidator:
    """Validates user inputs before processing"""

    # Kubernetes naming rules
    # - namespaces are RFC 1123 DNS labels (max 63)
    # - pod names are RFC 1123 DNS subdomains (dots allowed, max 253)
    NAMESPACE_PATTERN = re.compile(r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?$')
    POD_NAME_PATTERN = re.compile(r'^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$')

    MAX_NAMESPACE_LENGTH = 63
    MAX_POD_NAME_LENGTH = 253

    LOG_LEVEL_ALIASES = {
        "error": LogLevel.ERROR,
        "err": LogLevel.ERROR,
        "warn": LogLevel.WARN,
        "warning": LogLevel.WARN,
        "info": LogLevel.INFO,
        "debug": LogLevel.DEBUG,
    }

    @classmethod
    def validate_namespace(cls, namespace: str) -> str:
        """Validate a Kubernetes namespace

        Raises:
            ValidationError: If namespace is invalid
        """
        if not namespace:
            raise ValidationError("Namespace cannot be empty")

        if len(namespace) > cls.MAX_NAMESPACE_LENGTH:
            raise ValidationError(
                f"Namespace too long: {len(namespace)} chars "
                f"(max {cls.MAX_NAMESPACE_LENGTH})"
            )

        if not cls.NAMESPACE_PATTERN.match(namespace):
            raise ValidationError(
                f"Invalid namespace '{namespace}': must match pattern "
                f"{cls.NAMESPACE_PATTERN.pattern}"
            )

        return namespace

    @classmethod
    def validate_pod_name(cls, name: str) -> str:
        """Validate a pod name

        Raises:
            ValidationError: If name is invalid
        """
        if not name:
            raise ValidationError("Pod name cannot be empty")

        if len(name) > cls.MAX_POD_NAME_LENGTH:
            raise ValidationError(
                f"Pod name too long: {len(name)} chars "
                f"(max {cls.MAX_POD_NAME_LENGTH})"
            )

        if not cls.POD_NAME_PATTERN.match(name):
            raise ValidationError(
                f"Invalid pod name '{name}': must match pattern "
                f"{cls.POD_NAME_PATTERN.pattern}"
            )

        return name

    @classmethod
    def validate_pod_ref(cls, text: str) -> PodRef:
        """Parse and validate a `namespace/name` pod reference"""
        try:
            pod = PodRef.parse(text)
        except GcpeasyError as e:
            raise ValidationError(str(e)) from e

        cls.validate_namespace(pod.namespace)
        cls.validate_pod_name(pod.name)
        return pod

    @classmethod
    def validate_log_level(cls, level: Optional[str]) -> Optional[LogLevel]:
        """Normalise a log level name, accepting common aliases"""
        if level is None or level == "":
            return None

        if isinstance(level, LogLevel):
            return level

        normalised = cls.LOG_LEVEL_ALIASES.get(level.lower())
        if normalised is None:
            raise ValidationError(
                f"Invalid log level '{level}'. "
                f"Valid options: {', '.join(sorted(cls.LOG_LEVEL_ALIASES))}"
            )
        return normalised

    @classmethod
    def validate_output_format(cls, format: str) -> OutputFormat:
        """Validate output format parameter

        Raises:
            ValidationError: If format is invalid
        """
        try:
            return OutputFormat(format)
        except ValueError:
            valid = ", ".join(f.value for f in OutputFormat)
            raise ValidationError(
                f"Invalid output format '{format}'. Valid options: {valid}"
            ) from None
