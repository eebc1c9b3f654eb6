"""
Configuration management for gcpeasy

Supports configuration from:
1. Default values (code)
2. Environment variables (GCPEASY_*)

gcpeasy never reads or writes a configuration file; everything else comes
from the state gcloud and kubectl already keep.
"""

import copy
import os
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

ENV_PREFIX = "GCPEASY_"


class Config:
    """Configuration manager for gcpeasy"""

    # Default configuration
    DEFAULTS = {
        # External tools
        "tools": {
            "gcloud": "gcloud",
            "kubectl": "kubectl",
            "timeout_seconds": None,  # None = wait forever
        },
        # Pod discovery
        "kubernetes": {
            "system_namespaces": ["kube-system", "kube-public", "kube-node-lease", "gke-system"],
            "detailed_statuses": ["Running", "Pending", "CrashLoopBackOff", "Error"],
        },
        # Output settings
        "output": {
            "colors_enabled": True,
        },
        # Logging
        "logging": {
            "enabled": True,
            "level": "WARNING",  # DEBUG, INFO, WARNING, ERROR
            "file": None,
            "max_size_mb": 10,
            "backup_count": 3,
        },
    }

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """Initialize configuration

        Args:
            environ: Environment mapping to read (default: os.environ)
        """
        self.environ = os.environ if environ is None else environ
        self.config = self._load_configuration()

    def _load_configuration(self) -> Dict[str, Any]:
        """Merge defaults with environment overrides"""
        config = copy.deepcopy(self.DEFAULTS)
        return self._deep_merge(config, self._load_from_env())

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables

        Environment variables use the format:
        GCPEASY_SECTION_KEY=value

        Example: GCPEASY_TOOLS_KUBECTL=/usr/local/bin/kubectl

        Returns:
            Configuration dictionary from environment
        """
        config: Dict[str, Any] = {}

        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split("_")
            if len(parts) < 2:
                continue

            section = parts[0]
            setting = "_".join(parts[1:])

            config.setdefault(section, {})[setting] = self._parse_env_value(value)
            logger.debug("Configuration override from environment", key=key)

        return config

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to bool, number, or string"""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base: Dict, overlay: Dict) -> Dict:
        """Deep merge two dictionaries (overlay takes precedence)"""
        result = copy.deepcopy(base)

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with dot notation

        Args:
            key: Configuration key (e.g., "tools.kubectl")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config

        try:
            for k in key.split("."):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_list(self, key: str) -> List[str]:
        """Get a list value; comma-separated strings are split"""
        value = self.get(key, [])
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return list(value or [])

    def get_timeout(self) -> Optional[float]:
        """Per-command timeout in seconds, or None when disabled"""
        value = self.get("tools.timeout_seconds")
        if isinstance(value, bool) or not value:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid timeout", value=value)
            return None

    def set(self, key: str, value: Any) -> None:
        """Set configuration value with dot notation"""
        keys = key.split(".")
        config = self.config

        for k in keys[:-1]:
            config = config.setdefault(k, {})

        config[keys[-1]] = value


# Global config instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get global config instance"""
    global _global_config
    if _global_config is None:
        _global_config = Config()
    return _global_config


def reload_config() -> Config:
    """Reload configuration from the environment"""
    global _global_config
    _global_config = Config()
    return _global_config
