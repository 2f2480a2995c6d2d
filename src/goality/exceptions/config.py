"""Configuration exceptions: paths, option values, conflicting sources."""

from pathlib import Path
from typing import Any, List

from .base import GoalityError


class ConfigurationError(GoalityError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ConflictingConfigError(ConfigurationError):
    """Raised when more than one linter configuration file is specified."""

    def __init__(self, config_paths: List[str]):
        super().__init__(
            "Conflicting options: multiple configuration files were specified",
            details={"config_paths": ", ".join(config_paths)},
        )
        self.config_paths = config_paths
