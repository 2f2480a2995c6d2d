"""Exception hierarchy for goality."""

from .base import GoalityError
from .config import (
    ConfigurationError,
    ConflictingConfigError,
    InvalidConfigError,
    InvalidPathError,
)
from .lint import (
    InvocationRuntimeError,
    InvocationStartError,
    LintError,
    ProjectSealedError,
    ProjectStateError,
    ResourceExhaustedError,
    ScanError,
    ViewsNotBuiltError,
)

__all__ = [
    "GoalityError",
    "ConfigurationError",
    "ConflictingConfigError",
    "InvalidConfigError",
    "InvalidPathError",
    "LintError",
    "ScanError",
    "InvocationStartError",
    "InvocationRuntimeError",
    "ResourceExhaustedError",
    "ProjectStateError",
    "ProjectSealedError",
    "ViewsNotBuiltError",
]
