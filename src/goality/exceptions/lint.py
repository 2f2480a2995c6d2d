"""Lint-phase exceptions: tree scanning, tool invocation, project state."""

from pathlib import Path
from typing import List, Optional

from .base import GoalityError


class LintError(GoalityError):
    """Base class for errors raised while building or linting a project."""

    pass


class ScanError(LintError):
    """Raised when the project tree cannot be enumerated or read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot scan project path: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class InvocationStartError(LintError):
    """Raised when the external linter cannot be launched."""

    def __init__(self, command: List[str], reason: str, scope: Optional[str] = None):
        super().__init__(
            f"Unable to run linter: {command[0] if command else '<empty>'}",
            details={"command": " ".join(command), "reason": reason},
            scope=scope,
        )
        self.command = command
        self.reason = reason


class InvocationRuntimeError(LintError):
    """Raised when the linter fails for reasons other than an interruption."""

    def __init__(self, scope: str, reason: str, stderr: Optional[str] = None):
        details = {"reason": reason}
        if stderr:
            details["stderr"] = stderr.strip()
        super().__init__(f"Linter failed on '{scope}'", details=details, scope=scope)
        self.reason = reason
        self.stderr = stderr


class ResourceExhaustedError(InvocationRuntimeError):
    """Raised when a scope keeps being interrupted and cannot be split further."""

    def __init__(self, scope: str, attempts: int):
        super().__init__(
            scope,
            f"interrupted {attempts} times on a scope that cannot be subdivided",
        )
        self.attempts = attempts


class ProjectStateError(GoalityError):
    """Base class for operations issued in the wrong project phase."""

    pass


class ProjectSealedError(ProjectStateError):
    """Raised when issues are merged into a project whose views are built."""

    def __init__(self, path: str):
        super().__init__(
            "Project views are already built; no further issues can be added",
            details={"project": path},
        )


class ViewsNotBuiltError(ProjectStateError):
    """Raised when a project is queried before its lint phase completed."""

    def __init__(self, path: str):
        super().__init__(
            "Project views are not built yet; seal the project after linting",
            details={"project": path},
        )
