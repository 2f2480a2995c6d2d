"""Breadth-first, memory-aware linting of a project tree.

The root is linted recursively first. Whenever an invocation is interrupted
because of memory pressure the work is split: the directory's own files are
linted on their own, and each child directory is queued for a recursive run
of its own. In the worst case this degrades to one invocation per directory
instead of failing the run.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import LintOptions
from ..exceptions import ResourceExhaustedError
from ..logging_config import get_logger
from ..tree.models import Directory
from ..tree.project import Project
from .output import decode_output
from .supervisor import InvocationResult, ProcessSupervisor
from .watchdog import MemoryWatchdog

logger = get_logger(__name__)


class Invocation(Protocol):
    """Anything that runs one linter command and reports its result."""

    def run(self) -> InvocationResult: ...


SupervisorFactory = Callable[[list[str], str, str], Invocation]


@dataclass(frozen=True)
class InvocationRecord:
    scope: str
    recursive: bool
    interrupted: bool


def recursive_scope(directory: Directory) -> str:
    return f"{directory.path}/..."


class LintScheduler:
    """Drives linter invocations over a project, strictly one at a time."""

    def __init__(
        self,
        project: Project,
        options: Optional[LintOptions] = None,
        supervisor_factory: Optional[SupervisorFactory] = None,
        watchdog: Optional[MemoryWatchdog] = None,
    ):
        self.project = project
        self.options = options or LintOptions()
        self.watchdog = watchdog or MemoryWatchdog(
            threshold=self.options.memory_threshold,
            interval=self.options.sample_interval,
        )
        self.supervisor_factory = supervisor_factory or self._default_supervisor
        self.invocations: list[InvocationRecord] = []

    def _default_supervisor(self, command: list[str], cwd: str, scope: str) -> Invocation:
        return ProcessSupervisor(command, cwd=cwd, watchdog=self.watchdog, scope=scope)

    def run(self) -> None:
        logger.info("Linting project at path %s", self.project.path)
        todo: deque[Directory] = deque([self.project.root])
        while todo:
            current = todo.popleft()
            if not current.has_files(recursive=True):
                logger.debug("Skipping '%s': no source files.", current.path)
                continue

            if not self._lint(recursive_scope(current), recursive=True):
                continue

            logger.debug("Spreading lint effort for '%s' over sub-directories.", current.path)
            if current.has_files(recursive=False):
                self._lint_own_files(current)
            todo.extend(current.subdirectories.values())

    def _lint_own_files(self, directory: Directory) -> None:
        attempts = 1 + self.options.self_retries
        for attempt in range(1, attempts + 1):
            if not self._lint(directory.path, recursive=False):
                return
            logger.warning(
                "Own-files run on '%s' was interrupted (attempt %d/%d).",
                directory.path,
                attempt,
                attempts,
            )
        raise ResourceExhaustedError(directory.path, attempts)

    def _lint(self, scope: str, recursive: bool) -> bool:
        """Run the linter on ``scope``; returns True if it was interrupted."""
        logger.debug("Running linter on '%s'.", scope)
        command = self.options.command(scope)
        result = self.supervisor_factory(command, self.project.path, scope).run()
        self.invocations.append(InvocationRecord(scope, recursive, result.interrupted))
        if result.interrupted:
            logger.debug("Linter run was interrupted due to resource constraints.")
            return True

        output = decode_output(result.stdout, scope)
        if not self.project.linters:
            self.project.linters = list(output.enabled_linters)

        logger.debug("Registering issues found on '%s'.", scope)
        for issue in output.issues:
            self.project.add_issue(issue)
        return False
