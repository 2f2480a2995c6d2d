"""Start a child process in its own group and kill the whole group at once.

The linter spawns helper processes of its own; killing only the direct child
would leave them running. Each platform gets one implementation of the same
two operations.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


class ProcessGroup(ABC):
    """Platform capability: start-with-own-group and kill-whole-group."""

    @abstractmethod
    def start(self, command: list[str], cwd: Optional[str] = None) -> subprocess.Popen:
        """Start ``command`` with piped stdout/stderr in a fresh process group."""

    @abstractmethod
    def kill(self, process: subprocess.Popen) -> None:
        """Kill ``process`` and everything it spawned. A no-op if already gone."""


class PosixProcessGroup(ProcessGroup):
    def start(self, command: list[str], cwd: Optional[str] = None) -> subprocess.Popen:
        return subprocess.Popen(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )

    def kill(self, process: subprocess.Popen) -> None:
        # The new session makes the child the leader of a group whose id is its pid.
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.debug("Process group %d already finished", process.pid)


class WindowsProcessTree(ProcessGroup):
    def start(self, command: list[str], cwd: Optional[str] = None) -> subprocess.Popen:
        return subprocess.Popen(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            creationflags=subprocess.CREATE_NEW_PROCESS_GROUP,
        )

    def kill(self, process: subprocess.Popen) -> None:
        result = subprocess.run(
            ["TASKKILL", "/T", "/F", "/PID", str(process.pid)],
            capture_output=True,
            text=True,
        )
        logger.debug("TASKKILL exited with %d: %s", result.returncode, result.stdout.strip())
        if result.returncode != 0 and process.poll() is None:
            logger.error("Failed to kill linter process tree: %s", result.stderr.strip())


def default_process_group() -> ProcessGroup:
    if sys.platform == "win32":
        return WindowsProcessTree()
    return PosixProcessGroup()
