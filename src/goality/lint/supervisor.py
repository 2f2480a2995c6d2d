"""Supervise a single linter invocation.

Three units run side by side while the linter is alive: the child process
itself, the memory watchdog thread, and the process-wide signal relay. Natural
exit and interruption race through a ``CompletionRace``; whichever settles it
first decides the outcome, and the kill lock guarantees that a kill is never
sent once the exit has been reported.

State machine of one invocation::

    IDLE -> STARTING -> RUNNING -> COMPLETED | INTERRUPTED | FAILED -> IDLE
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import InvocationRuntimeError, InvocationStartError
from ..logging_config import get_logger
from .process_group import ProcessGroup, default_process_group
from .signals import SignalRelay, signal_relay
from .watchdog import MemoryWatchdog

logger = get_logger(__name__)


class InvocationState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    FAILED = "failed"


class Outcome(Enum):
    EXITED = "exited"
    INTERRUPTED = "interrupted"


class CompletionRace:
    """Two-input, winner-take-all completion signal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._decided = threading.Event()
        self._winner: Optional[Outcome] = None
        self.reason: Optional[str] = None

    @property
    def winner(self) -> Optional[Outcome]:
        return self._winner

    def settle(self, outcome: Outcome, reason: Optional[str] = None) -> bool:
        """Record ``outcome`` unless another one already won. Returns True on a win."""
        with self._lock:
            if self._winner is not None:
                return False
            self._winner = outcome
            self.reason = reason
        self._decided.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._decided.wait(timeout)


@dataclass
class InvocationResult:
    stdout: bytes
    stderr: str
    interrupted: bool
    returncode: Optional[int] = None


class ProcessSupervisor:
    """Owns one linter invocation from start to exit or kill.

    Not safe for concurrent reuse: overlapping ``run()`` calls are rejected.
    Output is buffered in memory in full.
    """

    def __init__(
        self,
        command: list[str],
        cwd: Optional[str] = None,
        watchdog: Optional[MemoryWatchdog] = None,
        process_group: Optional[ProcessGroup] = None,
        relay: Optional[SignalRelay] = None,
        scope: Optional[str] = None,
    ):
        self.command = list(command)
        self.cwd = cwd
        self.watchdog = watchdog or MemoryWatchdog()
        self.process_group = process_group or default_process_group()
        self.relay = relay if relay is not None else signal_relay
        self.scope = scope or (self.command[-1] if self.command else "")

        self.state = InvocationState.IDLE
        self.outcome: Optional[InvocationState] = None

        self._run_lock = threading.Lock()
        # Orders start, exit reporting and kill. Re-entrant because the signal
        # relay runs on the main thread, possibly while start holds the lock.
        self._kill_lock = threading.RLock()
        self._race = CompletionRace()
        self._process = None

    def run(self) -> InvocationResult:
        if not self._run_lock.acquire(blocking=False):
            raise RuntimeError("ProcessSupervisor is already running an invocation")
        try:
            return self._run()
        finally:
            self.outcome = self.state
            self.state = InvocationState.IDLE
            self._process = None
            self._run_lock.release()

    def interrupt(self, reason: str) -> bool:
        """Kill the running linter tree unless it already exited.

        Returns True if this call won the race and the invocation is now
        interrupted. A request that arrives while the linter is still being
        started wins the race; the tree is killed as soon as the start returns.
        """
        with self._kill_lock:
            if self._process is not None and self._process.poll() is not None:
                # Exited but not yet reported; its output is complete.
                return False
            if not self._race.settle(Outcome.INTERRUPTED, reason):
                return False
            if self._process is not None:
                self._kill(reason)
            return True

    def _kill(self, reason: Optional[str]) -> None:
        logger.info("Killing linter due to %s.", reason)
        self.process_group.kill(self._process)
        logger.info("Killed.")

    def _on_pressure(self) -> None:
        self.interrupt("memory usage")

    def _run(self) -> InvocationResult:
        self._race = CompletionRace()
        done = threading.Event()

        self.state = InvocationState.STARTING
        self.relay.attach(self)
        watchdog_thread = threading.Thread(
            target=self.watchdog.watch,
            args=(done, self._on_pressure),
            name="goality-watchdog",
            daemon=True,
        )
        watchdog_thread.start()

        try:
            with self._kill_lock:
                if self._race.winner is not None:
                    self.state = InvocationState.INTERRUPTED
                    return InvocationResult(stdout=b"", stderr="", interrupted=True)
                with self.relay.deferred():
                    try:
                        self._process = self.process_group.start(self.command, self.cwd)
                    except OSError as e:
                        self.state = InvocationState.FAILED
                        logger.error("Unable to run linter: %s", e)
                        raise InvocationStartError(self.command, str(e), scope=self.scope) from e
                    if self._race.winner is not None:
                        # Interrupted while starting: nothing could be killed then.
                        self.state = InvocationState.INTERRUPTED
                        self._kill(self._race.reason)
                if self.state is InvocationState.STARTING:
                    self.state = InvocationState.RUNNING

            stdout, stderr_bytes = self._process.communicate()
            with self._kill_lock:
                exited_first = self._race.settle(Outcome.EXITED)
            returncode = self._process.returncode
        finally:
            # Completion barrier: neither the watchdog nor the relay may
            # outlive this invocation.
            done.set()
            watchdog_thread.join()
            self.relay.detach(self)

        stderr = stderr_bytes.decode("utf-8", errors="replace")
        if not exited_first:
            self.state = InvocationState.INTERRUPTED
            logger.debug("Linter run on '%s' was interrupted: %s.", self.scope, self._race.reason)
            return InvocationResult(stdout, stderr, interrupted=True, returncode=returncode)

        if returncode != 0:
            self.state = InvocationState.FAILED
            logger.error(
                "Linter exited with an error. Output was:\n%s Error was:\n%s",
                stdout.decode("utf-8", errors="replace"),
                stderr,
            )
            raise InvocationRuntimeError(self.scope, f"exit status {returncode}", stderr)

        self.state = InvocationState.COMPLETED
        return InvocationResult(stdout, stderr, interrupted=False, returncode=returncode)
