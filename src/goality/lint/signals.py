"""Relay OS termination signals to the in-flight linter.

Handlers are installed once for the lifetime of the process. While a
supervisor is attached a signal kills its whole process tree before the
program exits; with nothing attached the previously installed handler runs
as if the relay did not exist.

A signal that lands while the linter is being started cannot kill anything
yet. Inside ``deferred()`` the interruption is recorded and the exit is held
back until the block ends, so the supervisor gets the chance to kill the
freshly started tree first.
"""

from __future__ import annotations

import signal
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)

EXIT_CODE = 1


class Interruptible(Protocol):
    def interrupt(self, reason: str) -> bool: ...


def _relayed_signals() -> list[signal.Signals]:
    signals = [signal.SIGINT, signal.SIGTERM]
    if sys.platform == "win32":
        signals.append(signal.SIGBREAK)
    return signals


class SignalRelay:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._target: Optional[Interruptible] = None
        self._previous: dict[int, Any] = {}
        self._installed = False
        self._deferring = False
        self._pending_exit = False

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def exit_pending(self) -> bool:
        return self._pending_exit

    def attach(self, target: Interruptible) -> None:
        self._install()
        with self._lock:
            self._target = target

    def detach(self, target: Interruptible) -> None:
        with self._lock:
            if self._target is target:
                self._target = None

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Hold back a signal-requested exit until the block has finished."""
        with self._lock:
            self._deferring = True
        try:
            yield
        finally:
            with self._lock:
                self._deferring = False
                pending = self._pending_exit
                self._pending_exit = False
            if pending:
                self.restore()
                raise SystemExit(EXIT_CODE)

    def _install(self) -> None:
        if self._installed:
            return
        if threading.current_thread() is not threading.main_thread():
            # signal.signal() only works from the main thread.
            logger.debug("Not on the main thread; OS signals will not be relayed")
            return
        for sig in _relayed_signals():
            self._previous[sig] = signal.signal(sig, self._handle)
        self._installed = True

    def _handle(self, signum: int, frame) -> None:
        with self._lock:
            if self._pending_exit:
                # Already exiting once the current start completes.
                return
            target = self._target
            self._target = None
            defer = target is not None and self._deferring
            if defer:
                self._pending_exit = True

        if target is None:
            previous = self._previous.get(signum)
            if callable(previous):
                previous(signum, frame)
            elif previous == signal.SIG_DFL:
                signal.signal(signum, signal.SIG_DFL)
                signal.raise_signal(signum)
            return

        logger.warning("Received signal %d; killing the running linter.", signum)
        target.interrupt(f"signal {signum}")
        if defer:
            return
        self.restore()
        raise SystemExit(EXIT_CODE)

    def restore(self) -> None:
        """Reinstall the handlers that were active before the relay."""
        if not self._installed:
            return
        for sig, previous in self._previous.items():
            signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()
        self._installed = False


# Process-wide relay shared by every supervisor.
signal_relay = SignalRelay()
