"""Tests for lint/supervisor.py - one supervised linter invocation.

These tests run real child processes (the current Python interpreter) so
that start-up, exit reporting and process-group kills are exercised for real.
"""

import contextlib
import signal
import subprocess
import sys
import time

import psutil
import pytest

from goality.exceptions import InvocationRuntimeError, InvocationStartError
from goality.lint.process_group import PosixProcessGroup, ProcessGroup
from goality.lint.signals import SignalRelay
from goality.lint.supervisor import (
    CompletionRace,
    InvocationState,
    Outcome,
    ProcessSupervisor,
)
from goality.lint.watchdog import MemorySample, MemoryWatchdog


class RecordingRelay:
    """Stands in for the process-wide signal relay."""

    def __init__(self):
        self.events = []

    def attach(self, target):
        self.events.append(("attach", target))

    def detach(self, target):
        self.events.append(("detach", target))

    def deferred(self):
        return contextlib.nullcontext()


class RecordingGroup(ProcessGroup):
    """Never starts anything; remembers what it was asked to kill."""

    def __init__(self):
        self.killed = []

    def start(self, command, cwd=None):
        raise AssertionError("not expected to start")

    def kill(self, process):
        self.killed.append(process)


def _python(code):
    return [sys.executable, "-c", code]


def _calm_watchdog():
    return MemoryWatchdog(
        interval=0.01,
        sampler=lambda: MemorySample(used=1, total=100, swap_used=0),
    )


def _stressed_watchdog():
    return MemoryWatchdog(
        threshold=0.9,
        interval=0.01,
        sampler=lambda: MemorySample(used=95, total=100, swap_used=0),
    )


class TestCompletionRace:
    def test_first_settle_wins(self):
        race = CompletionRace()
        assert race.settle(Outcome.INTERRUPTED, "memory usage")
        assert not race.settle(Outcome.EXITED)

        assert race.winner is Outcome.INTERRUPTED
        assert race.reason == "memory usage"
        assert race.wait(0)

    def test_undecided(self):
        race = CompletionRace()
        assert race.winner is None
        assert not race.wait(0)


class TestProcessSupervisor:
    def test_natural_completion(self):
        relay = RecordingRelay()
        supervisor = ProcessSupervisor(
            _python("print('{\"Issues\": []}')"),
            watchdog=_calm_watchdog(),
            relay=relay,
            scope="./...",
        )

        result = supervisor.run()

        assert not result.interrupted
        assert result.returncode == 0
        assert result.stdout.strip() == b'{"Issues": []}'
        assert supervisor.outcome is InvocationState.COMPLETED
        assert supervisor.state is InvocationState.IDLE
        assert relay.events == [("attach", supervisor), ("detach", supervisor)]

    def test_runs_in_working_directory(self, tmp_path):
        supervisor = ProcessSupervisor(
            _python("import os; print(os.getcwd())"),
            cwd=str(tmp_path),
            watchdog=_calm_watchdog(),
            relay=RecordingRelay(),
        )

        result = supervisor.run()
        assert result.stdout.decode().strip() == str(tmp_path.resolve())

    def test_memory_pressure_kills_process(self):
        supervisor = ProcessSupervisor(
            _python("import time; time.sleep(30)"),
            watchdog=_stressed_watchdog(),
            relay=RecordingRelay(),
        )

        start = time.monotonic()
        result = supervisor.run()

        assert result.interrupted
        assert time.monotonic() - start < 20
        assert supervisor.outcome is InvocationState.INTERRUPTED

    def test_fast_exit_beats_watchdog(self):
        """An exit reported before the first sample is never interrupted."""
        watchdog = _stressed_watchdog()
        watchdog.interval = 30.0
        supervisor = ProcessSupervisor(_python("pass"), watchdog=watchdog, relay=RecordingRelay())

        result = supervisor.run()
        assert not result.interrupted

    def test_nonzero_exit_raises(self):
        supervisor = ProcessSupervisor(
            _python("import sys; sys.stderr.write('boom'); sys.exit(3)"),
            watchdog=_calm_watchdog(),
            relay=RecordingRelay(),
            scope="bar/...",
        )

        with pytest.raises(InvocationRuntimeError) as exc_info:
            supervisor.run()

        assert exc_info.value.scope == "bar/..."
        assert exc_info.value.reason == "exit status 3"
        assert exc_info.value.stderr == "boom"
        assert supervisor.outcome is InvocationState.FAILED

    def test_missing_executable_raises(self, tmp_path):
        relay = RecordingRelay()
        supervisor = ProcessSupervisor(
            [str(tmp_path / "no-such-linter")], watchdog=_calm_watchdog(), relay=relay
        )

        with pytest.raises(InvocationStartError):
            supervisor.run()

        assert supervisor.outcome is InvocationState.FAILED
        # The relay is detached even when the start fails.
        assert relay.events[-1] == ("detach", supervisor)

    def test_interrupt_after_exit_is_ignored(self):
        supervisor = ProcessSupervisor(
            _python("pass"), watchdog=_calm_watchdog(), relay=RecordingRelay()
        )
        supervisor.run()

        assert not supervisor.interrupt("late signal")

    def test_overlapping_runs_are_rejected(self):
        supervisor = ProcessSupervisor(
            _python("pass"), watchdog=_calm_watchdog(), relay=RecordingRelay()
        )
        supervisor._run_lock.acquire()
        try:
            with pytest.raises(RuntimeError):
                supervisor.run()
        finally:
            supervisor._run_lock.release()

    def test_supervisor_is_reusable(self):
        supervisor = ProcessSupervisor(
            _python("print('ok')"), watchdog=_calm_watchdog(), relay=RecordingRelay()
        )
        assert supervisor.run().stdout.strip() == b"ok"
        assert supervisor.run().stdout.strip() == b"ok"

    def test_default_scope_is_last_argument(self):
        supervisor = ProcessSupervisor(["golangci-lint", "run", "foo/..."], relay=RecordingRelay())
        assert supervisor.scope == "foo/..."

    def test_interrupt_after_process_exit_is_ignored(self):
        """A process that has exited but is not yet reported is left alone."""
        process = subprocess.Popen(_python("pass"))
        process.wait()
        group = RecordingGroup()
        supervisor = ProcessSupervisor(
            ["golangci-lint"], watchdog=_calm_watchdog(), process_group=group, relay=RecordingRelay()
        )
        supervisor._process = process

        assert not supervisor.interrupt("memory usage")
        assert group.killed == []
        assert supervisor._race.winner is None


def _gone(pid):
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX process groups")
class TestProcessTreeKill:
    def test_memory_pressure_kills_grandchildren(self, tmp_path):
        pid_file = tmp_path / "grandchild.pid"
        partial = tmp_path / "grandchild.pid.partial"
        code = "\n".join(
            [
                "import os, subprocess, sys, time",
                "p = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(30)'])",
                f"with open({str(partial)!r}, 'w') as f: f.write(str(p.pid))",
                f"os.replace({str(partial)!r}, {str(pid_file)!r})",
                "time.sleep(30)",
            ]
        )
        # Memory only becomes tight once the grandchild is known to exist.
        watchdog = MemoryWatchdog(
            threshold=0.9,
            interval=0.01,
            sampler=lambda: MemorySample(
                used=95 if pid_file.exists() else 1, total=100, swap_used=0
            ),
        )
        supervisor = ProcessSupervisor(_python(code), watchdog=watchdog, relay=RecordingRelay())

        result = supervisor.run()

        assert result.interrupted
        grandchild = int(pid_file.read_text())
        deadline = time.monotonic() + 10
        while not _gone(grandchild) and time.monotonic() < deadline:
            time.sleep(0.05)
        assert _gone(grandchild)

    def test_signal_during_start_kills_started_linter(self):
        relay = SignalRelay()
        started = []

        class SignalledWhileStarting(PosixProcessGroup):
            def start(self, command, cwd=None):
                process = super().start(command, cwd)
                started.append(process)
                relay._handle(signal.SIGTERM, None)
                return process

        supervisor = ProcessSupervisor(
            _python("import time; time.sleep(30)"),
            watchdog=_calm_watchdog(),
            process_group=SignalledWhileStarting(),
            relay=relay,
        )

        try:
            with pytest.raises(SystemExit) as exc_info:
                supervisor.run()
        finally:
            relay.restore()

        assert exc_info.value.code == 1
        assert started[0].wait(timeout=10) is not None
        assert supervisor.outcome is InvocationState.INTERRUPTED
        assert not relay.installed
