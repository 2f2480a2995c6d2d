"""Running the external linter under memory and signal supervision."""

from .output import LintOutput, decode_output
from .process_group import (
    PosixProcessGroup,
    ProcessGroup,
    WindowsProcessTree,
    default_process_group,
)
from .scheduler import InvocationRecord, LintScheduler
from .signals import SignalRelay, signal_relay
from .supervisor import (
    CompletionRace,
    InvocationResult,
    InvocationState,
    Outcome,
    ProcessSupervisor,
)
from .watchdog import MemorySample, MemoryWatchdog, sample_memory

__all__ = [
    "CompletionRace",
    "InvocationRecord",
    "InvocationResult",
    "InvocationState",
    "LintOutput",
    "LintScheduler",
    "MemorySample",
    "MemoryWatchdog",
    "Outcome",
    "PosixProcessGroup",
    "ProcessGroup",
    "ProcessSupervisor",
    "SignalRelay",
    "WindowsProcessTree",
    "decode_output",
    "default_process_group",
    "sample_memory",
    "signal_relay",
]
