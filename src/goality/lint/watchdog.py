"""Host memory pressure sampling for a running linter.

Running linters should be quick and should not rely on swap, and they must
not push the machine out of memory. The watchdog therefore measures
"used RAM + swap used above a baseline" against total RAM, where the baseline
is the lowest swap usage seen so far. The swap usage percentages reported by
the OS are not used: on some platforms (macOS in particular) swap is
allocated, grown and shrunk speculatively, so they do not reflect the data
actually held in swap.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

import psutil

from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 0.9
DEFAULT_INTERVAL = 1.0


@dataclass(frozen=True)
class MemorySample:
    used: int
    total: int
    swap_used: int


def sample_memory() -> MemorySample:
    vm = psutil.virtual_memory()
    swap = psutil.swap_memory()
    return MemorySample(used=vm.used, total=vm.total, swap_used=swap.used)


def human_bytes(byte_count: int) -> str:
    unit = 1024
    if byte_count < unit:
        return f"{byte_count} B"
    div, exp = unit, 0
    n = byte_count // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{byte_count / div:.1f} {'KMGTPE'[exp]}iB"


class MemoryWatchdog:
    """Signals an interruption once memory pressure passes a threshold.

    One watchdog serves a whole lint run: the swap baseline carries over from
    one invocation to the next and only ever decreases.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        interval: float = DEFAULT_INTERVAL,
        sampler: Callable[[], MemorySample] = sample_memory,
    ):
        self.threshold = threshold
        self.interval = interval
        self.sampler = sampler
        self.swap_baseline: Optional[int] = None

    def pressure(self, sample: MemorySample) -> float:
        """Fraction of total memory in use, counting swap above the baseline."""
        if self.swap_baseline is None or sample.swap_used < self.swap_baseline:
            self.swap_baseline = sample.swap_used
        excess_swap = sample.swap_used - self.swap_baseline
        if sample.total <= 0:
            return 0.0
        return (sample.used + excess_swap) / sample.total

    def watch(self, done: threading.Event, on_pressure: Callable[[], None]) -> bool:
        """Sample until ``done`` is set or the threshold is exceeded.

        Returns True when ``on_pressure`` was called.
        """
        while not done.wait(self.interval):
            try:
                sample = self.sampler()
            except (OSError, psutil.Error) as e:
                logger.debug("Failed to retrieve memory usage: %s", e)
                continue

            used = self.pressure(sample)
            logger.debug(
                "Memory usage: %.2f%% - RAM %s / Swap %s.",
                used * 100,
                human_bytes(sample.used),
                human_bytes(sample.swap_used - (self.swap_baseline or 0)),
            )
            if used > self.threshold:
                on_pressure()
                return True
        return False
