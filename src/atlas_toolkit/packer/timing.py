"""
Module: packer.timing

Purpose:
    Timing instrumentation for the atlas pipeline, to see whether a slow
    run is spent walking directories, decoding images or encoding output.

Key Classes:
    - TimingLog: Collects per-phase durations for one run

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - packer.pipeline: Wraps every pipeline stage
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Timing metrics for one pipeline run.

    Attributes:
        phase_timings: Dict of phase_name -> duration_seconds, in the
            order phases were logged.

    Example:
        >>> log = TimingLog()
        >>> log.log_phase("discovery", 0.012)
        >>> print(log.summary())
    """
    phase_timings: Dict[str, float] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Log a phase timing, accumulating repeated phases."""
        self.phase_timings[phase] = self.phase_timings.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phase_timings.values())

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["=== Atlas Timing Summary ==="]
        for phase, duration in self.phase_timings.items():
            lines.append(f"  {phase:12s} {duration:.3f}s")
        lines.append(f"  {'total':12s} {self.total:.3f}s")
        return "\n".join(lines)


@contextmanager
def timed_phase(log: TimingLog, phase: str) -> Generator[None, None, None]:
    """
    Time a block and record it in ``log``.

    The duration is recorded even if the block raises.

    Example:
        >>> with timed_phase(log, "layout"):
        ...     layout = compute_layout(images)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        log.log_phase(phase, duration)
        logger.debug(f"{phase} took {duration:.3f}s")
