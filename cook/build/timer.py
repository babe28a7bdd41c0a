# SPDX-License-Identifier: BSD-3-Clause
"""
Phase timing and reporting.

Every long-running phase runs inside a PhaseTimer, which records when it
started and ended and prints one normalized report line. The timer never
swallows or rewrites the wrapped phase's failure.
"""

import subprocess
import time
from dataclasses import dataclass

from cook.build.errors import PhaseFailure


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as 'Xm Ys'."""
    total = max(0, int(seconds))
    return f"{total // 60}m {total % 60}s"


@dataclass
class PhaseResult:
    """Outcome of one timed phase. Only used for reporting."""

    phase_name: str
    started_at: float = None
    ended_at: float = None
    exit_status: int = None

    @property
    def duration(self) -> float:
        if self.started_at is None or self.ended_at is None:
            return 0.0
        return self.ended_at - self.started_at

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0


def exit_status_of(exc: BaseException) -> int:
    """Map an exception raised inside a phase to an exit status."""
    if isinstance(exc, (PhaseFailure, subprocess.CalledProcessError)):
        return exc.returncode
    if isinstance(exc, KeyboardInterrupt):
        return 130
    return 1


class PhaseTimer:
    """Context manager that times a phase and reports its duration.

    Example:
        with PhaseTimer('build', 'compiling kernel') as result:
            run_build()
        # prints: [cook] Done compiling kernel in 3m 12s
    """

    def __init__(self, phase_name: str, description: str = None,
                 clock=time.monotonic):
        """
        Args:
            phase_name: Short phase identifier (build, clean, ...)
            description: Human wording used in the report line
            clock: Seconds clock, time.monotonic by default
        """
        self.phase_name = phase_name
        self.description = description or phase_name
        self.clock = clock
        self.result = PhaseResult(phase_name)

    def __enter__(self) -> PhaseResult:
        self.result.started_at = self.clock()
        return self.result

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.result.ended_at = self.clock()
        self.result.exit_status = 0 if exc is None else exit_status_of(exc)
        print()
        print(self.report())
        return False

    def report(self) -> str:
        elapsed = format_duration(self.result.duration)
        if self.result.succeeded:
            return f"[cook] Done {self.description} in {elapsed}"
        return (f"[cook] {self.phase_name} failed after {elapsed} "
                f"(exit status {self.result.exit_status})")
