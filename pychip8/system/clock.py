"""Two independent cadences: instruction steps and 60 Hz timer ticks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from pychip8.utils import debug_enabled, debug_log

if TYPE_CHECKING:  # pragma: no cover
    from .machine import Machine

DEFAULT_CPU_HZ = 700
DEFAULT_TIMER_HZ = 60
# Cap on the wall time converted in one call, so a stalled host does not
# replay seconds of backlog in a single frame.
MAX_CATCH_UP_SECS = 0.25


@dataclass
class DualClock:
    """Convert elapsed wall time into instruction steps and timer ticks.

    Each cadence keeps its own fractional remainder; neither is derived from
    the other.
    """

    cpu_hz: float = DEFAULT_CPU_HZ
    timer_hz: float = DEFAULT_TIMER_HZ
    max_catch_up: float = MAX_CATCH_UP_SECS
    _step_budget: float = field(default=0.0, init=False)
    _tick_budget: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.cpu_hz <= 0 or self.timer_hz <= 0:
            raise ValueError("clock rates must be positive")
        if self.max_catch_up <= 0:
            raise ValueError("max_catch_up must be positive")

    def advance(self, elapsed: float) -> tuple[int, int]:
        """Return ``(steps, ticks)`` due after ``elapsed`` seconds."""

        if elapsed < 0:
            raise ValueError("elapsed time cannot be negative")
        elapsed = min(elapsed, self.max_catch_up)
        self._step_budget += elapsed * self.cpu_hz
        self._tick_budget += elapsed * self.timer_hz
        steps = int(self._step_budget)
        ticks = int(self._tick_budget)
        self._step_budget -= steps
        self._tick_budget -= ticks
        return steps, ticks

    def reset(self) -> None:
        self._step_budget = 0.0
        self._tick_budget = 0.0

    def run_for(
        self,
        machine: "Machine",
        elapsed: float,
        *,
        before_step: Callable[["Machine"], None] | None = None,
    ) -> tuple[int, int]:
        """Drive ``machine`` for ``elapsed`` seconds of emulated time.

        Timer ticks are spread evenly between the instruction steps. Returns
        ``(retired_instructions, ticks)``. CPU errors propagate to the caller
        with the remaining budget discarded.
        """

        steps, ticks = self.advance(elapsed)
        executed = 0
        ticked = 0
        for step in range(steps):
            due = (step * ticks) // steps
            while ticked < due:
                machine.tick_timers()
                ticked += 1
            if before_step is not None:
                before_step(machine)
            executed += machine.step()
        while ticked < ticks:
            machine.tick_timers()
            ticked += 1
        if debug_enabled("perf"):
            debug_log("perf", "elapsed=%.4f steps=%d retired=%d ticks=%d", elapsed, steps, executed, ticks)
        return executed, ticked
