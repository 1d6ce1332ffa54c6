"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .clock import DEFAULT_CPU_HZ, DEFAULT_TIMER_HZ, DualClock
from .machine import Machine, MachineConfig, create_machine, default_random_source

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "default_random_source",
    "DualClock",
    "DEFAULT_CPU_HZ",
    "DEFAULT_TIMER_HZ",
]
