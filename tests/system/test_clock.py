"""Cadence conversion for the instruction and timer clocks."""

from __future__ import annotations

import pytest

from pychip8.system import DualClock, MachineConfig, create_machine


def test_advance_keeps_fractional_remainders() -> None:
    clock = DualClock(cpu_hz=700, timer_hz=60)

    assert clock.advance(0.125) == (87, 7)
    assert clock.advance(0.125) == (88, 8)


def test_advance_caps_catch_up() -> None:
    clock = DualClock(cpu_hz=700, timer_hz=60)

    assert clock.advance(5.0) == (175, 15)


def test_reset_drops_remainders() -> None:
    clock = DualClock(cpu_hz=700, timer_hz=60)
    clock.advance(0.125)

    clock.reset()

    assert clock.advance(0.125) == (87, 7)


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        DualClock(cpu_hz=0)
    with pytest.raises(ValueError):
        DualClock(max_catch_up=0)
    with pytest.raises(ValueError):
        DualClock().advance(-0.5)


def test_run_for_drives_machine() -> None:
    machine = create_machine(MachineConfig(program_image=b"\x12\x00"))
    machine.cpu.state.delay_timer = 10
    clock = DualClock(cpu_hz=700, timer_hz=60)
    seen: list[int] = []

    retired, ticks = clock.run_for(machine, 0.125, before_step=lambda m: seen.append(m.cpu.state.pc))

    assert (retired, ticks) == (87, 7)
    assert len(seen) == 87
    assert machine.cpu.state.delay_timer == 3
    assert machine.cpu.cycle_count == 87


def test_run_for_counts_no_retirements_while_waiting() -> None:
    machine = create_machine(MachineConfig(program_image=b"\xF0\x0A"))
    machine.cpu.state.sound_timer = 20

    retired, ticks = DualClock(cpu_hz=700, timer_hz=60).run_for(machine, 0.125)

    assert retired == 0
    assert ticks == 7
    assert machine.cpu.state.sound_timer == 13
    assert machine.cpu.awaiting_key
