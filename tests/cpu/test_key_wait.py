"""Tests for the LD Vx, K wait state."""

from __future__ import annotations

from pychip8.system import Machine, MachineConfig, create_machine


def make_machine(*words: int) -> Machine:
    machine = create_machine(MachineConfig(random_byte=lambda: 0))
    machine.load_program(b"".join(word.to_bytes(2, "big") for word in words))
    return machine


def test_wait_holds_pc_until_key_pressed() -> None:
    machine = make_machine(0xF30A, 0x6101)

    assert machine.step() == 0
    assert machine.cpu.awaiting_key
    assert machine.cpu.state.waiting_register == 3
    assert machine.cpu.state.pc == 0x200

    assert machine.step() == 0
    assert machine.cpu.state.pc == 0x200
    assert machine.cpu.cycle_count == 0

    machine.set_key(0x5, True)
    assert machine.step() == 1
    assert machine.cpu.state.registers[3] == 0x5
    assert machine.cpu.state.pc == 0x202
    assert not machine.cpu.awaiting_key

    machine.step()
    assert machine.cpu.state.registers[1] == 0x01


def test_key_held_before_wait_needs_fresh_press() -> None:
    machine = make_machine(0xF20A)
    machine.set_key(0x2, True)

    machine.step()
    assert machine.step() == 0
    assert machine.cpu.awaiting_key

    machine.set_key(0x2, False)
    assert machine.step() == 0

    machine.set_key(0x2, True)
    assert machine.step() == 1
    assert machine.cpu.state.registers[2] == 0x2


def test_first_press_during_wait_wins() -> None:
    machine = make_machine(0xF00A)
    machine.step()

    machine.set_key(0xC, True)
    machine.set_key(0x9, True)
    machine.step()

    assert machine.cpu.state.registers[0] == 0xC


def test_tap_between_steps_completes_wait() -> None:
    machine = make_machine(0xF30A)
    machine.step()

    machine.set_key(0x5, True)
    machine.set_key(0x5, False)

    assert machine.step() == 1
    assert not machine.cpu.awaiting_key
    assert machine.cpu.state.registers[3] == 0x5
    assert machine.cpu.state.pc == 0x202


def test_press_before_wait_is_not_latched() -> None:
    machine = make_machine(0x6101, 0xF20A)
    machine.step()
    machine.set_key(0x7, True)
    machine.set_key(0x7, False)

    machine.step()

    assert machine.step() == 0
    assert machine.cpu.awaiting_key


def test_reset_clears_pending_wait() -> None:
    machine = make_machine(0xF10A)
    machine.step()

    machine.reset()
    machine.set_key(0x4, True)

    assert not machine.cpu.awaiting_key
    assert machine.cpu.state.latched_key is None


def test_timers_run_while_waiting() -> None:
    machine = make_machine(0xF00A)
    machine.cpu.state.delay_timer = 3
    machine.cpu.state.sound_timer = 1
    machine.step()

    machine.tick_timers()
    machine.tick_timers()

    assert machine.cpu.state.delay_timer == 1
    assert machine.cpu.state.sound_timer == 0
    assert not machine.sound_timer_active()
    assert machine.cpu.awaiting_key
