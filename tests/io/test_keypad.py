"""Keypad state and host key mapping."""

from __future__ import annotations

import pytest

from pychip8.io import KEY_COUNT, KEY_LAYOUT, Keypad


def test_layout_covers_every_key() -> None:
    assert sorted(KEY_LAYOUT.values()) == list(range(KEY_COUNT))


def test_press_and_release_by_name() -> None:
    keypad = Keypad()

    assert keypad.press("W")
    assert keypad.is_pressed(0x5)
    assert keypad.release("w")
    assert not keypad.is_pressed(0x5)


def test_unmapped_name_is_ignored() -> None:
    keypad = Keypad()

    assert not keypad.press("space")
    assert keypad.snapshot() == (False,) * KEY_COUNT


def test_keypad_alias_maps_to_digit_row() -> None:
    keypad = Keypad()

    keypad.press("[4]")

    assert keypad.is_pressed(0xC)


def test_is_pressed_masks_index() -> None:
    keypad = Keypad()
    keypad.set_key(0x3, True)

    assert keypad.is_pressed(0x13)


def test_set_key_out_of_range() -> None:
    with pytest.raises(ValueError):
        Keypad().set_key(16, True)


def test_reset_releases_every_key() -> None:
    keypad = Keypad()
    keypad.set_key(0xB, True)
    keypad.set_key(0x7, True)

    keypad.reset()

    assert keypad.snapshot() == (False,) * KEY_COUNT


def test_listeners_only_see_changes() -> None:
    keypad = Keypad()
    events: list[tuple[int, bool]] = []
    keypad.add_listener(lambda index, pressed: events.append((index, pressed)))

    keypad.set_key(0x1, True)
    keypad.set_key(0x1, True)
    keypad.set_key(0x1, False)

    assert events == [(0x1, True), (0x1, False)]
