"""Sixteen-key hexadecimal keypad."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# Host key name -> keypad index, laid out as the original 4x4 pad:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   q w e r
#   7 8 9 E        a s d f
#   A 0 B F        z x c v
KEY_LAYOUT: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


KeyListener = Callable[[int, bool], None]


@dataclass
class Keypad:
    """Pressed state of the sixteen keys.

    The input collaborator mutates the pad; the CPU reads it and listens for
    presses that complete a key wait.
    """

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _listeners: list[KeyListener] = field(default_factory=list)

    def set_key(self, index: int, pressed: bool) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"key index out of range: {index}")
        before = self._keys[index]
        self._keys[index] = bool(pressed)
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)
        if before != self._keys[index]:
            self._notify_listeners(index, self._keys[index])

    def press(self, key_name: str) -> bool:
        """Press the key mapped to ``key_name``; False when it is unmapped."""

        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.set_key(index, True)
        return True

    def release(self, key_name: str) -> bool:
        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.set_key(index, False)
        return True

    def is_pressed(self, index: int) -> bool:
        return self._keys[index & 0x0F]

    def reset(self) -> None:
        for index in range(KEY_COUNT):
            self.set_key(index, False)

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def _lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_LAYOUT.get(name)

    def _notify_listeners(self, index: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(index, pressed)
