"""Flat 4 KiB memory for the CHIP-8 interpreter.

The address space is a single byte array. The low 512 bytes historically held
the interpreter itself; here only the glyph table at ``0x050`` is populated and
programs are loaded from ``0x200`` upwards. Nothing is hardware protected, so a
program may overwrite any byte, glyphs included.
"""

from __future__ import annotations

from dataclasses import dataclass

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space used by CHIP-8."""

    return value & 0x0FFF


class MemoryAccessError(Exception):
    """Raised when memory is used incorrectly."""


class RomTooLargeError(MemoryAccessError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, size: int, limit: int = MAX_PROGRAM_SIZE) -> None:
        super().__init__(f"program is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


@dataclass
class Memory:
    """Byte-addressable main memory."""

    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.length != MEMORY_SIZE:
            raise MemoryAccessError(f"CHIP-8 memory must be {MEMORY_SIZE} bytes, got {self.length}")
        self._data = bytearray(self.length)

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def load_image(self, start: int, data: bytes) -> None:
        """Copy ``data`` verbatim to ``start``; the block must fit without wrapping."""

        end = start + len(data)
        if start < 0 or end > self.length:
            raise MemoryAccessError(f"block {start:#05x}+{len(data)} exceeds memory")
        self._data[start:end] = data

    def load_program(self, data: bytes) -> int:
        """Load a raw program image at ``PROGRAM_START`` and return its size.

        Oversized images are rejected before any byte is written.
        """

        size = len(data)
        if size > MAX_PROGRAM_SIZE:
            raise RomTooLargeError(size)
        self.load_image(PROGRAM_START, data)
        return size

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
