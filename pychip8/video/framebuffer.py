"""Monochrome 64x32 framebuffer with XOR sprite drawing."""

from __future__ import annotations

from typing import Iterable

VIDEO_WIDTH = 64
VIDEO_HEIGHT = 32


class Framebuffer:
    """Row-major on/off pixel cells.

    Each cell holds ``0`` or ``1``. The buffer is written only by the CPU;
    rendering collaborators read it through :meth:`view` or :meth:`snapshot`.
    """

    def __init__(self, width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return self._cells[y * self.width + x] != 0

    def draw_sprite(self, x: int, y: int, rows: Iterable[int], *, wrap: bool = False) -> bool:
        """XOR an 8-pixel-wide sprite onto the buffer.

        The origin is wrapped into the buffer, x modulo the width and y modulo
        the height (32, not 64), so every origin lands on screen. Pixels that
        then run past the right or bottom edge are clipped unless ``wrap`` is
        set. Returns True when any lit pixel was switched off.
        """

        origin_x = x % self.width
        origin_y = y % self.height
        collision = False
        for row_offset, row in enumerate(rows):
            py = origin_y + row_offset
            if py >= self.height:
                if not wrap:
                    break
                py %= self.height
            line = py * self.width
            for bit in range(8):
                if not (row & (0x80 >> bit)):
                    continue
                px = origin_x + bit
                if px >= self.width:
                    if not wrap:
                        break
                    px %= self.width
                index = line + px
                if self._cells[index]:
                    collision = True
                self._cells[index] ^= 1
        return collision

    def view(self) -> memoryview:
        """Read-only view of the cells, valid for the life of the buffer."""

        return memoryview(self._cells).toreadonly()

    def snapshot(self) -> bytes:
        return bytes(self._cells)

    def lit_count(self) -> int:
        return sum(self._cells)

    def rows(self) -> list[str]:
        """Text rendering used by diagnostics, ``#`` for lit cells."""

        lines: list[str] = []
        for y in range(self.height):
            start = y * self.width
            line = self._cells[start : start + self.width]
            lines.append("".join("#" if cell else "." for cell in line))
        return lines
