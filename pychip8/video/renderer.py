"""Convert framebuffer cells into RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import VIDEO_HEIGHT, VIDEO_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB24 frame produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build a display surface") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale on/off cells to an RGB frame using a two-colour palette."""

    def __init__(
        self,
        palette: Sequence[RGBColor] = MONOCHROME,
        *,
        width: int = VIDEO_WIDTH,
        height: int = VIDEO_HEIGHT,
    ) -> None:
        self._off, self._on = validate_palette(palette)
        self._width = width
        self._height = height

    def render(self, cells: Sequence[int], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(cells) != self._width * self._height:
            raise ValueError(f"expected {self._width * self._height} cells, got {len(cells)}")

        out_width = self._width * scale
        out_height = self._height * scale
        pixels = bytearray(out_width * out_height * 3)
        off = bytes(self._off) * scale
        on = bytes(self._on) * scale
        stride = out_width * 3

        for y in range(self._height):
            line = bytearray()
            base = y * self._width
            for x in range(self._width):
                line += on if cells[base + x] else off
            top = y * scale * stride
            for repeat in range(scale):
                start = top + repeat * stride
                pixels[start : start + stride] = line

        return RenderResult(out_width, out_height, pixels)
