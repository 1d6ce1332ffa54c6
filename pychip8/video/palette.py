"""Two-colour palettes for framebuffer rendering."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]


MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))
PHOSPHOR: Tuple[RGBColor, RGBColor] = ((0x10, 0x18, 0x10), (0x40, 0xFF, 0x60))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    """Normalise ``palette`` to an (off, on) pair of RGB byte tuples."""

    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (off and on)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    off, on = (tuple(int(channel) & 0xFF for channel in color) for color in palette)
    return off, on  # type: ignore[return-value]
