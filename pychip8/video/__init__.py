"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONTSET_START, GLYPH_BYTES, GLYPH_TABLE, glyph_address
from .framebuffer import VIDEO_HEIGHT, VIDEO_WIDTH, Framebuffer
from .palette import MONOCHROME, PHOSPHOR, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Framebuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PHOSPHOR",
    "validate_palette",
    "GLYPH_TABLE",
    "GLYPH_BYTES",
    "FONTSET_START",
    "glyph_address",
    "VIDEO_WIDTH",
    "VIDEO_HEIGHT",
]
