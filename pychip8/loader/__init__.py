"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import AddressRegion, ProgramImage
from .rom import load_rom, load_rom_from_path

__all__ = [
    "AddressRegion",
    "ProgramImage",
    "load_rom",
    "load_rom_from_path",
]
