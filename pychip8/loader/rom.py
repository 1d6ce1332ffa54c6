"""Raw CHIP-8 program loader.

A CHIP-8 program file has no header: every byte is copied verbatim to memory
starting at ``0x200``.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START, Memory, RomTooLargeError

from .program import ProgramImage


def load_rom(stream: BinaryIO, memory: Memory, *, name: str = "") -> ProgramImage:
    """Load a raw program from ``stream`` into ``memory`` and return metadata."""

    # One byte past the limit is enough to tell an oversize image apart.
    payload = stream.read(MAX_PROGRAM_SIZE + 1)
    if len(payload) > MAX_PROGRAM_SIZE:
        remainder = len(stream.read())
        raise RomTooLargeError(len(payload) + remainder)
    size = memory.load_program(payload)

    program = ProgramImage(name=name, size=size)
    if size:
        program.add_region(PROGRAM_START, PROGRAM_START + size - 1, "program")
    return program


def load_rom_from_path(path: Path, memory: Memory) -> ProgramImage:
    """Load a raw program image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, memory, name=path.stem)
