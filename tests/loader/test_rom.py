"""Tests for the raw program loader."""

from __future__ import annotations

import io

import pytest

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START, Memory, RomTooLargeError
from pychip8.loader import load_rom, load_rom_from_path


def test_load_rom_copies_bytes_at_program_start() -> None:
    memory = Memory()

    program = load_rom(io.BytesIO(b"\x60\x0A\x12\x00"), memory, name="demo")

    assert program.name == "demo"
    assert program.size == 4
    assert program.entry_point == PROGRAM_START
    assert program.regions[0].length() == 4
    assert memory.load16(PROGRAM_START) == 0x600A
    assert memory.load16(PROGRAM_START + 2) == 0x1200


def test_load_rom_accepts_largest_image() -> None:
    memory = Memory()
    payload = bytes([0xAB]) * MAX_PROGRAM_SIZE

    program = load_rom(io.BytesIO(payload), memory)

    assert program.size == MAX_PROGRAM_SIZE
    assert memory.load8(0xFFF) == 0xAB
    assert program.regions[0].end == 0xFFF


def test_load_rom_rejects_oversized_image_without_writing() -> None:
    memory = Memory()
    before = memory.snapshot()

    with pytest.raises(RomTooLargeError) as excinfo:
        load_rom(io.BytesIO(bytes([0xAB]) * (MAX_PROGRAM_SIZE + 100)), memory)

    assert excinfo.value.size == MAX_PROGRAM_SIZE + 100
    assert excinfo.value.limit == MAX_PROGRAM_SIZE
    assert memory.snapshot() == before


def test_empty_image_has_no_regions() -> None:
    program = load_rom(io.BytesIO(b""), Memory())

    assert program.size == 0
    assert program.entry_point is None


def test_load_rom_from_path_uses_file_stem(tmp_path) -> None:
    path = tmp_path / "pong.ch8"
    path.write_bytes(b"\x00\xE0")
    memory = Memory()

    program = load_rom_from_path(path, memory)

    assert program.name == "pong"
    assert memory.load16(PROGRAM_START) == 0x00E0
