"""Tests for opcode decoding and the dispatch table."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8CPU
from pychip8.cpu.opcodes import (
    DISPATCH_TABLE,
    DispatchTable,
    Instruction,
    InstructionGroup,
    decode,
    disassemble,
    iter_instructions,
    lookup,
)


def test_decode_extracts_fields() -> None:
    decoded = decode(0xD12F)

    assert decoded.opcode == 0xD12F
    assert decoded.family == 0xD
    assert decoded.x == 0x1
    assert decoded.y == 0x2
    assert decoded.n == 0xF
    assert decoded.kk == 0x2F
    assert decoded.nnn == 0x12F


def test_table_has_sixteen_families() -> None:
    assert len(DISPATCH_TABLE) == 16
    assert all(entry is not None for entry in DISPATCH_TABLE)


def test_only_four_families_use_secondary_tables() -> None:
    grouped = [family for family, entry in enumerate(DISPATCH_TABLE) if isinstance(entry, InstructionGroup)]

    assert grouped == [0x0, 0x8, 0xE, 0xF]


def test_every_handler_exists_on_cpu() -> None:
    for instruction in iter_instructions():
        assert callable(getattr(Chip8CPU, instruction.handler, None)), instruction.handler


def test_lookup_uses_residual_field() -> None:
    assert lookup(decode(0x8AB6)).mnemonic == "SHR"
    assert lookup(decode(0xF165)).handler == "op_load_registers"
    assert lookup(decode(0xE5A1)).mnemonic == "SKNP"
    assert lookup(decode(0x8AB8)) is None


@pytest.mark.parametrize(
    ("word", "text"),
    [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1ABC, "JP 0xabc"),
        (0x2300, "CALL 0x300"),
        (0x6A3C, "LD VA, 0x3c"),
        (0x8124, "ADD V1, V2"),
        (0xB300, "JP V0, 0x300"),
        (0xD015, "DRW V0, V1, 5"),
        (0xF30A, "LD V3, K"),
        (0xF255, "LD [I], V2"),
        (0xE0FF, "DW 0xe0ff"),
    ],
)
def test_disassemble(word: int, text: str) -> None:
    assert disassemble(word) == text


def test_duplicate_family_rejected() -> None:
    table = DispatchTable()
    table.register(0x1, Instruction("JP", "op_jp"))

    with pytest.raises(ValueError):
        table.register(0x1, Instruction("JP", "op_jp"))


def test_family_out_of_range_rejected() -> None:
    with pytest.raises(ValueError):
        DispatchTable().register(0x10, Instruction("JP", "op_jp"))


def test_group_selector_validated() -> None:
    with pytest.raises(ValueError):
        InstructionGroup("nnn", {})
