"""Opcode decoding and the two-level dispatch table for the CHIP-8 CPU."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Mapping, Sequence, Union


@dataclass(frozen=True)
class DecodedOpcode:
    """Fields extracted from a 16-bit instruction word."""

    opcode: int
    family: int
    x: int
    y: int
    n: int
    kk: int
    nnn: int


def decode(opcode: int) -> DecodedOpcode:
    """Split ``opcode`` into its fixed fields. Never fails."""

    opcode &= 0xFFFF
    return DecodedOpcode(
        opcode=opcode,
        family=(opcode >> 12) & 0x0F,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 instruction.

    ``operands`` is a ``str.format`` template over the decoded fields, used by
    :func:`disassemble` and the trace recorder.
    """

    mnemonic: str
    handler: str
    operands: str = ""

    def format(self, decoded: DecodedOpcode) -> str:
        if not self.operands:
            return self.mnemonic
        fields = {
            "x": decoded.x,
            "y": decoded.y,
            "n": decoded.n,
            "kk": decoded.kk,
            "nnn": decoded.nnn,
        }
        return f"{self.mnemonic} {self.operands.format(**fields)}"


@dataclass(frozen=True)
class InstructionGroup:
    """Secondary table for families that share a top nibble."""

    selector: str
    members: Mapping[int, Instruction]

    def __post_init__(self) -> None:
        if self.selector not in ("n", "kk"):
            raise ValueError(f"unsupported selector: {self.selector}")

    def select(self, decoded: DecodedOpcode) -> Instruction | None:
        return self.members.get(getattr(decoded, self.selector))


DispatchEntry = Union[Instruction, InstructionGroup]


class DispatchTable:
    """Mutable builder for the 16-entry primary table."""

    _TABLE_SIZE: Final[int] = 0x10

    def __init__(self) -> None:
        self._table: list[DispatchEntry | None] = [None] * self._TABLE_SIZE

    def register(self, family: int, entry: DispatchEntry) -> None:
        if not 0 <= family < self._TABLE_SIZE:
            raise ValueError(f"family out of range: {family}")
        if self._table[family] is not None:
            raise ValueError(f"family {family:#x} already registered")
        self._table[family] = entry

    def register_all(self, entries: Iterable[tuple[int, DispatchEntry]]) -> None:
        for family, entry in entries:
            self.register(family, entry)

    def freeze(self) -> Sequence[DispatchEntry | None]:
        return tuple(self._table)


def build_dispatch_table(entries: Iterable[tuple[int, DispatchEntry]]) -> Sequence[DispatchEntry | None]:
    table = DispatchTable()
    table.register_all(entries)
    return table.freeze()


DEFAULT_ENTRIES: Sequence[tuple[int, DispatchEntry]] = (
    (
        0x0,
        InstructionGroup(
            "kk",
            {
                0xE0: Instruction("CLS", "op_cls"),
                0xEE: Instruction("RET", "op_ret"),
            },
        ),
    ),
    (0x1, Instruction("JP", "op_jp", "{nnn:#05x}")),
    (0x2, Instruction("CALL", "op_call", "{nnn:#05x}")),
    (0x3, Instruction("SE", "op_se_byte", "V{x:X}, {kk:#04x}")),
    (0x4, Instruction("SNE", "op_sne_byte", "V{x:X}, {kk:#04x}")),
    (0x5, Instruction("SE", "op_se_reg", "V{x:X}, V{y:X}")),
    (0x6, Instruction("LD", "op_ld_byte", "V{x:X}, {kk:#04x}")),
    (0x7, Instruction("ADD", "op_add_byte", "V{x:X}, {kk:#04x}")),
    (
        0x8,
        InstructionGroup(
            "n",
            {
                0x0: Instruction("LD", "op_ld_reg", "V{x:X}, V{y:X}"),
                0x1: Instruction("OR", "op_or", "V{x:X}, V{y:X}"),
                0x2: Instruction("AND", "op_and", "V{x:X}, V{y:X}"),
                0x3: Instruction("XOR", "op_xor", "V{x:X}, V{y:X}"),
                0x4: Instruction("ADD", "op_add_reg", "V{x:X}, V{y:X}"),
                0x5: Instruction("SUB", "op_sub", "V{x:X}, V{y:X}"),
                0x6: Instruction("SHR", "op_shr", "V{x:X}"),
                0x7: Instruction("SUBN", "op_subn", "V{x:X}, V{y:X}"),
                0xE: Instruction("SHL", "op_shl", "V{x:X}"),
            },
        ),
    ),
    (0x9, Instruction("SNE", "op_sne_reg", "V{x:X}, V{y:X}")),
    (0xA, Instruction("LD", "op_ld_index", "I, {nnn:#05x}")),
    (0xB, Instruction("JP", "op_jp_v0", "V0, {nnn:#05x}")),
    (0xC, Instruction("RND", "op_rnd", "V{x:X}, {kk:#04x}")),
    (0xD, Instruction("DRW", "op_drw", "V{x:X}, V{y:X}, {n}")),
    (
        0xE,
        InstructionGroup(
            "kk",
            {
                0x9E: Instruction("SKP", "op_skp", "V{x:X}"),
                0xA1: Instruction("SKNP", "op_sknp", "V{x:X}"),
            },
        ),
    ),
    (
        0xF,
        InstructionGroup(
            "kk",
            {
                0x07: Instruction("LD", "op_ld_vx_dt", "V{x:X}, DT"),
                0x0A: Instruction("LD", "op_ld_vx_k", "V{x:X}, K"),
                0x15: Instruction("LD", "op_ld_dt_vx", "DT, V{x:X}"),
                0x18: Instruction("LD", "op_ld_st_vx", "ST, V{x:X}"),
                0x1E: Instruction("ADD", "op_add_index", "I, V{x:X}"),
                0x29: Instruction("LD", "op_ld_glyph", "F, V{x:X}"),
                0x33: Instruction("LD", "op_ld_bcd", "B, V{x:X}"),
                0x55: Instruction("LD", "op_store_registers", "[I], V{x:X}"),
                0x65: Instruction("LD", "op_load_registers", "V{x:X}, [I]"),
            },
        ),
    ),
)


DISPATCH_TABLE: Sequence[DispatchEntry | None] = build_dispatch_table(DEFAULT_ENTRIES)


def lookup(
    decoded: DecodedOpcode,
    table: Sequence[DispatchEntry | None] = DISPATCH_TABLE,
) -> Instruction | None:
    """Resolve ``decoded`` to its instruction, or None when nothing matches."""

    entry = table[decoded.family]
    if isinstance(entry, InstructionGroup):
        return entry.select(decoded)
    return entry


def disassemble(opcode: int, table: Sequence[DispatchEntry | None] = DISPATCH_TABLE) -> str:
    decoded = decode(opcode)
    instruction = lookup(decoded, table)
    if instruction is None:
        return f"DW {decoded.opcode:#06x}"
    return instruction.format(decoded)


def iter_instructions(table: Sequence[DispatchEntry | None] = DISPATCH_TABLE) -> Iterable[Instruction]:
    for entry in table:
        if isinstance(entry, InstructionGroup):
            yield from entry.members.values()
        elif entry is not None:
            yield entry
