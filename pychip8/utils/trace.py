"""Ring buffer of recently executed instructions for diagnostics."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import islice
from typing import Deque, Iterator, Sequence

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    """CPU registers captured just before an instruction runs."""

    pc: int
    opcode: int | None
    mnemonic: str
    registers: tuple[int, ...]
    index: int
    sp: int
    delay_timer: int
    sound_timer: int
    waiting: bool
    note: str = ""

    def format(self) -> str:
        opcode = "----" if self.opcode is None else f"{self.opcode:04X}"
        flags = ["WAIT"] if self.waiting else []
        if self.note:
            flags.append(self.note)
        registers = " ".join(f"{value:02X}" for value in self.registers)
        return (
            f"pc={self.pc:03X} opcode={opcode} {self.mnemonic or '?':<16} "
            f"V=[{registers}] I={self.index:04X} SP={self.sp:X} "
            f"DT={self.delay_timer:02X} ST={self.sound_timer:02X} "
            f"flags={','.join(flags) or '-'}"
        )


class TraceRecorder:
    """Keeps the newest ``capacity`` entries; older ones fall off the front."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: Deque[TraceEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def record_step(self, cpu_state, opcode: int | None, *, mnemonic: str = "", note: str = "") -> None:
        self._entries.append(
            TraceEntry(
                pc=cpu_state.pc & 0x0FFF,
                opcode=None if opcode is None else opcode & 0xFFFF,
                mnemonic=mnemonic,
                registers=tuple(cpu_state.registers),
                index=cpu_state.index & 0xFFFF,
                sp=cpu_state.sp,
                delay_timer=cpu_state.delay_timer,
                sound_timer=cpu_state.sound_timer,
                waiting=cpu_state.waiting_register is not None,
                note=note,
            )
        )

    def entries(self, limit: int | None = None) -> Iterator[TraceEntry]:
        """Oldest-first iteration over the newest ``limit`` entries."""

        skip = 0 if limit is None else max(len(self._entries) - max(limit, 0), 0)
        return islice(self._entries, skip, None)

    def last_entry(self) -> TraceEntry | None:
        return self._entries[-1] if self._entries else None

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def clear(self) -> None:
        self._entries.clear()
