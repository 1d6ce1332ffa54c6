"""CHIP-8 fetch-decode-execute engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from pychip8.bus import PROGRAM_START, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, glyph_address

from .opcodes import DISPATCH_TABLE, DecodedOpcode, DispatchEntry, decode, lookup

RandomSource = Callable[[], int]

REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF


class CPUError(Exception):
    """Base error for faults raised while executing an instruction."""


class InvalidOpcodeError(CPUError):
    """Raised when a fetched word matches no instruction in its family."""

    def __init__(self, opcode: int, pc: int) -> None:
        super().__init__(f"invalid opcode {opcode:#06x} at {pc:#05x}")
        self.opcode = opcode
        self.pc = pc


class StackOverflowError(CPUError):
    """Raised by CALL when all sixteen return slots are in use."""


class StackUnderflowError(CPUError):
    """Raised by RET with an empty call stack."""


@dataclass
class CPUState:
    """Register file, call stack and timers of the CHIP-8."""

    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    index: int = 0x0000
    pc: int = PROGRAM_START
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    opcode: int = 0x0000
    # Register awaiting a key press; None while running.
    waiting_register: int | None = None
    # First key that went down since the wait began.
    latched_key: int | None = None

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.registers),
            self.index,
            self.pc,
            list(self.stack),
            self.sp,
            self.delay_timer,
            self.sound_timer,
            self.opcode,
            self.waiting_register,
            self.latched_key,
        )


@dataclass
class Chip8CPU:
    """Interpreter core driven one instruction at a time by an external loop.

    Every fault is raised before the faulting instruction changes machine
    state, and ``pc`` is left pointing at it, so callers can inspect the
    instruction and decide whether to halt or skip.
    """

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    random_byte: RandomSource
    dispatch_table: Sequence[DispatchEntry | None] = field(default=DISPATCH_TABLE)
    strict_invalid: bool = True
    increment_index_on_load_store: bool = False
    wrap_sprites: bool = False

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0

    def __post_init__(self) -> None:
        self.keypad.add_listener(self._on_key_change)

    def reset(self) -> None:
        self.state = CPUState()
        self.cycle_count = 0

    @property
    def awaiting_key(self) -> bool:
        return self.state.waiting_register is not None

    def fetch(self) -> DecodedOpcode:
        """Read the big-endian word at ``pc`` into ``state.opcode``."""

        self.state.opcode = self.memory.load16(self.state.pc)
        return decode(self.state.opcode)

    def step(self) -> int:
        """Execute one instruction; return 1 once it retires, 0 while waiting for a key."""

        state = self.state
        if state.waiting_register is not None:
            return self._poll_key_wait()

        pc_before = state.pc
        decoded = self.fetch()
        instruction = lookup(decoded, self.dispatch_table)
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%03x opcode=%04x %s",
                pc_before,
                decoded.opcode,
                instruction.format(decoded) if instruction is not None else "?",
            )

        if instruction is None:
            if self.strict_invalid:
                raise InvalidOpcodeError(decoded.opcode, pc_before)
            if debug_enabled("cpu"):
                debug_log("cpu", "skipping invalid opcode=%04x pc=%03x", decoded.opcode, pc_before)
            state.pc = (pc_before + 2) & 0x0FFF
            self.cycle_count += 1
            return 1

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")

        state.pc = (pc_before + 2) & 0x0FFF
        try:
            handler(decoded)
        except CPUError:
            state.pc = pc_before
            raise
        state.pc &= 0x0FFF

        if state.waiting_register is not None:
            return 0
        self.cycle_count += 1
        return 1

    def tick_timers(self) -> None:
        """Count both timers down by one, stopping at zero."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1
            if state.sound_timer == 0 and debug_enabled("timer"):
                debug_log("timer", "sound timer expired")

    # ------------------------------------------------------------------
    # Call stack

    def call(self, target: int) -> None:
        """Push the current ``pc`` and jump to ``target``.

        Inside :meth:`step` the program counter already points past the CALL,
        so the pushed value is the return address.
        """

        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call stack full ({STACK_DEPTH} entries) at CALL {target:#05x}")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = target & 0x0FFF

    def return_(self) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError("RET with an empty call stack")
        state.sp -= 1
        state.pc = state.stack[state.sp]

    # ------------------------------------------------------------------
    # Instruction handlers: control flow

    def op_cls(self, _: DecodedOpcode) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: DecodedOpcode) -> None:
        self.return_()

    def op_jp(self, op: DecodedOpcode) -> None:
        self.state.pc = op.nnn

    def op_call(self, op: DecodedOpcode) -> None:
        self.call(op.nnn)

    def op_jp_v0(self, op: DecodedOpcode) -> None:
        self.state.pc = (self.state.registers[0] + op.nnn) & 0x0FFF

    def op_se_byte(self, op: DecodedOpcode) -> None:
        if self.state.registers[op.x] == op.kk:
            self._skip()

    def op_sne_byte(self, op: DecodedOpcode) -> None:
        if self.state.registers[op.x] != op.kk:
            self._skip()

    def op_se_reg(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        if registers[op.x] == registers[op.y]:
            self._skip()

    def op_sne_reg(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        if registers[op.x] != registers[op.y]:
            self._skip()

    def op_skp(self, op: DecodedOpcode) -> None:
        if self.keypad.is_pressed(self.state.registers[op.x] & 0x0F):
            self._skip()

    def op_sknp(self, op: DecodedOpcode) -> None:
        if not self.keypad.is_pressed(self.state.registers[op.x] & 0x0F):
            self._skip()

    # ------------------------------------------------------------------
    # Instruction handlers: arithmetic and logic

    def op_ld_byte(self, op: DecodedOpcode) -> None:
        self.state.registers[op.x] = op.kk

    def op_add_byte(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        registers[op.x] = (registers[op.x] + op.kk) & 0xFF

    def op_ld_reg(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        registers[op.x] = registers[op.y]

    def op_or(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        registers[op.x] |= registers[op.y]

    def op_and(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        registers[op.x] &= registers[op.y]

    def op_xor(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        registers[op.x] ^= registers[op.y]

    # Flag writes come last so that VF holds the flag when x == 0xF.

    def op_add_reg(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        total = registers[op.x] + registers[op.y]
        registers[op.x] = total & 0xFF
        registers[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_sub(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        vx, vy = registers[op.x], registers[op.y]
        registers[op.x] = (vx - vy) & 0xFF
        registers[FLAG_REGISTER] = 1 if vx >= vy else 0

    def op_subn(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        vx, vy = registers[op.x], registers[op.y]
        registers[op.x] = (vy - vx) & 0xFF
        registers[FLAG_REGISTER] = 1 if vy >= vx else 0

    def op_shr(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        value = registers[op.x]
        registers[op.x] = value >> 1
        registers[FLAG_REGISTER] = value & 0x01

    def op_shl(self, op: DecodedOpcode) -> None:
        registers = self.state.registers
        value = registers[op.x]
        registers[op.x] = (value << 1) & 0xFF
        registers[FLAG_REGISTER] = (value >> 7) & 0x01

    def op_rnd(self, op: DecodedOpcode) -> None:
        self.state.registers[op.x] = (self.random_byte() & 0xFF) & op.kk

    # ------------------------------------------------------------------
    # Instruction handlers: memory, timers and I/O

    def op_ld_index(self, op: DecodedOpcode) -> None:
        self.state.index = op.nnn

    def op_add_index(self, op: DecodedOpcode) -> None:
        state = self.state
        state.index = (state.index + state.registers[op.x]) & 0xFFFF

    def op_ld_glyph(self, op: DecodedOpcode) -> None:
        self.state.index = glyph_address(self.state.registers[op.x])

    def op_ld_bcd(self, op: DecodedOpcode) -> None:
        state = self.state
        value = state.registers[op.x]
        self.memory.store8(state.index, value // 100)
        self.memory.store8(state.index + 1, (value // 10) % 10)
        self.memory.store8(state.index + 2, value % 10)

    def op_store_registers(self, op: DecodedOpcode) -> None:
        state = self.state
        for offset in range(op.x + 1):
            self.memory.store8(state.index + offset, state.registers[offset])
        if self.increment_index_on_load_store:
            state.index = (state.index + op.x + 1) & 0xFFFF

    def op_load_registers(self, op: DecodedOpcode) -> None:
        state = self.state
        for offset in range(op.x + 1):
            state.registers[offset] = self.memory.load8(state.index + offset)
        if self.increment_index_on_load_store:
            state.index = (state.index + op.x + 1) & 0xFFFF

    def op_ld_vx_dt(self, op: DecodedOpcode) -> None:
        self.state.registers[op.x] = self.state.delay_timer

    def op_ld_dt_vx(self, op: DecodedOpcode) -> None:
        self.state.delay_timer = self.state.registers[op.x]

    def op_ld_st_vx(self, op: DecodedOpcode) -> None:
        self.state.sound_timer = self.state.registers[op.x]

    def op_ld_vx_k(self, op: DecodedOpcode) -> None:
        state = self.state
        state.waiting_register = op.x
        state.latched_key = None
        # Stay on this instruction until a key goes down.
        state.pc = (state.pc - 2) & 0x0FFF
        if debug_enabled("input"):
            debug_log("input", "awaiting key for V%X at pc=%03x", op.x, state.pc)

    def op_drw(self, op: DecodedOpcode) -> None:
        state = self.state
        rows = [self.memory.load8(state.index + offset) for offset in range(op.n)]
        collision = self.framebuffer.draw_sprite(
            state.registers[op.x],
            state.registers[op.y],
            rows,
            wrap=self.wrap_sprites,
        )
        state.registers[FLAG_REGISTER] = 1 if collision else 0

    # ------------------------------------------------------------------
    # Internals

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0x0FFF

    def _on_key_change(self, index: int, pressed: bool) -> None:
        state = self.state
        if pressed and state.waiting_register is not None and state.latched_key is None:
            state.latched_key = index

    def _poll_key_wait(self) -> int:
        state = self.state
        index = state.latched_key
        if index is None:
            return 0
        register = state.waiting_register
        assert register is not None
        state.registers[register] = index
        state.waiting_register = None
        state.latched_key = None
        state.pc = (state.pc + 2) & 0x0FFF
        self.cycle_count += 1
        if debug_enabled("input"):
            debug_log("input", "key %X stored in V%X", index, register)
        return 1
