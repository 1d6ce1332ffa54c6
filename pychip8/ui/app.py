"""Pygame front end that drives the CHIP-8 core."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import RomTooLargeError
from pychip8.cpu import CPUError, InvalidOpcodeError, StackOverflowError, StackUnderflowError
from pychip8.cpu.opcodes import disassemble
from pychip8.loader import ProgramImage, load_rom_from_path
from pychip8.system import DEFAULT_CPU_HZ, DEFAULT_TIMER_HZ, DualClock, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, PHOSPHOR, Renderer

PALETTES = {"mono": MONOCHROME, "phosphor": PHOSPHOR}


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 front end."""

    rom_path: Optional[Path] = None
    scale: int = 10
    palette: str = "phosphor"
    cpu_hz: int = DEFAULT_CPU_HZ
    timer_hz: int = DEFAULT_TIMER_HZ
    fullscreen: bool = False
    seed: Optional[int] = None
    strict_invalid_opcodes: bool = True
    wrap_sprites: bool = False
    increment_index_on_load_store: bool = False


class Chip8App:
    """Owns the pygame event loop and both emulation clocks."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._program: ProgramImage | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._clock = DualClock(cpu_hz=config.cpu_hz, timer_hz=config.timer_hz)
        if config.palette not in PALETTES:
            raise ValueError(f"unknown palette: {config.palette}")
        self._renderer = Renderer(PALETTES[config.palette])
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)
        self._frame_counter = 0

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("program image is required; pass --rom <path>")

        machine = self._create_machine()
        self._load_program(machine, self._config.rom_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._program.name if self._program else ''}")
        self._init_audio(pygame)

        scale = self._config.scale
        size = (machine.display.width * scale, machine.display.height * scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(size, flags)

        frame_clock = pygame.time.Clock()
        self._running = True
        last = time.perf_counter()

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._enter_debug_shell(machine)
                        last = time.perf_counter()
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame.key.name(event.key), pressed=False)

                now = time.perf_counter()
                self._run_frame(machine, now - last)
                last = now

                frame = self._renderer.render(machine.framebuffer(), scale=scale)
                screen.blit(frame.to_surface(), (0, 0))
                pygame.display.flip()

                if self._beeper is not None:
                    self._beeper.set_active(machine.sound_timer_active())

                frame_clock.tick(_FRAME_RATE)
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _init_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return
        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _create_machine(self) -> Machine:
        return create_machine(
            MachineConfig(
                seed=self._config.seed,
                strict_invalid_opcodes=self._config.strict_invalid_opcodes,
                wrap_sprites=self._config.wrap_sprites,
                increment_index_on_load_store=self._config.increment_index_on_load_store,
            )
        )

    def _load_program(self, machine: Machine, program_path: Path) -> ProgramImage:
        try:
            program = load_rom_from_path(program_path, machine.memory)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {program_path}") from exc
        except RomTooLargeError as exc:
            raise RuntimeError(f"Failed to load program {program_path}: {exc}") from exc
        self._program = program
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded %s (%d bytes)", program.name, program.size)
        return program

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            machine.keypad.press(name)
        else:
            machine.keypad.release(name)

    def _run_frame(self, machine: Machine, elapsed: float) -> int:
        """Advance both clocks by ``elapsed`` seconds; returns retired instructions."""

        trace = self._trace_recorder
        before_step = self._record_trace if trace is not None else None

        try:
            retired, _ = self._clock.run_for(machine, elapsed, before_step=before_step)
        except (StackOverflowError, StackUnderflowError, InvalidOpcodeError) as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=32)
            raise RuntimeError(f"CPU fault at pc={machine.cpu.state.pc:03X}: {exc}") from exc
        except CPUError as exc:
            self._running = False
            raise RuntimeError(f"CPU error: {exc}") from exc
        return retired

    def _record_trace(self, machine: Machine) -> None:
        if self._trace_recorder is None:
            return
        state = machine.cpu.state.clone()
        opcode = machine.memory.load16(state.pc)
        note = "wait" if state.waiting_register is not None else ""
        self._trace_recorder.record_step(state, opcode, mnemonic=disassemble(opcode), note=note)

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Enter command: [c]pu, [d]isplay, [m]em, [t]race, [q]uit, [Enter] resume")

        paused = True
        while paused and self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                break

            if command in {"", "resume"}:
                paused = False
            elif command in {"c", "cpu"}:
                self._dump_cpu(machine)
            elif command in {"d", "display"}:
                for line in machine.display.rows():
                    print(line)
            elif command in {"t", "trace"}:
                self._dump_trace()
            elif command.startswith("m"):
                spec = command[1:].strip()
                self._dump_memory(machine, spec if spec else None)
            elif command in {"q", "quit", "exit"}:
                print("Exiting emulator.")
                self._running = False
                paused = False
            else:
                print("Commands: [Enter]=resume, [c]pu, [d]isplay, [m]em <addr> [len], [t]race, [q]uit")

    def _dump_cpu(self, machine: Machine) -> None:
        state = machine.cpu.state
        print(f"PC={state.pc:03X} I={state.index:04X} SP={state.sp:X} DT={state.delay_timer:02X} ST={state.sound_timer:02X}")
        print(" ".join(f"V{index:X}={value:02X}" for index, value in enumerate(state.registers)))
        if state.sp:
            print("Stack: " + " ".join(f"{address:03X}" for address in state.stack[: state.sp]))
        print(f"Next: {disassemble(machine.memory.load16(state.pc))}")
        if state.waiting_register is not None:
            print(f"Waiting for key -> V{state.waiting_register:X}")

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            print("Trace disabled; set PYCHIP8_DEBUG=trace")
            return
        for line in self._trace_recorder.format_entries(limit):
            print(line)

    def _dump_memory(self, machine: Machine, spec: str | None = None) -> None:
        start = machine.cpu.state.pc
        length = 0x40
        if spec:
            parts = spec.split()
            try:
                start = int(parts[0], 16)
                if len(parts) > 1:
                    length = int(parts[1], 16)
            except ValueError:
                print(f"Invalid memory spec: {spec}")
                return
        for row in range(start, start + length, 16):
            values = " ".join(f"{machine.memory.load8(row + offset):02X}" for offset in range(16))
            print(f"{row & 0x0FFF:03X}: {values}")


_FRAME_RATE = 60
