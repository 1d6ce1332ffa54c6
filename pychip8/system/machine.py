"""CHIP-8 machine assembly and public interpreter surface."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU
from pychip8.cpu.core import RandomSource
from pychip8.io import Keypad
from pychip8.video import FONTSET_START, GLYPH_TABLE, Framebuffer


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine.

    ``random_byte`` overrides the generator used by RND; otherwise a
    :class:`random.Random` seeded with ``seed`` (or the wall clock) is used.
    """

    program_image: Optional[bytes] = None
    random_byte: Optional[RandomSource] = None
    seed: Optional[int] = None
    strict_invalid_opcodes: bool = True
    increment_index_on_load_store: bool = False
    wrap_sprites: bool = False


@dataclass
class Machine:
    """Aggregates the core components of the CHIP-8."""

    memory: Memory
    cpu: Chip8CPU
    display: Framebuffer
    keypad: Keypad

    def load_program(self, data: bytes) -> int:
        return self.memory.load_program(data)

    def step(self) -> int:
        return self.cpu.step()

    def tick_timers(self) -> None:
        self.cpu.tick_timers()

    def set_key(self, index: int, pressed: bool) -> None:
        self.keypad.set_key(index, pressed)

    def framebuffer(self) -> memoryview:
        return self.display.view()

    def sound_timer_active(self) -> bool:
        return self.cpu.state.sound_timer > 0

    def reset(self) -> None:
        """Return to the power-on state; program memory above the glyphs is kept."""

        self.cpu.reset()
        self.display.clear()
        self.keypad.reset()


def default_random_source(seed: int | None = None) -> RandomSource:
    generator = random.Random(seed)
    return lambda: generator.randrange(0x100)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the glyph table loaded and ``pc = 0x200``."""

    config = config or MachineConfig()

    memory = Memory()
    memory.load_image(FONTSET_START, GLYPH_TABLE)
    if config.program_image is not None:
        memory.load_program(config.program_image)

    display = Framebuffer()
    keypad = Keypad()
    random_byte = config.random_byte or default_random_source(config.seed)

    cpu = Chip8CPU(
        memory,
        display,
        keypad,
        random_byte,
        strict_invalid=config.strict_invalid_opcodes,
        increment_index_on_load_store=config.increment_index_on_load_store,
        wrap_sprites=config.wrap_sprites,
    )
    cpu.reset()

    return Machine(memory=memory, cpu=cpu, display=display, keypad=keypad)
