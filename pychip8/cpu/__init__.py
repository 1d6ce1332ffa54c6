"""CPU package for the CHIP-8 interpreter."""

from .core import (
    Chip8CPU,
    CPUError,
    CPUState,
    InvalidOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "InvalidOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "opcodes",
]
