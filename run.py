"""Command-line entry point for the CHIP-8 interpreter.

Example::

    python run.py --rom roms/PONG.ch8 --scale 12 --cpu-hz 900
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import DEFAULT_CPU_HZ, DEFAULT_TIMER_HZ
from pychip8.ui import AppConfig, Chip8App
from pychip8.ui.app import PALETTES


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run.py", description="CHIP-8 interpreter")
    parser.add_argument("--rom", type=Path, required=True, help="Raw CHIP-8 program image, loaded at 0x200")

    display = parser.add_argument_group("display")
    display.add_argument("--scale", type=_positive_int, default=10, help="Window pixels per cell (default: 10)")
    display.add_argument("--palette", choices=sorted(PALETTES), default="phosphor", help="Colour scheme (default: phosphor)")
    display.add_argument("--fullscreen", action="store_true", help="Launch in fullscreen mode")

    timing = parser.add_argument_group("timing")
    timing.add_argument(
        "--cpu-hz",
        type=_positive_int,
        default=DEFAULT_CPU_HZ,
        help=f"Instructions per second (default: {DEFAULT_CPU_HZ})",
    )
    timing.add_argument(
        "--timer-hz",
        type=_positive_int,
        default=DEFAULT_TIMER_HZ,
        help=f"Delay/sound timer rate (default: {DEFAULT_TIMER_HZ})",
    )

    behaviour = parser.add_argument_group("behaviour")
    behaviour.add_argument("--seed", type=int, help="Seed for RND (default: wall clock)")
    behaviour.add_argument("--lenient", action="store_true", help="Skip invalid opcodes instead of stopping")
    behaviour.add_argument("--wrap-sprites", action="store_true", help="Wrap sprites at the screen edges instead of clipping")
    behaviour.add_argument(
        "--increment-index",
        action="store_true",
        help="Advance I past the registers on Fx55/Fx65",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.is_file():
        parser.error(f"ROM file not found: {args.rom}")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        palette=args.palette,
        cpu_hz=args.cpu_hz,
        timer_hz=args.timer_hz,
        fullscreen=args.fullscreen,
        seed=args.seed,
        strict_invalid_opcodes=not args.lenient,
        wrap_sprites=args.wrap_sprites,
        increment_index_on_load_store=args.increment_index,
    )
    try:
        Chip8App(config).run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
