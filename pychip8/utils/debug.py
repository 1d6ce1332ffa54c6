"""Category-filtered debug logging for the CHIP-8 interpreter.

Categories are enabled through ``PYCHIP8_DEBUG``, a comma separated list such
as ``cpu,input`` or ``all``. Known categories are ``cpu``, ``input``,
``audio``, ``timer``, ``trace`` and ``perf``.
"""

from __future__ import annotations

import os

ENV_VARIABLE = "PYCHIP8_DEBUG"
_ALL = "all"

# Parsed lazily on first use; reload_categories() drops the cache.
_enabled: frozenset[str] | None = None


def _parse(value: str) -> frozenset[str]:
    return frozenset(name.strip().lower() for name in value.split(",") if name.strip())


def _categories() -> frozenset[str]:
    global _enabled
    if _enabled is None:
        _enabled = _parse(os.environ.get(ENV_VARIABLE, ""))
    return _enabled


def reload_categories() -> frozenset[str]:
    """Re-read ``PYCHIP8_DEBUG``; used after the environment changes."""

    global _enabled
    _enabled = None
    return _categories()


def debug_enabled(category: str | None = None) -> bool:
    """True when ``category`` (or, with no argument, any category) is on."""

    enabled = _categories()
    if not enabled:
        return False
    if category is None or _ALL in enabled:
        return True
    return category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
