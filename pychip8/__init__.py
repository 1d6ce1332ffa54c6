"""CHIP-8 interpreter.

The core lives in :mod:`pychip8.cpu`, :mod:`pychip8.bus`, :mod:`pychip8.io`
and :mod:`pychip8.video`; :mod:`pychip8.system` assembles them into a
:class:`~pychip8.system.Machine`. Loading, audio and the pygame front end are
collaborators that drive the machine from outside.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__version__ = "0.1.0"

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
