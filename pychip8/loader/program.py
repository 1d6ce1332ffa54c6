"""Program metadata structures for CHIP-8 loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class AddressRegion:
    """A contiguous address range inside the 4 KiB address space."""

    start: int
    end: int
    comment: str = ""

    def length(self) -> int:
        return self.end - self.start + 1


@dataclass
class ProgramImage:
    """Describes a program image after it has been written to memory."""

    name: str = ""
    size: int = 0
    regions: List[AddressRegion] = field(default_factory=list)

    def add_region(self, start: int, end: int, comment: str = "") -> None:
        self.regions.append(AddressRegion(start, end, comment))

    @property
    def entry_point(self) -> int | None:
        if not self.regions:
            return None
        return self.regions[0].start
