"""Flat-name collision tracking.

Two distinct project paths can flatten to the same name, e.g.
``a__b/c.tex`` and ``a/b__c.tex`` both become ``a__b__c.tex``. The
registry is an explicit accumulator threaded through planning; it
records which source currently owns each flat name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class CollisionPolicy(StrEnum):
    """What to do when two sources flatten to the same name."""

    ERROR = "error"
    WARN = "warn"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class Collision:
    """A flat name claimed by more than one source file."""

    flat_name: str
    previous: Path  # loses when later sources win
    current: Path


class FlatNameRegistry:
    """Map each claimed flat name to the source that owns it.

    Claims are processed in traversal order; the latest claim owns the
    name, matching a sequential copy that overwrites earlier files.
    """

    def __init__(self) -> None:
        self._owners: dict[str, Path] = {}
        self.collisions: list[Collision] = []

    def claim(self, flat_name: str, source: Path) -> Collision | None:
        """Record *source* as owner of *flat_name*, returning any collision."""
        previous = self._owners.get(flat_name)
        self._owners[flat_name] = source
        if previous is None or previous == source:
            return None
        collision = Collision(flat_name=flat_name, previous=previous, current=source)
        self.collisions.append(collision)
        return collision

    def owner(self, flat_name: str) -> Path | None:
        return self._owners.get(flat_name)

    def __contains__(self, flat_name: object) -> bool:
        return flat_name in self._owners

    def __len__(self) -> int:
        return len(self._owners)
