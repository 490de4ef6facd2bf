"""Level collections.

A :class:`LevelCollection` is the static level source consumed by
:class:`grid_sokoban.level_map.LevelMap`: an identity (name + integer id), an
ordered list of raw XSB level texts and the player's progress through it.

Collection files follow the common ``.xsb``/``.txt`` layout: levels are
separated by blank lines; lines starting with ``;`` are comments and lines
that contain anything other than level symbols (``Title: ...``, level
numbers) are treated as metadata and dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from grid_sokoban.levels.xsb import SYMBOLS

logger = logging.getLogger(__name__)

# Collections loaded from arbitrary files have no stable identity.
EXTERNAL_COLLECTION_ID = -1


@dataclass
class LevelCollection:
    """Named, ordered set of levels.

    Attributes:
        name: Display name.
        id: Stable identity used by bookmarks; negative for external files.
        levels: Raw XSB text per level.
        completed_levels: Levels ``0 .. completed_levels - 1`` are solved.
    """

    name: str
    id: int
    levels: List[str] = field(default_factory=list)
    completed_levels: int = 0

    @property
    def no_of_levels(self) -> int:
        return len(self.levels)

    def level(self, n: int) -> str:
        """Return the raw text of level ``n`` (0-based)."""
        if not 0 <= n < len(self.levels):
            raise IndexError(f"Level {n} out of range for collection {self.name!r}")
        return self.levels[n]

    def mark_completed(self, n: int) -> None:
        if n + 1 > self.completed_levels:
            self.completed_levels = n + 1
            logger.info("Collection %r: level %d completed", self.name, n)

    @classmethod
    def from_text(cls, text: str, name: str, id: int = EXTERNAL_COLLECTION_ID) -> LevelCollection:
        levels: List[str] = []
        current: List[str] = []
        for raw in text.splitlines():
            line = raw.rstrip()
            if _is_level_row(line):
                current.append(line)
                continue
            if current:
                levels.append("\n".join(current))
                current = []
        if current:
            levels.append("\n".join(current))
        if not levels:
            logger.warning("Collection %r contains no levels", name)
        return cls(name=name, id=id, levels=levels)

    @classmethod
    def from_file(cls, path: Union[str, Path], id: int = EXTERNAL_COLLECTION_ID) -> LevelCollection:
        path = Path(path)
        return cls.from_text(path.read_text(encoding="utf-8"), name=path.stem, id=id)


def _is_level_row(line: str) -> bool:
    # A level row has at least one wall and only level symbols.
    if not line.strip() or line.lstrip().startswith(";"):
        return False
    return "#" in line and all(char in SYMBOLS for char in line)
