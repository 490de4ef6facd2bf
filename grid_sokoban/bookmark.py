"""Bookmarks: resumable snapshots of a game in progress.

A bookmark does not copy the grid. It records which level was being played,
how many moves had been made and the serialized history; going to a bookmark
reloads the level and replays the history. The replay must land on the same
move count, otherwise the bookmark is reported invalid and the level is left
freshly loaded with an empty history.

Writing bookmarks to a settings store is left to the caller; ``as_dict`` and
``from_dict`` give a flat, JSON-friendly record.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

from grid_sokoban.history import History
from grid_sokoban.level_map import LevelMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bookmark:
    """Attributes:
    collection_id: ``LevelCollection.id`` of the bookmarked collection.
    level: 0-based level index.
    moves: ``LevelMap.total_moves`` when the bookmark was taken.
    history: ``History.save()`` output.
    """

    collection_id: int
    level: int
    moves: int
    history: str

    @classmethod
    def create(cls, level_map: LevelMap, history: History) -> Bookmark:
        collection = level_map.collection
        if collection is None:
            raise ValueError("Level map has no collection")
        return cls(
            collection_id=collection.id,
            level=level_map.level,
            moves=level_map.total_moves,
            history=history.save(),
        )

    def go_to(self, level_map: LevelMap, history: History) -> bool:
        """Reload the bookmarked level on ``level_map`` and replay the history."""
        history.clear()
        level_map.load_level(self.level)
        if level_map.level != self.level or not level_map.good_level():
            logger.warning("Bookmark points at unusable level %d", self.level)
            return False
        if history.load(level_map, self.history) and level_map.total_moves == self.moves:
            return True
        logger.warning("Bad bookmark for level %d", self.level)
        history.clear()
        level_map.load_level(self.level)
        return False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bookmark:
        return cls(
            collection_id=int(data["collection_id"]),
            level=int(data["level"]),
            moves=int(data["moves"]),
            history=str(data["history"]),
        )
