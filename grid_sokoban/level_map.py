"""Level map: the authoritative mutable game state.

``LevelMap`` owns the current :class:`Grid` of one level of a
:class:`LevelCollection`, plus the step / push counters and the
*good level* flag. It exposes the elementary moves:

* :meth:`step` / :meth:`push` move the token one cell (pushing an object for
  the latter) and bump the counters;
* :meth:`unstep` / :meth:`unpush` are their exact inverses, used when a
  :class:`grid_sokoban.move.Move` is replayed backwards.

Every elementary move is validated first and returns ``False`` without
touching anything when illegal. A level that failed to parse is *broken*:
:meth:`good_level` is ``False`` and every mutator is rejected.

History is owned by the caller; loading another level does not clear it.
"""

from __future__ import annotations

import logging
from typing import Optional

from grid_sokoban.errors import LevelFormatError
from grid_sokoban.grid import Grid
from grid_sokoban.levels.collection import EXTERNAL_COLLECTION_ID, LevelCollection
from grid_sokoban.levels.xsb import parse_level
from grid_sokoban.move import Displacement
from grid_sokoban.types import DisplacementKind, Position
from grid_sokoban.utils.grid import is_unit_step

logger = logging.getLogger(__name__)


class LevelMap:
    def __init__(self, collection: Optional[LevelCollection] = None, level: int = 0) -> None:
        self._collection = collection
        self._level = 0
        self._grid: Optional[Grid] = None
        self._good = False
        self.total_steps = 0
        self.total_pushes = 0
        if collection is not None:
            self.load_level(level)

    @classmethod
    def from_text(cls, text: str, name: str = "level") -> LevelMap:
        """Single-level map built from XSB text (external collection)."""
        return cls(LevelCollection(name=name, id=EXTERNAL_COLLECTION_ID, levels=[text]))

    # -------- Level selection --------

    def load_level(self, n: int) -> None:
        """Load level ``n`` (clamped into the collection) and reset counters."""
        self.total_steps = 0
        self.total_pushes = 0
        self._grid = None
        self._good = False
        collection = self._collection
        if collection is None or collection.no_of_levels == 0:
            self._level = 0
            logger.warning("No level to load")
            return
        clamped = min(max(n, 0), collection.no_of_levels - 1)
        if clamped != n:
            logger.debug("Level %d clamped to %d", n, clamped)
        self._level = clamped
        try:
            self._grid = parse_level(collection.level(clamped))
        except LevelFormatError as e:
            logger.warning("Level %d of %r is broken: %s", clamped, collection.name, e)
            return
        self._good = True

    def change_collection(self, collection: LevelCollection) -> None:
        """Switch collection and load its first unsolved level."""
        self._collection = collection
        self.load_level(min(collection.completed_levels, max(collection.no_of_levels - 1, 0)))

    @property
    def collection(self) -> Optional[LevelCollection]:
        return self._collection

    @property
    def collection_name(self) -> str:
        return self._collection.name if self._collection is not None else ""

    @property
    def level(self) -> int:
        return self._level

    @property
    def no_of_levels(self) -> int:
        return self._collection.no_of_levels if self._collection is not None else 0

    @property
    def completed_levels(self) -> int:
        return self._collection.completed_levels if self._collection is not None else 0

    # -------- Queries --------

    @property
    def grid(self) -> Optional[Grid]:
        return self._grid

    def good_level(self) -> bool:
        return self._good

    def completed(self) -> bool:
        return self._grid is not None and self._grid.completed()

    def record_completion(self) -> bool:
        """Mark the current level solved in its collection if it is completed.

        Elementary moves leave collection progress alone; only moves that are
        actually played record it.
        """
        if not self.completed() or self._collection is None:
            return False
        self._collection.mark_completed(self._level)
        return True

    @property
    def token(self) -> Position:
        """Token cell of a good level.

        Raises:
            LevelFormatError: The level is broken; check :meth:`good_level` first.
        """
        if self._grid is None:
            raise LevelFormatError("Broken level has no token")
        return self._grid.token

    @property
    def xpos(self) -> int:
        return self.token.x

    @property
    def ypos(self) -> int:
        return self.token.y

    @property
    def total_moves(self) -> int:
        return self.total_steps + self.total_pushes

    # -------- Elementary moves --------

    def _adjacent(self, x: int, y: int) -> Optional[Grid]:
        """Return the grid if ``(x, y)`` is one orthogonal step from the token."""
        grid = self._grid
        if not self._good or grid is None:
            return None
        if not is_unit_step(x - grid.token.x, y - grid.token.y):
            return None
        return grid

    def step(self, x: int, y: int) -> bool:
        grid = self._adjacent(x, y)
        if grid is None or not grid.is_walkable(x, y):
            return False
        self._grid = grid.move_token(grid.token, Position(x, y))
        self.total_steps += 1
        return True

    def push(self, x: int, y: int) -> bool:
        grid = self._adjacent(x, y)
        if grid is None or not grid.has_object(x, y):
            return False
        to = Position(x, y)
        beyond = to.offset(x - grid.token.x, y - grid.token.y)
        if not grid.is_walkable(beyond.x, beyond.y):
            return False
        self._grid = grid.move_object(to, beyond).move_token(grid.token, to)
        self.total_pushes += 1
        return True

    def unstep(self, x: int, y: int) -> bool:
        grid = self._adjacent(x, y)
        if grid is None or not grid.is_walkable(x, y):
            return False
        self._grid = grid.move_token(grid.token, Position(x, y))
        self.total_steps -= 1
        return True

    def unpush(self, x: int, y: int) -> bool:
        """Step to ``(x, y)`` pulling the object behind the token along."""
        grid = self._adjacent(x, y)
        if grid is None or not grid.is_walkable(x, y):
            return False
        token = grid.token
        behind = token.offset(token.x - x, token.y - y)
        if not grid.has_object(behind.x, behind.y):
            return False
        self._grid = grid.move_token(token, Position(x, y)).move_object(behind, token)
        self.total_pushes -= 1
        return True

    def apply(self, displacement: Displacement) -> bool:
        """Apply one :class:`Displacement` relative to the token."""
        if self._grid is None:
            return False
        to = self._grid.token.offset(displacement.dx, displacement.dy)
        if displacement.kind == DisplacementKind.STEP:
            return self.step(to.x, to.y)
        elif displacement.kind == DisplacementKind.PUSH:
            return self.push(to.x, to.y)
        elif displacement.kind == DisplacementKind.UNSTEP:
            return self.unstep(to.x, to.y)
        elif displacement.kind == DisplacementKind.UNPUSH:
            return self.unpush(to.x, to.y)
        raise ValueError(f"Unknown displacement kind: {displacement.kind}")
