"""Common value types and enumerations.

``Position`` is the coordinate type shared by every engine component. The
enumerations describe what a grid cell contains and what kind of elementary
displacement a :class:`grid_sokoban.move.Move` records.
"""

from dataclasses import dataclass
from enum import StrEnum, auto


@dataclass(frozen=True)
class Position:
    """Grid coordinate.

    Attributes:
        x: Column index (0 at left).
        y: Row index (0 at top).
    """

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


class Terrain(StrEnum):
    """Static floor kind of a cell."""

    WALL = auto()
    FLOOR = auto()
    TARGET = auto()


class Occupancy(StrEnum):
    """What currently stands on a cell."""

    EMPTY = auto()
    OBJECT = auto()
    TOKEN = auto()


class DisplacementKind(StrEnum):
    """Elementary action kinds.

    ``UNSTEP`` and ``UNPUSH`` are the inverses of ``STEP`` and ``PUSH``; they
    appear only in moves produced by :meth:`grid_sokoban.move.Move.inverse`
    and decrement the level counters when applied.
    """

    STEP = auto()
    PUSH = auto()
    UNSTEP = auto()
    UNPUSH = auto()


INVERSE_KIND = {
    DisplacementKind.STEP: DisplacementKind.UNSTEP,
    DisplacementKind.PUSH: DisplacementKind.UNPUSH,
    DisplacementKind.UNSTEP: DisplacementKind.STEP,
    DisplacementKind.UNPUSH: DisplacementKind.PUSH,
}
