"""Immutable grid model.

A :class:`Grid` is a value object: wall, target and object positions are
``pyrsistent`` sets and the token is a single :class:`Position`. Mutators
return a *new* grid; :class:`grid_sokoban.level_map.LevelMap` owns the current
one and swaps its reference, the same way systems in a reducer return a new
state instead of editing the old one.

Invariants kept by the mutators:

* exactly one token, inside bounds, never on a wall or an object;
* objects never on walls and never stacked;
* a target is *satisfied* iff it holds an object, and the level is completed
  iff every target is satisfied.

Preconditions are checked and violations raise :class:`MoveError`; callers
that handle user input (the level map) test legality first and never trigger
them.
"""

from dataclasses import dataclass, replace

from pyrsistent import PSet, pset

from grid_sokoban.errors import MoveError
from grid_sokoban.types import Occupancy, Position, Terrain

MAX_WIDTH = 50
MAX_HEIGHT = 50


@dataclass(frozen=True)
class Cell:
    """Read-only view of one grid position."""

    terrain: Terrain
    occupancy: Occupancy

    @property
    def occupiable(self) -> bool:
        return self.terrain != Terrain.WALL and self.occupancy != Occupancy.OBJECT


@dataclass(frozen=True)
class Grid:
    """Fixed-size Sokoban board.

    Attributes:
        width (int): Columns, ``1..MAX_WIDTH``.
        height (int): Rows, ``1..MAX_HEIGHT``.
        token (Position): Current token cell.
        walls (PSet[Position]): Wall cells.
        targets (PSet[Position]): Target-floor cells.
        objects (PSet[Position]): Cells holding a movable object.
    """

    width: int
    height: int
    token: Position
    walls: PSet[Position] = pset()
    targets: PSet[Position] = pset()
    objects: PSet[Position] = pset()

    # -------- Queries --------

    def has_coord(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, x: int, y: int) -> bool:
        return Position(x, y) in self.walls

    def is_target(self, x: int, y: int) -> bool:
        return Position(x, y) in self.targets

    def has_object(self, x: int, y: int) -> bool:
        return Position(x, y) in self.objects

    def has_token(self, x: int, y: int) -> bool:
        return self.token == Position(x, y)

    def is_walkable(self, x: int, y: int) -> bool:
        """In bounds, not a wall and free of objects."""
        return self.has_coord(x, y) and not self.is_wall(x, y) and not self.has_object(x, y)

    def cell(self, x: int, y: int) -> Cell:
        if not self.has_coord(x, y):
            raise IndexError(f"Out of bounds: {(x, y)} for grid {self.width}x{self.height}")
        if self.is_wall(x, y):
            terrain = Terrain.WALL
        elif self.is_target(x, y):
            terrain = Terrain.TARGET
        else:
            terrain = Terrain.FLOOR
        if self.has_object(x, y):
            occupancy = Occupancy.OBJECT
        elif self.has_token(x, y):
            occupancy = Occupancy.TOKEN
        else:
            occupancy = Occupancy.EMPTY
        return Cell(terrain, occupancy)

    def satisfied_targets(self) -> int:
        return len(self.targets & self.objects)

    def completed(self) -> bool:
        """True iff every target-floor cell holds an object."""
        return self.targets.issubset(self.objects)

    # -------- Mutators (return a new Grid) --------

    def move_token(self, frm: Position, to: Position) -> "Grid":
        if frm != self.token:
            raise MoveError(f"Token is at {self.token}, not {frm}")
        if not self.is_walkable(to.x, to.y):
            raise MoveError(f"Token cannot enter {to}")
        return replace(self, token=to)

    def move_object(self, frm: Position, to: Position) -> "Grid":
        if frm not in self.objects:
            raise MoveError(f"No object at {frm}")
        if not self.is_walkable(to.x, to.y) or to == self.token:
            raise MoveError(f"Object cannot enter {to}")
        return replace(self, objects=self.objects.remove(frm).add(to))
