"""XSB level text <-> :class:`Grid`.

Symbols::

    #   wall
    ' ' floor (also '-' and '_')
    .   target
    $   object
    *   object on target
    @   token
    +   token on target

Rows may be ragged; short rows are padded with floor. Leading and trailing
blank lines are ignored. :func:`parse_level` also checks that the level is
playable (see :func:`validate_grid`) and raises :class:`LevelFormatError`
otherwise.
"""

from collections import deque
from typing import Deque, List, Optional, Set

from pyrsistent import pset

from grid_sokoban.errors import LevelFormatError
from grid_sokoban.grid import MAX_HEIGHT, MAX_WIDTH, Grid
from grid_sokoban.types import Position

WALL = "#"
FLOOR = " "
TARGET = "."
OBJECT = "$"
OBJECT_ON_TARGET = "*"
TOKEN = "@"
TOKEN_ON_TARGET = "+"

FLOOR_ALIASES = frozenset({" ", "-", "_"})
SYMBOLS = FLOOR_ALIASES | {WALL, TARGET, OBJECT, OBJECT_ON_TARGET, TOKEN, TOKEN_ON_TARGET}


def parse_level(text: str) -> Grid:
    """Parse one level and validate it.

    Raises:
        LevelFormatError: Unknown symbol, bad dimensions, token count other
            than one, or any :func:`validate_grid` failure.
    """
    lines = [line.rstrip("\r\n") for line in text.split("\n")]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise LevelFormatError("Level is empty")

    height = len(lines)
    width = max(len(line) for line in lines)
    if width > MAX_WIDTH or height > MAX_HEIGHT:
        raise LevelFormatError(
            f"Level is {width}x{height}, maximum is {MAX_WIDTH}x{MAX_HEIGHT}"
        )

    walls: Set[Position] = set()
    targets: Set[Position] = set()
    objects: Set[Position] = set()
    tokens: List[Position] = []

    for y, line in enumerate(lines):
        for x, char in enumerate(line):
            pos = Position(x, y)
            if char not in SYMBOLS:
                raise LevelFormatError(f"Unknown symbol {char!r} at {(x, y)}")
            if char == WALL:
                walls.add(pos)
            if char in (TARGET, OBJECT_ON_TARGET, TOKEN_ON_TARGET):
                targets.add(pos)
            if char in (OBJECT, OBJECT_ON_TARGET):
                objects.add(pos)
            if char in (TOKEN, TOKEN_ON_TARGET):
                tokens.append(pos)

    if len(tokens) != 1:
        raise LevelFormatError(f"Level needs exactly one token, found {len(tokens)}")

    grid = Grid(
        width=width,
        height=height,
        token=tokens[0],
        walls=pset(walls),
        targets=pset(targets),
        objects=pset(objects),
    )
    validate_grid(grid)
    return grid


def validate_grid(grid: Grid) -> None:
    """Reject grids that cannot be played.

    * at least one target, and as many objects as targets;
    * the token must be enclosed: no cell it can reach through non-wall
      cells lies on the map border.
    """
    if not grid.targets:
        raise LevelFormatError("Level has no targets")
    if len(grid.objects) != len(grid.targets):
        raise LevelFormatError(
            f"Level has {len(grid.objects)} objects but {len(grid.targets)} targets"
        )
    leak = _find_leak(grid)
    if leak is not None:
        raise LevelFormatError(f"Level is not enclosed, token can reach {leak}")


def _find_leak(grid: Grid) -> Optional[Position]:
    start = grid.token
    queue: Deque[Position] = deque([start])
    visited: Set[Position] = {start}
    while queue:
        pos = queue.popleft()
        if pos.x in (0, grid.width - 1) or pos.y in (0, grid.height - 1):
            return pos
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            np = pos.offset(dx, dy)
            if np not in visited and not grid.is_wall(np.x, np.y):
                visited.add(np)
                queue.append(np)
    return None


def format_level(grid: Grid) -> str:
    """Render ``grid`` back to XSB text (trailing floor stripped per row)."""
    rows: List[str] = []
    for y in range(grid.height):
        row: List[str] = []
        for x in range(grid.width):
            if grid.is_wall(x, y):
                row.append(WALL)
            elif grid.has_object(x, y):
                row.append(OBJECT_ON_TARGET if grid.is_target(x, y) else OBJECT)
            elif grid.has_token(x, y):
                row.append(TOKEN_ON_TARGET if grid.is_target(x, y) else TOKEN)
            elif grid.is_target(x, y):
                row.append(TARGET)
            else:
                row.append(FLOOR)
        rows.append("".join(row).rstrip())
    return "\n".join(rows)
