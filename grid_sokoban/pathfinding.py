"""Click-to-walk path search.

Breadth-first search over walkable cells (no walls, no objects) from the
token to a clicked cell. Neighbours are visited in the fixed order up, down,
left, right, so among equally short paths the same one is always returned.
The search never pushes; it is pure navigation.
"""

from collections import deque
from typing import Deque, Dict, List, Optional

from pyrsistent import PSet, pset

from grid_sokoban.actions import DIRECTIONS, MOVE_ACTIONS
from grid_sokoban.grid import Grid
from grid_sokoban.move import Move
from grid_sokoban.types import Position

NEIGHBOURS = [DIRECTIONS[action] for action in MOVE_ACTIONS]


def _bfs(grid: Grid, goal: Optional[Position] = None) -> Dict[Position, Position]:
    """Return the BFS predecessor map from the token (stops early at ``goal``)."""
    start = grid.token
    queue: Deque[Position] = deque([start])
    prev: Dict[Position, Position] = {start: start}
    while queue:
        pos = queue.popleft()
        for dx, dy in NEIGHBOURS:
            np = pos.offset(dx, dy)
            if np in prev or not grid.is_walkable(np.x, np.y):
                continue
            prev[np] = pos
            if np == goal:
                return prev
            queue.append(np)
    return prev


def _path(grid: Grid, x: int, y: int) -> Optional[List[Position]]:
    goal = Position(x, y)
    if goal == grid.token or not grid.is_walkable(x, y):
        return None
    prev = _bfs(grid, goal)
    if goal not in prev:
        return None
    path: List[Position] = []
    pos = goal
    while pos != grid.token:
        path.append(pos)
        pos = prev[pos]
    path.reverse()
    return path


def search(grid: Grid, x: int, y: int) -> Optional[Move]:
    """Shortest step-only move from the token to ``(x, y)``.

    Args:
        grid (Grid): Board to search; not modified.
        x (int): Target column.
        y (int): Target row.

    Returns:
        Move | None: Sealed move of minimal length, or ``None`` if the target
        is the token cell, out of bounds, blocked or unreachable.
    """
    path = _path(grid, x, y)
    if path is None:
        return None
    move = Move(grid.token.x, grid.token.y)
    for pos in path:
        move.step(pos.x, pos.y)
    move.finish()
    return move


def distance(grid: Grid, x: int, y: int) -> Optional[int]:
    """Number of steps the token needs to reach ``(x, y)``, ``0`` for its own cell."""
    if grid.token == Position(x, y):
        return 0
    path = _path(grid, x, y)
    return None if path is None else len(path)


def reachable(grid: Grid) -> PSet[Position]:
    """Cells the token can walk to without pushing, its own cell included."""
    return pset(_bfs(grid).keys())
