"""Grid math helpers.

Small pure functions shared by the move builder, the level map and the
engine. Kept free of engine types beyond ``Position`` so they stay cheap in
inner loops.
"""

from typing import Optional, Tuple

from grid_sokoban.types import Position


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


def direction_towards(frm: Position, to: Position) -> Tuple[int, int]:
    """Per-axis sign of ``to - frm`` (may be diagonal, may be ``(0, 0)``)."""
    return sign(to.x - frm.x), sign(to.y - frm.y)


def line_direction(frm: Position, to: Position) -> Optional[Tuple[int, int]]:
    """Unit vector from ``frm`` to ``to`` if both share a row or column.

    Returns ``None`` when the positions coincide or are not in line.
    """
    if frm == to or (frm.x != to.x and frm.y != to.y):
        return None
    return direction_towards(frm, to)


def is_unit_step(dx: int, dy: int) -> bool:
    """Return True for the four orthogonal unit vectors."""
    return abs(dx) + abs(dy) == 1
