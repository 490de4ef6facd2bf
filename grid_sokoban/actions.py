"""Action enumerations.

Defines the human readable :class:`Action` (string enum) accepted by
:meth:`grid_sokoban.engine.GameEngine.perform` and a stable integer
:class:`GymAction` mapping for Gymnasium compatibility.

``MOVE_ACTIONS`` is the canonical ordered list of movement actions; checks like
``if action in MOVE_ACTIONS`` are preferred over enum name comparisons.
``DIRECTIONS`` maps each of them to its unit ``(dx, dy)`` vector. The order
(up, down, left, right) is also the neighbour order of the path search.
"""

from enum import IntEnum, StrEnum, auto
from typing import Dict, Tuple


class Action(StrEnum):
    """String enum of player actions.

    Members:
        UP, DOWN, LEFT, RIGHT: Step or push one cell in a direction.
        UNDO, REDO: Walk the history.
        RESTART: Reload the current level.
    """

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    UNDO = auto()
    REDO = auto()
    RESTART = auto()


MOVE_ACTIONS = [Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT]

DIRECTIONS: Dict[Action, Tuple[int, int]] = {
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
}


class GymAction(IntEnum):
    """Stable integer mapping for integration with Gymnasium ``Discrete`` spaces."""

    UP = 0  # start at 0 for explicitness
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    UNDO = auto()
    REDO = auto()


GYM_TO_ACTION: Dict[GymAction, Action] = {
    GymAction.UP: Action.UP,
    GymAction.DOWN: Action.DOWN,
    GymAction.LEFT: Action.LEFT,
    GymAction.RIGHT: Action.RIGHT,
    GymAction.UNDO: Action.UNDO,
    GymAction.REDO: Action.REDO,
}
