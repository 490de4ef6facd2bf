"""Stepwise move playback.

A :class:`MoveSequence` is a cursor over one sealed :class:`Move`. Each call
to :meth:`MoveSequence.next` applies exactly one displacement to the bound
:class:`LevelMap`, so an external timer can animate a committed move one cell
per tick, or a caller can drain it in a loop for the no-animation path.

Every prefix of a move is itself a legal sequence of elementary moves, so
the player may be stopped at any point and the map stays valid. The
sequence borrows the move; ownership stays with the history.
"""

from enum import StrEnum, auto
from typing import Optional

from grid_sokoban.errors import MoveError
from grid_sokoban.level_map import LevelMap
from grid_sokoban.move import Move
from grid_sokoban.types import DisplacementKind, Position


class SequenceState(StrEnum):
    IDLE = auto()
    PLAYING = auto()
    EXHAUSTED = auto()


class MoveSequence:
    def __init__(self, move: Move, level_map: LevelMap) -> None:
        if not move.finished:
            raise MoveError("Only sealed moves can be played")
        if level_map.token != move.origin:
            raise MoveError(f"Move starts at {move.origin} but the token is at {level_map.token}")
        self._move = move
        self._map = level_map
        self._displacements = move.displacements
        self._pos = 0
        self._object: Optional[Position] = None
        self._state = SequenceState.PLAYING if self._displacements else SequenceState.EXHAUSTED

    @property
    def move(self) -> Move:
        return self._move

    @property
    def state(self) -> SequenceState:
        return self._state

    @property
    def remaining(self) -> int:
        return len(self._displacements) - self._pos

    @property
    def token(self) -> Position:
        return self._map.token

    @property
    def object(self) -> Optional[Position]:
        """Cell of the object moved by the last displacement, if any."""
        return self._object

    def next(self) -> bool:
        """Apply one displacement; return True while more remain.

        Raises:
            MoveError: The map rejected the displacement, meaning it was
                changed behind the sequence's back.
        """
        if self._state != SequenceState.PLAYING:
            return False
        d = self._displacements[self._pos]
        before = self._map.token
        if not self._map.apply(d):
            self._state = SequenceState.IDLE
            raise MoveError(f"Level map rejected {d} at {before}")
        self._pos += 1
        if d.kind == DisplacementKind.PUSH:
            self._object = self._map.token.offset(d.dx, d.dy)
        elif d.kind == DisplacementKind.UNPUSH:
            self._object = before
        else:
            self._object = None
        if self._pos >= len(self._displacements):
            self._state = SequenceState.EXHAUSTED
            return False
        return True

    def stop(self) -> None:
        """Abandon playback, leaving the map at the current prefix."""
        if self._state == SequenceState.PLAYING:
            self._state = SequenceState.IDLE
