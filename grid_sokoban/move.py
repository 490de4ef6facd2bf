"""Reversible move representation.

A :class:`Move` is one committed player action: an origin plus an ordered
list of unit :class:`Displacement` records. It may end in a single run of
pushes. Moves are built incrementally with :meth:`Move.step` /
:meth:`Move.push`, sealed with :meth:`Move.finish`, and from then on only
replayed: forward (:meth:`Move.redo`, or stepwise through
:class:`grid_sokoban.sequence.MoveSequence`) or backward (:meth:`Move.undo`).

Undo never snapshots the grid. It replays :meth:`Move.inverse`, whose
displacements are the original ones reversed and negated with ``STEP`` ->
``UNSTEP`` and ``PUSH`` -> ``UNPUSH``. The inverse of an inverse is the
original move, so undo/redo is expressed uniformly as "replay a move".

Text encoding (one character per displacement): ``u d l r`` for steps and
``U D L R`` for pushes. Inverse kinds are never encoded; history stores the
forward moves only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Sequence, Tuple

from grid_sokoban.errors import MoveError
from grid_sokoban.types import INVERSE_KIND, DisplacementKind, Position
from grid_sokoban.utils.grid import line_direction

if TYPE_CHECKING:
    from grid_sokoban.level_map import LevelMap

_STEP_CHARS: Dict[Tuple[int, int], str] = {(0, -1): "u", (0, 1): "d", (-1, 0): "l", (1, 0): "r"}
_CHAR_TO_DISPLACEMENT: Dict[str, Tuple[int, int, DisplacementKind]] = {}
for (_dx, _dy), _char in _STEP_CHARS.items():
    _CHAR_TO_DISPLACEMENT[_char] = (_dx, _dy, DisplacementKind.STEP)
    _CHAR_TO_DISPLACEMENT[_char.upper()] = (_dx, _dy, DisplacementKind.PUSH)


@dataclass(frozen=True)
class Displacement:
    """One elementary token displacement.

    Attributes:
        dx, dy: Orthogonal unit vector.
        kind: Step, push, or one of their inverses.
    """

    dx: int
    dy: int
    kind: DisplacementKind = DisplacementKind.STEP

    def inverse(self) -> Displacement:
        return Displacement(-self.dx, -self.dy, INVERSE_KIND[self.kind])

    @property
    def moves_object(self) -> bool:
        return self.kind in (DisplacementKind.PUSH, DisplacementKind.UNPUSH)


class Move:
    """Ordered, sealable list of displacements starting at ``(x, y)``."""

    def __init__(self, x: int, y: int) -> None:
        self._origin = Position(x, y)
        self._last = self._origin
        self._displacements: List[Displacement] = []
        self._pushed = False
        self._finished = False

    # -------- Construction --------

    def step(self, x: int, y: int) -> None:
        """Walk in a straight line from the last position to ``(x, y)``.

        An adjacent cell is the one-step case. Raises :class:`MoveError` when
        the move is sealed, already ends in a push, or ``(x, y)`` is not in
        line with the last position.
        """
        self._check_open()
        if self._pushed:
            raise MoveError("A push must be the last action of a move")
        self._extend(Position(x, y), DisplacementKind.STEP)

    def push(self, x: int, y: int) -> None:
        """End the move with a straight run of pushes landing the token on ``(x, y)``."""
        self._check_open()
        if self._pushed:
            raise MoveError("A move holds at most one push")
        self._extend(Position(x, y), DisplacementKind.PUSH)
        self._pushed = True

    def finish(self) -> None:
        self._finished = True

    def _check_open(self) -> None:
        if self._finished:
            raise MoveError("Move is sealed")

    def _extend(self, to: Position, kind: DisplacementKind) -> None:
        direction = line_direction(self._last, to)
        if direction is None:
            raise MoveError(f"{to} is not in line with {self._last}")
        dx, dy = direction
        while self._last != to:
            self._displacements.append(Displacement(dx, dy, kind))
            self._last = self._last.offset(dx, dy)

    # -------- Introspection --------

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def origin(self) -> Position:
        return self._origin

    @property
    def end(self) -> Position:
        return self._last

    @property
    def displacements(self) -> Tuple[Displacement, ...]:
        return tuple(self._displacements)

    @property
    def steps(self) -> int:
        return sum(1 for d in self._displacements if not d.moves_object)

    @property
    def pushes(self) -> int:
        return sum(1 for d in self._displacements if d.moves_object)

    def positions(self) -> Iterator[Position]:
        """Token positions from origin to end, inclusive."""
        pos = self._origin
        yield pos
        for d in self._displacements:
            pos = pos.offset(d.dx, d.dy)
            yield pos

    def __len__(self) -> int:
        return len(self._displacements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return (
            self._origin == other._origin
            and self._displacements == other._displacements
            and self._finished == other._finished
        )

    def __repr__(self) -> str:
        state = "sealed" if self._finished else "open"
        return f"Move(origin={self._origin}, {len(self)} displacements, {state})"

    # -------- Replay --------

    def inverse(self) -> Move:
        """Sealed move that walks from :attr:`end` back to :attr:`origin`."""
        if not self._finished:
            raise MoveError("Only sealed moves can be inverted")
        inv = Move(self._last.x, self._last.y)
        inv._displacements = [d.inverse() for d in reversed(self._displacements)]
        inv._last = self._origin
        inv._pushed = self._pushed
        inv._finished = True
        return inv

    def prefix(self, n: int) -> Move:
        """Sealed move holding the first ``n`` displacements."""
        part = Move(self._origin.x, self._origin.y)
        for d in self._displacements[:n]:
            part._displacements.append(d)
            part._last = part._last.offset(d.dx, d.dy)
        part._pushed = any(d.moves_object for d in part._displacements)
        part._finished = True
        return part

    def redo(self, level_map: LevelMap) -> None:
        """Apply every displacement forward against ``level_map``."""
        _replay(self, self._displacements, level_map)

    def undo(self, level_map: LevelMap) -> None:
        """Restore the map to its state before this move was applied."""
        self.inverse().redo(level_map)

    # -------- Encoding --------

    def encode(self) -> str:
        chars: List[str] = []
        for d in self._displacements:
            if d.kind not in (DisplacementKind.STEP, DisplacementKind.PUSH):
                raise MoveError("Inverse moves are not encodable")
            char = _STEP_CHARS[(d.dx, d.dy)]
            chars.append(char.upper() if d.kind == DisplacementKind.PUSH else char)
        return "".join(chars)

    @classmethod
    def decode(cls, origin: Position, text: str) -> Move:
        """Build a sealed move from :meth:`encode` output.

        Raises:
            MoveError: Unknown character, or a step after a push.
        """
        move = cls(origin.x, origin.y)
        for char in text:
            if char not in _CHAR_TO_DISPLACEMENT:
                raise MoveError(f"Unknown move character {char!r}")
            dx, dy, kind = _CHAR_TO_DISPLACEMENT[char]
            to = move.end.offset(dx, dy)
            if kind == DisplacementKind.PUSH:
                # consecutive push characters form the single terminal run
                last = move._displacements[-1] if move._displacements else None
                if move._pushed and last is not None and (last.dx, last.dy) == (dx, dy):
                    move._displacements.append(Displacement(dx, dy, kind))
                    move._last = to
                else:
                    move.push(to.x, to.y)
            else:
                move.step(to.x, to.y)
        move.finish()
        return move


def _replay(move: Move, displacements: Sequence[Displacement], level_map: LevelMap) -> None:
    if not move.finished:
        raise MoveError("Only sealed moves can be replayed")
    if level_map.token != move.origin:
        raise MoveError(f"Move starts at {move.origin} but the token is at {level_map.token}")
    applied: List[Displacement] = []
    for d in displacements:
        if not level_map.apply(d):
            at = level_map.token
            # roll back the prefix so a rejected replay leaves the map untouched
            for done in reversed(applied):
                level_map.apply(done.inverse())
            raise MoveError(f"Level map rejected {d} at {at}")
        applied.append(d)

