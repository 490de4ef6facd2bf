"""Undo / redo history of committed moves.

Two stacks: ``moves`` (done, oldest first) and ``redo_moves`` (undone, next
to redo first). Committing a new move truncates the redo side.

The *deferred* variants do not touch the map. :meth:`History.defer_undo`
shifts the latest move to the redo side and hands back its
:meth:`Move.inverse`, a forward-playable move that a
:class:`grid_sokoban.sequence.MoveSequence` animates like any other;
:meth:`History.defer_redo` hands back the move itself.

Text format (:meth:`History.save` / :meth:`History.load`): every move is its
:meth:`Move.encode` string followed by ``*``; the done list comes first,
then ``-``, then the redo list in redo order::

    "rr*dL*-u*"
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from grid_sokoban.errors import HistoryFormatError, MoveError
from grid_sokoban.level_map import LevelMap
from grid_sokoban.move import Move
from grid_sokoban.types import Position

logger = logging.getLogger(__name__)

MOVE_TERMINATOR = "*"
REDO_SEPARATOR = "-"


class History:
    def __init__(self) -> None:
        self._moves: List[Move] = []
        self._redo: List[Move] = []

    def __len__(self) -> int:
        return len(self._moves)

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def redo_moves(self) -> Tuple[Move, ...]:
        """Undone moves, next to redo first."""
        return tuple(reversed(self._redo))

    @property
    def can_undo(self) -> bool:
        return bool(self._moves)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def add(self, move: Move) -> None:
        if not move.finished:
            raise MoveError("Only sealed moves can be committed")
        self._moves.append(move)
        self._redo.clear()

    def clear(self) -> None:
        self._moves.clear()
        self._redo.clear()

    # -------- Deferred undo / redo --------

    def _ready(self, level_map: LevelMap, expected: Position) -> bool:
        if not level_map.good_level():
            return False
        if level_map.token != expected:
            logger.warning("Token at %s does not match history (%s)", level_map.token, expected)
            return False
        return True

    def defer_undo(self, level_map: LevelMap) -> Optional[Move]:
        """Move the latest entry to the redo side and return its inverse."""
        if not self._moves or not self._ready(level_map, self._moves[-1].end):
            return None
        move = self._moves.pop()
        self._redo.append(move)
        return move.inverse()

    def defer_redo(self, level_map: LevelMap) -> Optional[Move]:
        """Move the next redo entry back to the done side and return it."""
        if not self._redo or not self._ready(level_map, self._redo[-1].origin):
            return None
        move = self._redo.pop()
        self._moves.append(move)
        return move

    def undo(self, level_map: LevelMap) -> bool:
        move = self.defer_undo(level_map)
        if move is None:
            return False
        move.redo(level_map)
        level_map.record_completion()
        return True

    def redo(self, level_map: LevelMap) -> bool:
        move = self.defer_redo(level_map)
        if move is None:
            return False
        move.redo(level_map)
        level_map.record_completion()
        return True

    def settle(self, move: Move, played: int) -> None:
        """Trim the history after ``move`` stopped with only ``played`` displacements applied.

        ``move`` is either the latest entry (forward playback) or the inverse
        of the next redo entry (undo playback). The redo side no longer chains
        from the new token position and is dropped.
        """
        if played >= len(move):
            return
        if self._moves and self._moves[-1] is move:
            self._moves.pop()
            kept = move.prefix(played)
        elif self._redo and self._redo[-1].inverse() == move:
            undone = self._redo.pop()
            kept = undone.prefix(len(undone) - played)
        else:
            return
        if len(kept):
            self._moves.append(kept)
        self._redo.clear()

    # -------- Serialization --------

    def save(self) -> str:
        done = "".join(m.encode() + MOVE_TERMINATOR for m in self._moves)
        undone = "".join(m.encode() + MOVE_TERMINATOR for m in reversed(self._redo))
        return done + REDO_SEPARATOR + undone

    def load(self, level_map: LevelMap, text: str) -> bool:
        """Replace the history with ``text`` replayed against ``level_map``.

        The done part is applied to the map. The redo part is checked by
        applying and then undoing it. On any failure every applied move is
        rolled back, the history is left empty and ``False`` is returned.
        Loading never records level progress in the collection.
        """
        self.clear()
        if not level_map.good_level():
            return False
        try:
            done, undone = _split(text)
        except HistoryFormatError as e:
            logger.warning("Corrupt history %r: %s", text, e)
            return False

        applied: List[Move] = []
        redo: List[Move] = []
        try:
            for chunk in done:
                move = Move.decode(level_map.token, chunk)
                move.redo(level_map)
                applied.append(move)
            for chunk in undone:
                move = Move.decode(level_map.token, chunk)
                move.redo(level_map)
                applied.append(move)
                redo.append(move)
        except MoveError as e:
            logger.warning("History does not replay on this level: %s", e)
            for move in reversed(applied):
                move.undo(level_map)
            return False

        for move in reversed(redo):
            move.undo(level_map)
        self._moves = applied[: len(applied) - len(redo)]
        self._redo = list(reversed(redo))
        return True


def _split(text: str) -> Tuple[List[str], List[str]]:
    if text.count(REDO_SEPARATOR) > 1:
        raise HistoryFormatError("More than one redo separator")
    done_text, _, undone_text = text.partition(REDO_SEPARATOR)
    return _chunks(done_text), _chunks(undone_text)


def _chunks(text: str) -> List[str]:
    if not text:
        return []
    if not text.endswith(MOVE_TERMINATOR):
        raise HistoryFormatError("Unterminated move")
    chunks = text[:-1].split(MOVE_TERMINATOR)
    if any(not chunk for chunk in chunks):
        raise HistoryFormatError("Empty move")
    return chunks
