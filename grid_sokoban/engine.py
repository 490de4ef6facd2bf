"""Game engine: input-level operations over map, history and playback.

:class:`GameEngine` is the non-graphical half of a Sokoban play field. It
turns player intents (walk toward a cell, push toward a cell, click a cell,
undo, redo, change level) into committed :class:`Move` objects and plays them
back through a :class:`MoveSequence`.

Commit protocol for :meth:`GameEngine.step` / :meth:`GameEngine.push`:

1. Apply the elementary moves on the :class:`LevelMap` as far as they are
   legal. This is the validation.
2. Record what happened in a :class:`Move`, seal it and add it to the
   :class:`History`.
3. ``move.undo(level_map)`` so the map shows the pre-move state again.
4. Start a :class:`MoveSequence` which re-applies the move one displacement
   at a time.

Only one sequence plays at a time; while it does, :meth:`can_move_now` is
``False`` and every commit, undo and redo request is ignored.

Playback pacing is external. With ``anim_delay == 0`` a started move is
drained synchronously. Otherwise the first displacement is applied right away
and a timer calls :meth:`tick` every ``config.tick_interval_ms``. In both
modes playback stops at the displacement that solves the level and the
history is trimmed to what was actually played.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from pyrsistent import PSet, pset

from grid_sokoban.actions import DIRECTIONS, MOVE_ACTIONS, Action
from grid_sokoban.bookmark import Bookmark
from grid_sokoban.config import EngineConfig
from grid_sokoban.errors import MoveError
from grid_sokoban.grid import MAX_HEIGHT, MAX_WIDTH
from grid_sokoban.history import History
from grid_sokoban.level_map import LevelMap
from grid_sokoban.levels.collection import LevelCollection
from grid_sokoban.move import Move
from grid_sokoban.pathfinding import reachable, search
from grid_sokoban.sequence import MoveSequence
from grid_sokoban.types import Position
from grid_sokoban.utils.grid import direction_towards

logger = logging.getLogger(__name__)

NoticeFn = Callable[[str], None]
LevelCompletedFn = Callable[[int], None]


class GameEngine:
    def __init__(
        self,
        collection: Optional[LevelCollection] = None,
        level: int = 0,
        config: EngineConfig = EngineConfig(),
        collections: Sequence[LevelCollection] = (),
        on_notice: Optional[NoticeFn] = None,
        on_level_completed: Optional[LevelCompletedFn] = None,
    ) -> None:
        """Create an engine on ``level`` of ``collection``.

        Arguments:
            collection: Collection to start with (``None`` leaves the map broken
                until :meth:`change_collection`).
            level: Starting level index.
            config: Playback configuration.
            collections: Known collections, searched by id in :meth:`go_to_bookmark`.
            on_notice: Receives user-facing, non-fatal messages.
            on_level_completed: Called with the level index when playback
                completes a level.
        """
        self.level_map = LevelMap(collection, level)
        self.history = History()
        self.config = config
        self._collections: List[LevelCollection] = list(collections)
        if collection is not None and collection not in self._collections:
            self._collections.append(collection)
        self._on_notice = on_notice
        self._on_level_completed = on_level_completed
        self._sequence: Optional[MoveSequence] = None
        self._move_in_progress = False
        self._completed_at_start = False

    # -------- State --------

    @property
    def move_in_progress(self) -> bool:
        return self._move_in_progress

    @property
    def sequence(self) -> Optional[MoveSequence]:
        return self._sequence

    @property
    def collection(self) -> Optional[LevelCollection]:
        return self.level_map.collection

    @property
    def level(self) -> int:
        return self.level_map.level

    @property
    def total_steps(self) -> int:
        return self.level_map.total_steps

    @property
    def total_pushes(self) -> int:
        return self.level_map.total_pushes

    @property
    def total_moves(self) -> int:
        return self.level_map.total_moves

    def completed(self) -> bool:
        return self.level_map.completed()

    def possible_moves(self) -> PSet[Position]:
        """Cells a click can walk to right now."""
        grid = self.level_map.grid
        if grid is None or not self.level_map.good_level():
            return pset()
        return reachable(grid)

    def can_move_now(self) -> bool:
        if self._move_in_progress:
            return False
        if not self.level_map.good_level():
            self._notice("This level is broken.")
            return False
        return True

    # -------- Player moves --------

    def step(self, x: int, y: int) -> bool:
        """Walk in a straight line toward ``(x, y)`` as far as possible."""
        if not self.can_move_now():
            return False
        level_map = self.level_map
        old = level_map.token
        target = Position(x, y)
        dx, dy = direction_towards(old, target)

        pos = old
        while pos != target and level_map.step(pos.x + dx, pos.y + dy):
            pos = pos.offset(dx, dy)

        if pos == old:
            logger.debug("Step toward %s rejected at %s", target, old)
            return False
        move = Move(old.x, old.y)
        move.step(pos.x, pos.y)
        return self._commit(move)

    def push(self, x: int, y: int) -> bool:
        """Walk toward ``(x, y)``, then keep pushing toward it as far as possible."""
        if not self.can_move_now():
            return False
        level_map = self.level_map
        old = level_map.token
        target = Position(x, y)
        dx, dy = direction_towards(old, target)

        pos = old
        while pos != target and level_map.step(pos.x + dx, pos.y + dy):
            pos = pos.offset(dx, dy)
        walked = pos
        while pos != target and level_map.push(pos.x + dx, pos.y + dy):
            pos = pos.offset(dx, dy)

        if pos == old:
            logger.debug("Push toward %s rejected at %s", target, old)
            return False
        move = Move(old.x, old.y)
        if walked != old:
            move.step(walked.x, walked.y)
        if walked != pos:
            move.push(pos.x, pos.y)
        return self._commit(move)

    def move(self, action: Action) -> bool:
        """One cell in a direction, pushing if an object is in the way."""
        dx, dy = DIRECTIONS[action]
        if not self.level_map.good_level():
            return self.can_move_now()
        return self.push(self.level_map.xpos + dx, self.level_map.ypos + dy)

    def run(self, action: Action, push: bool = False) -> bool:
        """Go as far as possible in a direction, optionally pushing."""
        if not self.level_map.good_level():
            return self.can_move_now()
        dx, dy = DIRECTIONS[action]
        x, y = self.level_map.xpos, self.level_map.ypos
        if dx:
            x = 0 if dx < 0 else MAX_WIDTH - 1
        if dy:
            y = 0 if dy < 0 else MAX_HEIGHT - 1
        return self.push(x, y) if push else self.step(x, y)

    def click(self, x: int, y: int) -> bool:
        """Walk the shortest path to ``(x, y)``."""
        if not self.can_move_now():
            return False
        grid = self.level_map.grid
        if grid is None or not grid.has_coord(x, y):
            return False
        move = search(grid, x, y)
        if move is None:
            logger.debug("No path to %s", (x, y))
            return False
        self.history.add(move)
        self._start_moving(move)
        return True

    def undo(self) -> bool:
        if not self.can_move_now():
            return False
        move = self.history.defer_undo(self.level_map)
        if move is None:
            return False
        self._start_moving(move)
        return True

    def redo(self) -> bool:
        if not self.can_move_now():
            return False
        move = self.history.defer_redo(self.level_map)
        if move is None:
            return False
        self._start_moving(move)
        return True

    def perform(self, action: Action) -> bool:
        """Dispatch a keyboard-level :class:`Action`.

        Raises:
            ValueError: If the action is not recognized.
        """
        if action in MOVE_ACTIONS:
            return self.move(action)
        elif action == Action.UNDO:
            return self.undo()
        elif action == Action.REDO:
            return self.redo()
        elif action == Action.RESTART:
            self.restart_level()
            return True
        raise ValueError("Action is not valid")

    def _commit(self, move: Move) -> bool:
        move.finish()
        self.history.add(move)
        move.undo(self.level_map)
        self._start_moving(move)
        return True

    # -------- Playback --------

    def _start_moving(self, move: Move) -> None:
        if self._sequence is not None or self._move_in_progress:
            raise MoveError("A move is already playing")
        self._sequence = MoveSequence(move, self.level_map)
        self._move_in_progress = True
        self._completed_at_start = self.level_map.completed()
        self._advance()

    def tick(self) -> bool:
        """Advance playback by one displacement; False once nothing is playing."""
        if not self._move_in_progress:
            return False
        return self._advance()

    def _advance(self) -> bool:
        sequence = self._sequence
        if sequence is None:
            self.stop_moving()
            return False

        if self.config.animated:
            more = sequence.next()
        else:
            while sequence.next() and not self._just_completed():
                pass
            more = False

        if self._just_completed():
            self.stop_moving()
            self.level_map.record_completion()
            self._notice("Level completed")
            if self._on_level_completed is not None:
                self._on_level_completed(self.level_map.level)
            return False
        if not more:
            self.stop_moving()
        return more

    def _just_completed(self) -> bool:
        # only the move that solves the level ends playback early
        return not self._completed_at_start and self.level_map.completed()

    def stop_moving(self) -> None:
        """Discard the playing sequence; the map keeps its current prefix."""
        sequence = self._sequence
        if sequence is not None:
            played = len(sequence.move) - sequence.remaining
            sequence.stop()
            self.history.settle(sequence.move, played)
        self._sequence = None
        self._move_in_progress = False

    def change_anim(self, num: int) -> None:
        self.config = replace(self.config, anim_delay=num)

    # -------- Level selection --------

    def load_level(self, n: int) -> None:
        self.stop_moving()
        self.level_map.load_level(n)
        self.history.clear()
        if not self.level_map.good_level():
            self._notice("This level is broken.")

    def restart_level(self) -> None:
        self.load_level(self.level_map.level)

    def next_level(self) -> bool:
        level_map = self.level_map
        if level_map.level + 1 >= level_map.no_of_levels:
            self._notice("This is the last level in the current collection.")
            return False
        if level_map.level >= level_map.completed_levels:
            self._notice("You have not completed this level yet.")
            return False
        self.load_level(level_map.level + 1)
        return True

    def previous_level(self) -> bool:
        if self.level_map.level <= 0:
            self._notice("This is the first level in the current collection.")
            return False
        self.load_level(self.level_map.level - 1)
        return True

    def change_collection(self, collection: LevelCollection) -> bool:
        if self.level_map.collection is collection:
            return False
        self.stop_moving()
        self.level_map.change_collection(collection)
        self.history.clear()
        if collection not in self._collections:
            self._collections.append(collection)
        return True

    # -------- Bookmarks --------

    def set_bookmark(self) -> Optional[Bookmark]:
        collection = self.level_map.collection
        if collection is None or not self.level_map.good_level():
            return None
        if collection.id < 0:
            self._notice("Bookmarks for external levels is not implemented yet.")
            return None
        return Bookmark.create(self.level_map, self.history)

    def go_to_bookmark(self, bookmark: Bookmark) -> bool:
        collection = next(
            (c for c in self._collections if c.id == bookmark.collection_id), None
        )
        if collection is None:
            self._notice("Bookmark refers to an unknown collection.")
            return False
        self.stop_moving()
        if self.level_map.collection is not collection:
            self.level_map.change_collection(collection)
        ok = bookmark.go_to(self.level_map, self.history)
        if not ok:
            logger.warning("Bad bookmark: %s", bookmark)
        return ok

    def _notice(self, message: str) -> None:
        logger.info(message)
        if self._on_notice is not None:
            self._on_notice(message)
