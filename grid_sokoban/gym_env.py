"""Gymnasium environment wrapper for the Sokoban engine.

One environment plays one level of a :class:`LevelCollection` through a
:class:`GameEngine` with animation disabled, so every action is resolved
synchronously.

Observation: ``np.ndarray`` of shape ``(height, width)`` and dtype ``uint8``
holding one cell code per grid position (see :data:`CELL_CODES`).

Reward is the change in the number of satisfied targets, plus
:data:`COMPLETION_REWARD` when the level is solved. ``terminated`` is ``True``
on completion, ``truncated`` once ``max_steps`` actions have been taken.

Usage:

``env = SokobanEnv(build_tutorial_collection(), level=0)``
"""

from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
import numpy as np

from grid_sokoban.actions import GYM_TO_ACTION, GymAction
from grid_sokoban.config import EngineConfig
from grid_sokoban.engine import GameEngine
from grid_sokoban.grid import Grid
from grid_sokoban.levels.collection import LevelCollection
from grid_sokoban.levels.xsb import format_level
from grid_sokoban.types import Occupancy, Terrain

CELL_CODES: Dict[Tuple[Terrain, Occupancy], int] = {
    (Terrain.WALL, Occupancy.EMPTY): 0,
    (Terrain.FLOOR, Occupancy.EMPTY): 1,
    (Terrain.TARGET, Occupancy.EMPTY): 2,
    (Terrain.FLOOR, Occupancy.OBJECT): 3,
    (Terrain.TARGET, Occupancy.OBJECT): 4,
    (Terrain.FLOOR, Occupancy.TOKEN): 5,
    (Terrain.TARGET, Occupancy.TOKEN): 6,
}

COMPLETION_REWARD = 10.0


def grid_observation(grid: Grid) -> np.ndarray:
    """Encode ``grid`` as a ``(height, width)`` array of cell codes."""
    obs = np.zeros((grid.height, grid.width), dtype=np.uint8)
    for y in range(grid.height):
        for x in range(grid.width):
            cell = grid.cell(x, y)
            obs[y, x] = CELL_CODES[(cell.terrain, cell.occupancy)]
    return obs


class SokobanEnv(gym.Env[np.ndarray, np.integer]):
    """Gymnasium ``Env`` over a single level.

    The action space is ``Discrete(len(GymAction))``; see
    :mod:`grid_sokoban.actions`.
    """

    metadata = {"render_modes": ["ansi"]}

    def __init__(
        self,
        collection: LevelCollection,
        level: int = 0,
        max_steps: int = 500,
        render_mode: str = "ansi",
    ):
        from gymnasium import spaces

        self._engine = GameEngine(collection, level, config=EngineConfig(anim_delay=0))
        grid = self._engine.level_map.grid
        if grid is None:
            raise ValueError(f"Level {level} of {collection.name!r} is broken")

        self._level = self._engine.level
        self._max_steps = max_steps
        self._render_mode = render_mode
        self._elapsed = 0

        self.observation_space = spaces.Box(
            low=0,
            high=max(CELL_CODES.values()),
            shape=(grid.height, grid.width),
            dtype=np.uint8,
        )
        self.action_space = spaces.Discrete(len(GymAction))

    @property
    def engine(self) -> GameEngine:
        return self._engine

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[Dict[str, object]] = None
    ) -> Tuple[np.ndarray, Dict[str, object]]:
        """Reload the level and clear its history.

        Arguments:
            seed: Passed to Gymnasium's RNG (levels are static data).
            options: Gymnasium options (unused).
        """
        super().reset(seed=seed)
        self._engine.load_level(self._level)
        self._elapsed = 0
        return self._get_obs(), self._get_info()

    def step(
        self, action: np.integer
    ) -> Tuple[np.ndarray, float, bool, bool, Dict[str, object]]:
        """Apply one action.

        Returns:
            (observation, reward, terminated, truncated, info)
        """
        if not 0 <= int(action) < len(GymAction):
            raise ValueError(f"Invalid action: {action}")
        grid = self._engine.level_map.grid
        assert grid is not None
        before = grid.satisfied_targets()

        self._engine.perform(GYM_TO_ACTION[GymAction(int(action))])
        self._elapsed += 1

        grid = self._engine.level_map.grid
        assert grid is not None
        reward = float(grid.satisfied_targets() - before)
        terminated = self._engine.completed()
        if terminated:
            reward += COMPLETION_REWARD
        truncated = not terminated and self._elapsed >= self._max_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[str]:  # type: ignore[override]
        grid = self._engine.level_map.grid
        assert grid is not None
        if self._render_mode == "ansi":
            return format_level(grid)
        raise NotImplementedError(f"Render mode '{self._render_mode}' not supported.")

    def _get_obs(self) -> np.ndarray:
        grid = self._engine.level_map.grid
        assert grid is not None
        return grid_observation(grid)

    def _get_info(self) -> Dict[str, Any]:
        level_map = self._engine.level_map
        return {
            "collection": level_map.collection_name,
            "level": level_map.level,
            "steps": level_map.total_steps,
            "pushes": level_map.total_pushes,
            "completed": level_map.completed(),
        }
