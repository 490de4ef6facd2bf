from typing import List

import pytest

from grid_sokoban.actions import Action
from grid_sokoban.config import EngineConfig
from grid_sokoban.engine import GameEngine
from grid_sokoban.examples.collections import TUTORIAL_ID, TUTORIAL_LEVELS, build_tutorial_collection
from grid_sokoban.levels.xsb import parse_level

U, D, L, R = Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT

SOLUTIONS: List[List[Action]] = [
    [D],
    [R, R],
    [R, D, L, L, L, U],
    [U, R, D, R, U, U, L, U, R],
]


def test_every_tutorial_level_parses() -> None:
    for text in TUTORIAL_LEVELS:
        parse_level(text)
    collection = build_tutorial_collection()
    assert collection.id == TUTORIAL_ID
    assert collection.no_of_levels == len(SOLUTIONS)


@pytest.mark.parametrize("anim_delay", [0, 1])
def test_play_through_collection(anim_delay: int) -> None:
    completed: List[int] = []
    engine = GameEngine(
        build_tutorial_collection(),
        config=EngineConfig(anim_delay=anim_delay),
        on_level_completed=completed.append,
    )
    for n, solution in enumerate(SOLUTIONS):
        assert engine.level == n
        for action in solution:
            assert engine.perform(action)
            while engine.tick():
                pass
        assert engine.completed()
        if n + 1 < len(SOLUTIONS):
            assert engine.next_level()
    assert completed == list(range(len(SOLUTIONS)))
    assert engine.collection is not None
    assert engine.collection.completed_levels == len(SOLUTIONS)


def test_corner_level_counters() -> None:
    engine = GameEngine(build_tutorial_collection(), level=3)
    for action in SOLUTIONS[3]:
        engine.perform(action)
    assert (engine.total_steps, engine.total_pushes) == (5, 4)
    assert engine.history.save() == "u*R*d*r*U*U*l*u*R*-"
