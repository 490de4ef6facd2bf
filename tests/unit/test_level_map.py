import pytest

from grid_sokoban.errors import LevelFormatError
from grid_sokoban.level_map import LevelMap
from grid_sokoban.levels.collection import LevelCollection
from grid_sokoban.move import Displacement
from grid_sokoban.types import DisplacementKind, Position
from tests.test_utils import (
    BROKEN_NO_TOKEN,
    CORRIDOR,
    ROOM,
    WALL_BACKED,
    make_collection,
    make_level_map,
    snapshot,
)


def test_loads_level_and_exposes_token() -> None:
    level_map = make_level_map(ROOM)
    assert level_map.good_level()
    assert (level_map.xpos, level_map.ypos) == (1, 1)
    assert level_map.level == 0
    assert level_map.collection_name == "Test"
    assert level_map.total_moves == 0


def test_step() -> None:
    level_map = make_level_map(ROOM)
    assert level_map.step(2, 1)
    assert level_map.token == Position(2, 1)
    assert level_map.total_steps == 1
    assert level_map.total_pushes == 0


@pytest.mark.parametrize(
    "target",
    [
        (1, 0),  # wall
        (3, 1),  # not adjacent
        (2, 2),  # diagonal
        (1, 1),  # own cell
    ],
)
def test_step_rejected_without_mutation(target: tuple[int, int]) -> None:
    level_map = make_level_map(ROOM)
    before = snapshot(level_map)
    assert not level_map.step(*target)
    assert snapshot(level_map) == before


def test_step_into_object_rejected() -> None:
    level_map = make_level_map(CORRIDOR)
    assert not level_map.step(1, 2)
    assert level_map.token == Position(1, 1)


def test_push_completes_level() -> None:
    level_map = make_level_map(CORRIDOR)
    assert level_map.push(1, 2)
    grid = level_map.grid
    assert grid is not None
    assert grid.token == Position(1, 2)
    assert grid.has_object(1, 3)
    assert level_map.completed()
    assert level_map.total_pushes == 1
    assert level_map.total_steps == 0
    # elementary moves leave collection progress alone
    assert level_map.completed_levels == 0
    assert level_map.record_completion()
    assert level_map.completed_levels == 1


def test_record_completion_requires_completed_level() -> None:
    level_map = make_level_map(CORRIDOR)
    assert not level_map.record_completion()
    assert level_map.completed_levels == 0
    level_map.push(1, 2)
    level_map.unpush(1, 1)
    assert not level_map.record_completion()
    assert level_map.completed_levels == 0


def test_push_against_wall_rejected() -> None:
    level_map = make_level_map(WALL_BACKED)
    before = snapshot(level_map)
    assert not level_map.push(1, 2)
    assert snapshot(level_map) == before


def test_push_without_object_rejected() -> None:
    level_map = make_level_map(ROOM)
    assert not level_map.push(2, 1)
    assert level_map.total_pushes == 0


def test_unstep_and_unpush_invert() -> None:
    level_map = make_level_map(CORRIDOR)
    before = snapshot(level_map)
    level_map.push(1, 2)
    assert level_map.unpush(1, 1)
    assert snapshot(level_map) == before

    level_map = make_level_map(ROOM)
    before = snapshot(level_map)
    level_map.step(2, 1)
    assert level_map.unstep(1, 1)
    assert snapshot(level_map) == before


def test_unpush_needs_object_behind() -> None:
    level_map = make_level_map(ROOM)
    level_map.step(2, 1)
    assert not level_map.unpush(1, 1)
    assert level_map.token == Position(2, 1)


def test_apply_dispatches_on_kind() -> None:
    level_map = make_level_map(CORRIDOR)
    assert level_map.apply(Displacement(0, 1, DisplacementKind.PUSH))
    assert level_map.apply(Displacement(0, -1, DisplacementKind.UNPUSH))
    assert level_map.token == Position(1, 1)
    assert level_map.total_pushes == 0


def test_broken_level_refuses_moves() -> None:
    level_map = make_level_map(BROKEN_NO_TOKEN)
    assert not level_map.good_level()
    assert level_map.grid is None
    assert not level_map.completed()
    assert not level_map.step(1, 1)
    assert not level_map.push(1, 1)
    assert not level_map.apply(Displacement(1, 0))
    with pytest.raises(LevelFormatError):
        level_map.token
    with pytest.raises(LevelFormatError):
        level_map.xpos


def test_no_collection_is_broken() -> None:
    level_map = LevelMap()
    assert not level_map.good_level()
    assert level_map.no_of_levels == 0
    assert level_map.collection_name == ""


def test_load_level_resets_and_clamps() -> None:
    level_map = LevelMap(make_collection(ROOM, CORRIDOR))
    level_map.step(2, 1)
    level_map.load_level(7)
    assert level_map.level == 1
    assert level_map.total_moves == 0
    assert level_map.token == Position(1, 1)
    level_map.load_level(-3)
    assert level_map.level == 0


def test_change_collection_resumes_first_unsolved() -> None:
    collection = LevelCollection(name="Other", id=4, levels=[ROOM, CORRIDOR, ROOM], completed_levels=1)
    level_map = make_level_map(CORRIDOR)
    level_map.change_collection(collection)
    assert level_map.collection is collection
    assert level_map.level == 1

    collection.completed_levels = 3
    level_map.change_collection(collection)
    assert level_map.level == 2


def test_from_text() -> None:
    level_map = LevelMap.from_text(CORRIDOR, name="single")
    assert level_map.good_level()
    assert level_map.collection is not None
    assert level_map.collection.id < 0
