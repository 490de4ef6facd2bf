import pytest

from grid_sokoban.errors import MoveError
from grid_sokoban.move import Displacement, Move
from grid_sokoban.types import DisplacementKind, Position
from tests.test_utils import CORRIDOR, ROOM, make_level_map, snapshot

STEP = DisplacementKind.STEP
PUSH = DisplacementKind.PUSH


def test_new_move_is_empty_and_open() -> None:
    move = Move(2, 3)
    assert move.origin == Position(2, 3)
    assert move.end == Position(2, 3)
    assert len(move) == 0
    assert not move.finished


def test_step_expands_straight_runs() -> None:
    move = Move(1, 1)
    move.step(4, 1)
    move.step(4, 2)
    assert move.displacements == (
        Displacement(1, 0, STEP),
        Displacement(1, 0, STEP),
        Displacement(1, 0, STEP),
        Displacement(0, 1, STEP),
    )
    assert move.end == Position(4, 2)
    assert list(move.positions()) == [
        Position(1, 1),
        Position(2, 1),
        Position(3, 1),
        Position(4, 1),
        Position(4, 2),
    ]


@pytest.mark.parametrize("to", [(2, 2), (1, 1), (3, 0)])
def test_step_rejects_out_of_line(to: tuple[int, int]) -> None:
    move = Move(1, 1)
    with pytest.raises(MoveError):
        move.step(*to)
    assert len(move) == 0


def test_push_is_terminal() -> None:
    move = Move(1, 1)
    move.step(1, 2)
    move.push(1, 4)
    assert move.steps == 1
    assert move.pushes == 2
    with pytest.raises(MoveError):
        move.step(1, 5)
    with pytest.raises(MoveError):
        move.push(1, 5)


def test_finish_seals() -> None:
    move = Move(0, 0)
    move.step(1, 0)
    move.finish()
    assert move.finished
    with pytest.raises(MoveError):
        move.step(2, 0)
    with pytest.raises(MoveError):
        move.push(2, 0)


def test_inverse_reverses_and_negates() -> None:
    move = Move(1, 1)
    move.step(2, 1)
    move.push(2, 3)
    move.finish()
    inv = move.inverse()
    assert inv.finished
    assert inv.origin == Position(2, 3)
    assert inv.end == Position(1, 1)
    assert inv.displacements == (
        Displacement(0, -1, DisplacementKind.UNPUSH),
        Displacement(0, -1, DisplacementKind.UNPUSH),
        Displacement(-1, 0, DisplacementKind.UNSTEP),
    )
    assert inv.inverse() == move


def test_inverse_requires_sealed_move() -> None:
    with pytest.raises(MoveError):
        Move(0, 0).inverse()


def test_prefix() -> None:
    move = Move(0, 0)
    move.step(2, 0)
    move.push(2, 2)
    move.finish()
    part = move.prefix(3)
    assert part.finished
    assert part.end == Position(2, 1)
    assert part.steps == 2 and part.pushes == 1
    assert move.prefix(0).end == Position(0, 0)


def test_encode_decode() -> None:
    move = Move(3, 3)
    move.step(3, 1)
    move.step(1, 1)
    move.push(1, 2)
    move.finish()
    text = move.encode()
    assert text == "uullD"
    assert Move.decode(Position(3, 3), text) == move


@pytest.mark.parametrize("text", ["x", "Dd", "DR", "u?"])
def test_decode_rejects(text: str) -> None:
    with pytest.raises(MoveError):
        Move.decode(Position(5, 5), text)


def test_decode_push_run() -> None:
    move = Move.decode(Position(0, 0), "rRR")
    assert move.steps == 1 and move.pushes == 2
    assert move.end == Position(3, 0)


def test_undo_and_redo_restore_map() -> None:
    level_map = make_level_map(CORRIDOR)
    before = snapshot(level_map)
    assert level_map.push(1, 2)
    after = snapshot(level_map)

    move = Move(1, 1)
    move.push(1, 2)
    move.finish()
    move.undo(level_map)
    assert snapshot(level_map) == before
    move.redo(level_map)
    assert snapshot(level_map) == after


def test_replay_rejection_leaves_map_untouched() -> None:
    level_map = make_level_map(ROOM)
    before = snapshot(level_map)
    move = Move(1, 1)
    move.step(5, 1)
    move.step(5, 4)  # (5,3) is a target, (5,4) floor; fine so far
    move.step(1, 4)  # blocked by the object at (2,4)
    move.finish()
    with pytest.raises(MoveError):
        move.redo(level_map)
    assert snapshot(level_map) == before


def test_replay_requires_matching_origin() -> None:
    level_map = make_level_map(ROOM)
    move = Move(2, 1)
    move.step(3, 1)
    move.finish()
    with pytest.raises(MoveError):
        move.redo(level_map)
