from dataclasses import replace
from typing import List

from grid_sokoban.actions import Action
from grid_sokoban.bookmark import Bookmark
from grid_sokoban.engine import GameEngine
from grid_sokoban.levels.collection import LevelCollection
from grid_sokoban.types import Position
from tests.test_utils import BROKEN_NO_TOKEN, CORRIDOR, ROOM, make_collection, make_engine


def played_engine() -> GameEngine:
    engine = make_engine(ROOM)
    engine.run(Action.RIGHT)
    engine.run(Action.DOWN)
    engine.undo()
    return engine


def test_set_bookmark_records_progress() -> None:
    bookmark = played_engine().set_bookmark()
    assert bookmark == Bookmark(collection_id=1, level=0, moves=4, history="rrrr*-ddd*")


def test_go_to_bookmark_round_trip() -> None:
    engine = played_engine()
    bookmark = engine.set_bookmark()
    assert bookmark is not None
    engine.restart_level()
    assert engine.level_map.token == Position(1, 1)

    assert engine.go_to_bookmark(bookmark)
    assert engine.level_map.token == Position(5, 1)
    assert engine.total_moves == 4
    assert engine.history.can_redo
    assert engine.redo()
    assert engine.level_map.token == Position(5, 4)


def test_tampered_move_count_is_rejected() -> None:
    engine = played_engine()
    bookmark = engine.set_bookmark()
    assert bookmark is not None
    assert not engine.go_to_bookmark(replace(bookmark, moves=5))
    assert engine.level_map.token == Position(1, 1)
    assert engine.total_moves == 0
    assert not engine.history.can_undo and not engine.history.can_redo


def test_unreplayable_history_is_rejected() -> None:
    engine = played_engine()
    bookmark = engine.set_bookmark()
    assert bookmark is not None
    assert not engine.go_to_bookmark(replace(bookmark, history="u*-"))
    assert engine.level_map.token == Position(1, 1)
    assert len(engine.history) == 0


def test_bookmark_switches_collection() -> None:
    first = make_collection(CORRIDOR, id=1)
    second = make_collection(ROOM, CORRIDOR, id=2, name="Second")
    engine = GameEngine(first, collections=[first, second])
    engine.change_collection(second)
    engine.step(3, 1)
    bookmark = engine.set_bookmark()
    assert bookmark is not None

    engine.change_collection(first)
    assert engine.go_to_bookmark(bookmark)
    assert engine.collection is second
    assert engine.level_map.token == Position(3, 1)


def test_unknown_collection() -> None:
    notices: List[str] = []
    engine = make_engine(ROOM, notices=notices)
    bookmark = Bookmark(collection_id=99, level=0, moves=0, history="-")
    assert not engine.go_to_bookmark(bookmark)
    assert notices == ["Bookmark refers to an unknown collection."]


def test_external_collection_not_bookmarkable() -> None:
    notices: List[str] = []
    collection = LevelCollection.from_text(CORRIDOR, name="external")
    engine = GameEngine(collection, on_notice=notices.append)
    assert engine.set_bookmark() is None
    assert notices == ["Bookmarks for external levels is not implemented yet."]


def test_broken_level_not_bookmarkable() -> None:
    assert make_engine(BROKEN_NO_TOKEN).set_bookmark() is None


def test_dict_round_trip() -> None:
    bookmark = Bookmark(collection_id=3, level=2, moves=7, history="rrD*-")
    data = bookmark.as_dict()
    assert data == {"collection_id": 3, "level": 2, "moves": 7, "history": "rrD*-"}
    assert Bookmark.from_dict(data) == bookmark
    assert Bookmark.from_dict({k: str(v) for k, v in data.items()}) == bookmark


def test_bookmark_with_solving_redo_tail_does_not_unlock_next_level() -> None:
    notices: List[str] = []
    engine = make_engine(CORRIDOR, ROOM, notices=notices)
    assert engine.go_to_bookmark(Bookmark(collection_id=1, level=0, moves=0, history="-D*"))
    assert not engine.completed()
    assert engine.history.can_redo
    assert not engine.next_level()
    assert notices[-1] == "You have not completed this level yet."

    assert engine.redo()
    assert engine.completed()
    assert engine.next_level()
