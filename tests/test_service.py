"""Tests for the worklog service and its board state machine."""

from pathlib import Path
from typing import List

import pytest

from worklog_core.errors import InvalidBoardError, RecordExistsError, UnknownWorklogError
from worklog_core.models import BOARD_ORDER, Board, StateKind, WorklogState
from worklog_core.service import DEFAULT_TITLE, WorklogService
from conftest import SequentialIds, make_context, write_record


def _listings(service: WorklogService) -> dict:
    return {board: service.list(board) for board in BOARD_ORDER}


def test_create_puts_new_record_on_todo(service: WorklogService):
    worklog_id = service.create(title="Buy milk")

    assert service.records.exists(worklog_id)
    assert service.is_worklog(worklog_id)
    assert worklog_id in service.list("todo")
    assert service.state_of(worklog_id) == WorklogState.on_board(Board.TODO)
    assert service.records.title_of(worklog_id) == "Buy milk"


def test_create_without_title_uses_default(service: WorklogService):
    worklog_id = service.create()

    assert service.records.title_of(worklog_id) == DEFAULT_TITLE


def test_create_draws_again_on_collision(store_root: Path):
    ids = SequentialIds(collide="0001-0000000001")
    service = WorklogService(make_context(store_root), id_factory=ids)

    first = service.create(title="First")
    second = service.create(title="Second")

    assert first == "0001-0000000001"
    assert second == "0002-0000000002"
    assert service.records.title_of(first) == "First"


def test_create_gives_up_when_every_id_is_taken(store_root: Path):
    service = WorklogService(make_context(store_root), id_factory=lambda: "dead-0000000001")
    service.create(title="Only one")

    with pytest.raises(RecordExistsError):
        service.create(title="Never")


def test_move_between_boards(service: WorklogService):
    worklog_id = service.create(title="Ship it")

    state = service.move_to("doing", worklog_id)
    assert state.kind == StateKind.ON_BOARD
    assert state.board == Board.DOING
    assert worklog_id in service.list("doing")
    assert worklog_id not in service.list("todo")
    assert worklog_id not in service.list("done")

    service.move_to(Board.DONE, worklog_id)
    assert _listings(service) == {Board.TODO: [], Board.DOING: [], Board.DONE: [worklog_id]}


def test_move_to_same_board_keeps_single_pointer(service: WorklogService):
    worklog_id = service.create()

    service.move_to("todo", worklog_id)

    assert service.list("todo") == [worklog_id]


def test_move_untracked_record_onto_board(service: WorklogService, store_root: Path):
    write_record(store_root, "handmade", "---\ntitle: Made by hand\n---\n")
    assert service.state_of("handmade") == WorklogState.untracked()

    service.move_to("done", "handmade")

    assert service.state_of("handmade") == WorklogState.on_board(Board.DONE)


def test_move_to_bogus_board_changes_nothing(service: WorklogService):
    worklog_id = service.create()
    before = _listings(service)

    with pytest.raises(InvalidBoardError):
        service.move_to("bogus", worklog_id)

    assert _listings(service) == before


def test_move_unknown_worklog_creates_no_pointer(service: WorklogService):
    with pytest.raises(UnknownWorklogError):
        service.move_to("doing", "nonexistent-id")

    for board in BOARD_ORDER:
        assert service.list(board) == []
        assert not (service.boards.board_dir(board) / "nonexistent-id.md").exists()


def test_interrupted_move_leaves_record_untracked_and_recoverable(service: WorklogService):
    worklog_id = service.create(title="Fragile")

    # First half of a move only
    service.boards.remove_from(worklog_id)

    assert service.state_of(worklog_id) == WorklogState.untracked()
    assert service.records.title_of(worklog_id) == "Fragile"

    service.move_to("doing", worklog_id)
    assert service.state_of(worklog_id) == WorklogState.on_board(Board.DOING)


def test_state_of_unknown_worklog_raises(service: WorklogService):
    with pytest.raises(UnknownWorklogError):
        service.state_of("0000-0000000000")


def test_open_returns_path_and_calls_editor(service: WorklogService):
    worklog_id = service.create(title="Edit me")
    opened: List[Path] = []

    path = service.open(worklog_id, editor=opened.append)

    assert opened == [path]
    assert path == service.records.path_for(worklog_id)


def test_open_unknown_id_does_not_create_record(service: WorklogService, store_root: Path):
    path = service.open("1a2b-0065f1c2d3")

    assert (store_root / "data").is_dir()
    assert not path.exists()
    assert not service.is_worklog("1a2b-0065f1c2d3")


def test_summaries_use_placeholder_for_unreadable_records(service: WorklogService, store_root: Path):
    good = service.create(title="Readable")
    write_record(store_root, "broken", "---\ntags: []\n---\n")
    service.move_to("todo", "broken")

    summaries = {s.id: s for s in service.summaries("todo")}

    assert summaries[good].title == "Readable"
    assert summaries[good].readable
    assert summaries["broken"].title is None
    assert summaries["broken"].error == "missing title field"


def test_aggregate_covers_all_boards_in_order(service: WorklogService):
    a = service.create(title="A")
    b = service.create(title="B")
    service.move_to("done", b)

    aggregate = service.aggregate()

    assert list(aggregate) == BOARD_ORDER
    assert [s.id for s in aggregate[Board.TODO]] == [a]
    assert aggregate[Board.DOING] == []
    assert [(s.id, s.title) for s in aggregate[Board.DONE]] == [(b, "B")]


def test_init_layout_creates_reserved_tags_dir(service: WorklogService, store_root: Path):
    root = service.init_layout()
    service.init_layout()

    assert root == store_root.resolve()
    for name in ["data", "todo", "doing", "done", "tags"]:
        assert (store_root / name).is_dir()
    assert list((store_root / "tags").iterdir()) == []


def test_worklog_state_rejects_inconsistent_values():
    with pytest.raises(ValueError):
        WorklogState(kind=StateKind.ON_BOARD)
    with pytest.raises(ValueError):
        WorklogState(kind=StateKind.UNTRACKED, board=Board.TODO)


def test_board_parse_matches_names_exactly():
    assert Board.parse("doing") == Board.DOING
    for name in ["in-progress", "TODO", " doing", "Done"]:
        with pytest.raises(InvalidBoardError):
            Board.parse(name)


def test_move_to_uppercase_board_changes_nothing(service: WorklogService, store_root: Path):
    worklog_id = service.create(title="Case")

    with pytest.raises(InvalidBoardError):
        service.move_to("DOING", worklog_id)

    assert service.state_of(worklog_id) == WorklogState.on_board(Board.TODO)
    assert not (store_root / "doing").exists() or not any((store_root / "doing").iterdir())
