"""Tests for the board index (symlink pointers per board)."""

import os
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from worklog_core.boards import BoardIndex
from worklog_core.errors import AlreadyLinkedError, InvalidBoardError
from worklog_core.models import BOARD_ORDER, Board
from worklog_core.records import RecordStore
from conftest import make_context, write_record


@pytest.fixture
def index(store_root: Path) -> BoardIndex:
    context = make_context(store_root)
    return BoardIndex(context, RecordStore(context))


def _record(index: BoardIndex, worklog_id: str, title: str = "Task") -> Path:
    return index.records.create(worklog_id, title)


def test_board_dir_is_idempotent(index: BoardIndex, store_root: Path):
    first = index.board_dir("todo")
    second = index.board_dir(Board.TODO)

    assert first == second == store_root.resolve() / "todo"
    assert first.is_dir()
    assert list(first.iterdir()) == []


def test_board_dir_rejects_unknown_board(index: BoardIndex, store_root: Path):
    with pytest.raises(InvalidBoardError):
        index.board_dir("bogus")
    assert not (store_root / "bogus").exists()


def test_add_to_creates_relative_pointer(index: BoardIndex):
    record = _record(index, "1a2b-0065f1c2d3")

    pointer = index.add_to("1a2b-0065f1c2d3", "doing")

    assert pointer.is_symlink()
    assert os.readlink(pointer) == os.path.join("..", "data", "1a2b-0065f1c2d3.md")
    assert pointer.resolve() == record.resolve()
    assert list(index.list("doing")) == ["1a2b-0065f1c2d3"]


def test_add_to_existing_pointer_raises(index: BoardIndex):
    _record(index, "1a2b-0065f1c2d3")
    index.add_to("1a2b-0065f1c2d3", "todo")

    with pytest.raises(AlreadyLinkedError):
        index.add_to("1a2b-0065f1c2d3", "todo")
    assert list(index.list("todo")) == ["1a2b-0065f1c2d3"]


def test_add_to_overwrite_replaces_pointer_only(index: BoardIndex):
    _record(index, "1a2b-0065f1c2d3")
    index.add_to("1a2b-0065f1c2d3", "todo")
    index.add_to("1a2b-0065f1c2d3", "todo", overwrite=True)
    assert list(index.list("todo")) == ["1a2b-0065f1c2d3"]

    regular = index.board_dir("done") / "1a2b-0065f1c2d3.md"
    regular.write_text("not a pointer", encoding="utf-8")
    with pytest.raises(AlreadyLinkedError):
        index.add_to("1a2b-0065f1c2d3", "done", overwrite=True)
    assert regular.read_text(encoding="utf-8") == "not a pointer"


def test_list_skips_non_pointer_entries(index: BoardIndex):
    _record(index, "b")
    _record(index, "a")
    index.add_to("b", "todo")
    index.add_to("a", "todo")
    board = index.board_dir("todo")
    (board / "README.txt").write_text("notes", encoding="utf-8")
    (board / "plain.md").write_text("---\ntitle: x\n---\n", encoding="utf-8")
    (board / "other.txt").symlink_to("README.txt")

    assert list(index.list("todo")) == ["a", "b"]


def test_remove_from_deletes_pointer_not_record(index: BoardIndex):
    record = _record(index, "1a2b-0065f1c2d3")
    index.add_to("1a2b-0065f1c2d3", "doing")

    removed = index.remove_from("1a2b-0065f1c2d3")

    assert removed == Board.DOING
    assert record.is_file()
    for board in BOARD_ORDER:
        assert "1a2b-0065f1c2d3" not in list(index.list(board))


def test_remove_from_untracked_is_noop(index: BoardIndex):
    _record(index, "1a2b-0065f1c2d3")

    assert index.remove_from("1a2b-0065f1c2d3") is None
    assert index.remove_from("never-created") is None


def test_remove_from_never_deletes_regular_files(index: BoardIndex, store_root: Path):
    write_record(store_root, "1a2b-0065f1c2d3", "---\ntitle: Real\n---\n")
    impostor = index.board_dir("todo") / "1a2b-0065f1c2d3.md"
    impostor.write_text("---\ntitle: Impostor\n---\n", encoding="utf-8")

    assert index.remove_from("1a2b-0065f1c2d3") is None
    assert impostor.is_file()
    assert impostor.read_text(encoding="utf-8").startswith("---")
    assert (store_root / "data" / "1a2b-0065f1c2d3.md").is_file()


def test_remove_from_clears_every_board(index: BoardIndex):
    _record(index, "1a2b-0065f1c2d3")
    index.add_to("1a2b-0065f1c2d3", "todo")
    index.add_to("1a2b-0065f1c2d3", "done")

    assert index.boards_of("1a2b-0065f1c2d3") == [Board.TODO, Board.DONE]
    assert index.remove_from("1a2b-0065f1c2d3") == Board.TODO
    assert index.boards_of("1a2b-0065f1c2d3") == []


def test_pointers_survive_moving_the_store(index: BoardIndex, tmp_path: Path):
    _record(index, "1a2b-0065f1c2d3", title="Portable")
    index.add_to("1a2b-0065f1c2d3", "todo")

    moved = tmp_path / "moved"
    index.context.root.rename(moved)

    pointer = moved / "todo" / "1a2b-0065f1c2d3.md"
    assert pointer.resolve() == (moved / "data" / "1a2b-0065f1c2d3.md").resolve()
    assert "Portable" in pointer.read_text(encoding="utf-8")


@settings(max_examples=25, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(board=st.sampled_from(BOARD_ORDER), suffix=st.integers(min_value=0, max_value=(1 << 40) - 1))
def test_property_add_then_list_contains_once(index: BoardIndex, board: Board, suffix: int) -> None:
    worklog_id = f"abcd-{suffix:010x}"
    if not index.records.exists(worklog_id):
        _record(index, worklog_id)
    index.remove_from(worklog_id)

    index.add_to(worklog_id, board)

    assert list(index.list(board)).count(worklog_id) == 1
    for other in BOARD_ORDER:
        if other != board:
            assert worklog_id not in list(index.list(other))
