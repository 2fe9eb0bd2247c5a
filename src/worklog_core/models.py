"""Pydantic models for worklogs and boards."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import InvalidBoardError


class Board(str, Enum):
    """Board a worklog can be tracked on."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"

    @classmethod
    def parse(cls, name: "str | Board") -> "Board":
        """Resolve a board name, raising InvalidBoardError for anything else."""
        if isinstance(name, Board):
            return name
        try:
            return cls(str(name))
        except ValueError:
            raise InvalidBoardError(str(name)) from None


# Iteration order used by every aggregate listing
BOARD_ORDER: List[Board] = [Board.TODO, Board.DOING, Board.DONE]


class StateKind(str, Enum):
    """Worklog state derived from board membership."""

    UNTRACKED = "untracked"
    ON_BOARD = "on_board"


class WorklogState(BaseModel):
    """Untracked, or on exactly one board."""

    kind: StateKind
    board: Optional[Board] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _board_matches_kind(self) -> "WorklogState":
        if self.kind == StateKind.ON_BOARD and self.board is None:
            raise ValueError("on_board state requires a board")
        if self.kind == StateKind.UNTRACKED and self.board is not None:
            raise ValueError("untracked state cannot carry a board")
        return self

    @classmethod
    def untracked(cls) -> "WorklogState":
        return cls(kind=StateKind.UNTRACKED)

    @classmethod
    def on_board(cls, board: Board) -> "WorklogState":
        return cls(kind=StateKind.ON_BOARD, board=board)

    def describe(self) -> str:
        if self.board is None:
            return self.kind.value
        return self.board.value


class WorklogRecord(BaseModel):
    """Parsed worklog record with frontmatter and body."""

    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    body: str = ""
    file_path: Optional[Path] = Field(None, description="Absolute path to the record file")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class WorklogSummary(BaseModel):
    """(id, title) pair fed to dashboards.

    ``title`` is None when the record could not be read; ``error`` then holds
    the reason.
    """

    id: str
    title: Optional[str] = None
    error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.error is None
