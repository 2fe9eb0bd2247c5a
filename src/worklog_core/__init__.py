"""Worklog Core - filesystem-backed worklog records and boards."""

from .__version__ import __version__, __version_info__

from .config import ConfigLoader, WorklogContext
from .models import BOARD_ORDER, Board, StateKind, WorklogRecord, WorklogState, WorklogSummary
from .ids import is_valid_id, new_id
from .records import RecordStore
from .boards import BoardIndex
from .service import WorklogService
from .errors import (
    AlreadyLinkedError,
    ConfigError,
    InvalidBoardError,
    RecordExistsError,
    RecordUnreadableError,
    UnknownWorklogError,
    WorklogError,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Config
    "ConfigLoader",
    "WorklogContext",
    # Models
    "BOARD_ORDER",
    "Board",
    "StateKind",
    "WorklogRecord",
    "WorklogState",
    "WorklogSummary",
    # Ids
    "is_valid_id",
    "new_id",
    # Stores
    "RecordStore",
    "BoardIndex",
    "WorklogService",
    # Errors
    "AlreadyLinkedError",
    "ConfigError",
    "InvalidBoardError",
    "RecordExistsError",
    "RecordUnreadableError",
    "UnknownWorklogError",
    "WorklogError",
]
