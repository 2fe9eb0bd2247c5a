"""Board index: board membership as relative symlinks to records."""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from .config import WorklogContext
from .errors import AlreadyLinkedError
from .models import BOARD_ORDER, Board
from .records import RecordStore

logger = logging.getLogger(__name__)


class BoardIndex:
    """Maintain the todo/doing/done pointer directories.

    A pointer is a symlink named ``<id>.<ext>`` inside ``<root>/<board>/``
    whose target is the record path relative to the board directory, so the
    whole tree stays valid when moved. Operations only ever delete entries
    that are verified to be symlinks; record files are never touched.
    """

    def __init__(self, context: WorklogContext, records: RecordStore):
        self.context = context
        self.records = records

    def board_dir(self, board: "Board | str") -> Path:
        """Return the pointer directory for a board, creating it if absent.

        Raises:
            InvalidBoardError: If the name is not a known board
        """
        board = Board.parse(board)
        path = self.context.board_root(board)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def pointer_path(self, worklog_id: str, board: "Board | str") -> Path:
        return self.board_dir(board) / self.records.filename_for(worklog_id)

    def list(self, board: "Board | str") -> Iterator[str]:
        """Yield ids on a board in ascending entry-name order.

        Only symlinks ending in the record extension qualify; anything else
        in the directory is skipped.
        """
        directory = self.board_dir(board)
        suffix = self.context.suffix
        for entry in sorted(directory.iterdir()):
            name = entry.name
            if len(name) <= len(suffix) or not name.endswith(suffix):
                continue
            if not entry.is_symlink():
                continue
            yield name[: -len(suffix)]

    def entries(self, board: "Board | str") -> List[Path]:
        """Raw directory entries of a board, sorted by name."""
        return sorted(self.board_dir(board).iterdir())

    def add_to(self, worklog_id: str, board: "Board | str", overwrite: bool = False) -> Path:
        """
        Link a record onto a board.

        Args:
            worklog_id: Record id
            board: Target board
            overwrite: Replace an existing pointer of the same name (never a regular file)

        Returns:
            Path of the created pointer

        Raises:
            InvalidBoardError: If the board name is unknown
            AlreadyLinkedError: If an entry of the same name exists and cannot be replaced
        """
        board = Board.parse(board)
        pointer = self.pointer_path(worklog_id, board)
        target = self.records.path_for(worklog_id)

        if pointer.is_symlink() or pointer.exists():
            if not (overwrite and pointer.is_symlink()):
                raise AlreadyLinkedError(worklog_id, board.value)
            pointer.unlink()
            logger.debug("Replaced existing pointer %s", pointer)

        relative_target = os.path.relpath(target, pointer.parent)
        pointer.symlink_to(relative_target)
        logger.info("Linked %s on %s -> %s", worklog_id, board.value, relative_target)
        return pointer

    def boards_of(self, worklog_id: str) -> List[Board]:
        """Boards currently holding a pointer for the id."""
        found = []
        for board in BOARD_ORDER:
            if self.pointer_path(worklog_id, board).is_symlink():
                found.append(board)
        return found

    def remove_from(self, worklog_id: str) -> Optional[Board]:
        """
        Delete the id's pointer from whichever board holds it.

        Entries that are not symlinks are left alone. Missing pointers are not
        an error.

        Returns:
            The board the pointer was removed from, or None
        """
        removed: Optional[Board] = None
        for board in BOARD_ORDER:
            pointer = self.pointer_path(worklog_id, board)
            if pointer.is_symlink():
                pointer.unlink()
                logger.info("Unlinked %s from %s", worklog_id, board.value)
                if removed is None:
                    removed = board
                else:
                    logger.warning("Worklog %s was linked on more than one board", worklog_id)
            elif pointer.exists():
                logger.warning("Refusing to delete %s: not a pointer", pointer)
        return removed
