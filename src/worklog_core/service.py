"""Worklog service: create, open, list and move worklogs between boards."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .boards import BoardIndex
from .config import WorklogContext
from .errors import RecordExistsError, RecordUnreadableError, UnknownWorklogError
from .ids import new_id
from .models import BOARD_ORDER, Board, WorklogState, WorklogSummary
from .records import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"

# Draws before giving up on a fresh id; collisions need the same second and random prefix
MAX_ID_ATTEMPTS = 8

Editor = Callable[[Path], None]


class WorklogService:
    """Façade over the record store and board index.

    State of a worklog is derived from board membership: untracked (record
    exists, no pointer) or on exactly one board. ``create`` and ``move_to``
    are the only transitions.
    """

    def __init__(self, context: WorklogContext, id_factory: Callable[[], str] = new_id):
        self.context = context
        self.records = RecordStore(context)
        self.boards = BoardIndex(context, self.records)
        self._id_factory = id_factory

    def init_layout(self) -> Path:
        """Create data/, the three boards and the reserved tags/ directory."""
        self.context.data_root.mkdir(parents=True, exist_ok=True)
        for board in BOARD_ORDER:
            self.boards.board_dir(board)
        self.context.tags_root.mkdir(parents=True, exist_ok=True)
        return self.context.root

    def create(
        self,
        title: str = DEFAULT_TITLE,
        tags: Optional[List[str]] = None,
        body: str = "",
    ) -> str:
        """
        Create a new worklog on the todo board.

        Returns:
            The new worklog id
        """
        for _ in range(MAX_ID_ATTEMPTS):
            worklog_id = self._id_factory()
            try:
                self.records.create(worklog_id, title or DEFAULT_TITLE, tags=tags, body=body)
            except RecordExistsError:
                logger.debug("Id %s already taken, drawing another", worklog_id)
                continue
            self.boards.add_to(worklog_id, Board.TODO)
            logger.info("Created worklog %s on %s", worklog_id, Board.TODO.value)
            return worklog_id
        raise RecordExistsError(worklog_id)

    def open(self, worklog_id: str, editor: Optional[Editor] = None) -> Path:
        """
        Resolve the record path and hand it to the editor, if any.

        The data directory is created when missing; the record file is not.
        """
        path = self.records.path_for(worklog_id)
        if editor is not None:
            editor(path)
        return path

    def is_worklog(self, worklog_id: str) -> bool:
        return self.records.exists(worklog_id)

    def state_of(self, worklog_id: str) -> WorklogState:
        """
        Return the worklog's current state.

        Raises:
            UnknownWorklogError: If no record exists
        """
        if not self.records.exists(worklog_id):
            raise UnknownWorklogError(worklog_id)
        boards = self.boards.boards_of(worklog_id)
        if not boards:
            return WorklogState.untracked()
        if len(boards) > 1:
            logger.warning(
                "Worklog %s is linked on %s; reporting %s",
                worklog_id,
                ", ".join(b.value for b in boards),
                boards[0].value,
            )
        return WorklogState.on_board(boards[0])

    def move_to(self, board: "Board | str", worklog_id: str) -> WorklogState:
        """
        Move a worklog onto a board (from any state, including untracked).

        Raises:
            InvalidBoardError: If the board name is unknown
            UnknownWorklogError: If no record exists for the id
        """
        target = Board.parse(board)
        if not self.records.exists(worklog_id):
            raise UnknownWorklogError(worklog_id)

        # Not atomic: an interruption here leaves the worklog untracked
        previous = self.boards.remove_from(worklog_id)
        self.boards.add_to(worklog_id, target)
        logger.info(
            "Moved %s: %s -> %s",
            worklog_id,
            previous.value if previous else "untracked",
            target.value,
        )
        return WorklogState.on_board(target)

    def list(self, board: "Board | str") -> List[str]:
        return list(self.boards.list(board))

    def summaries(self, board: "Board | str") -> List[WorklogSummary]:
        """(id, title) pairs for a board; unreadable records get a placeholder."""
        result = []
        for worklog_id in self.boards.list(board):
            try:
                result.append(WorklogSummary(id=worklog_id, title=self.records.title_of(worklog_id)))
            except RecordUnreadableError as e:
                logger.warning("%s", e)
                result.append(WorklogSummary(id=worklog_id, error=e.reason))
        return result

    def aggregate(self) -> Dict[Board, List[WorklogSummary]]:
        """All boards in todo, doing, done order, for dashboard rendering."""
        return {board: self.summaries(board) for board in BOARD_ORDER}
