"""Exception taxonomy for worklog-core."""

from typing import Optional


class WorklogError(Exception):
    """Base exception for all worklog errors."""

    pass


# Config errors


class ConfigError(WorklogError):
    """Failed to resolve the store context or load configuration."""

    pass


# Board errors


class InvalidBoardError(WorklogError):
    """Board name is not one of todo, doing, done."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid board: {name!r} (expected todo, doing or done)")


class AlreadyLinkedError(WorklogError):
    """A board already holds an entry with the worklog's name."""

    def __init__(self, worklog_id: str, board: str) -> None:
        self.worklog_id = worklog_id
        self.board = board
        super().__init__(f"Worklog {worklog_id} is already linked on board {board}")


# Record store errors


class UnknownWorklogError(WorklogError):
    """No record exists for the given id."""

    def __init__(self, worklog_id: str, details: Optional[str] = None) -> None:
        self.worklog_id = worklog_id
        self.details = details
        message = f"Unknown worklog: {worklog_id}"
        if details:
            message = f"{message} ({details})"
        super().__init__(message)


class RecordExistsError(WorklogError):
    """Refused to overwrite an existing record."""

    def __init__(self, worklog_id: str) -> None:
        self.worklog_id = worklog_id
        super().__init__(f"Record already exists: {worklog_id}")


class RecordUnreadableError(WorklogError):
    """Record is missing or its title cannot be extracted."""

    def __init__(self, worklog_id: str, reason: str) -> None:
        self.worklog_id = worklog_id
        self.reason = reason
        super().__init__(f"Record {worklog_id} is unreadable: {reason}")
