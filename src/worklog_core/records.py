"""Record store for markdown worklog records (SSOT)."""

import logging
from datetime import date
from pathlib import Path
from typing import Any, List, Optional

import frontmatter

from .config import WorklogContext
from .errors import RecordExistsError, RecordUnreadableError, UnknownWorklogError
from .models import WorklogRecord

logger = logging.getLogger(__name__)


def render_record(title: str, tags: Optional[List[str]] = None, body: str = "") -> str:
    """Render a new record document: YAML frontmatter plus markdown body."""
    post = frontmatter.Post(body, title=title, tags=list(tags or []))
    return frontmatter.dumps(post) + "\n"


def load_document(path: Path) -> frontmatter.Post:
    return frontmatter.load(path)


def _scalar_title(value: Any) -> Optional[str]:
    # YAML may hand back numbers or dates for unquoted titles
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return None


class RecordStore:
    """Map worklog ids to record files under ``<root>/data``."""

    def __init__(self, context: WorklogContext):
        """
        Initialize record store.

        Args:
            context: Resolved store context (root and record extension)
        """
        self.context = context
        self.data_root = context.data_root

    @staticmethod
    def check_id(worklog_id: str) -> str:
        """Reject ids that cannot name a file directly inside the data directory."""
        if not worklog_id or not worklog_id.strip():
            raise UnknownWorklogError(str(worklog_id), "empty id")
        if "/" in worklog_id or "\\" in worklog_id or worklog_id.startswith("."):
            raise UnknownWorklogError(worklog_id, "not a plain file name")
        return worklog_id

    def filename_for(self, worklog_id: str) -> str:
        return f"{self.check_id(worklog_id)}{self.context.suffix}"

    def path_for(self, worklog_id: str) -> Path:
        """
        Return the record path for an id, creating the data directory if absent.

        Raises:
            UnknownWorklogError: If the id cannot name a record file
        """
        filename = self.filename_for(worklog_id)
        self.data_root.mkdir(parents=True, exist_ok=True)
        return self.data_root / filename

    def exists(self, worklog_id: str) -> bool:
        """True iff a regular file (not a symlink) holds the record."""
        try:
            path = self.path_for(worklog_id)
        except UnknownWorklogError:
            return False
        return path.is_file() and not path.is_symlink()

    def create(
        self,
        worklog_id: str,
        title: str,
        tags: Optional[List[str]] = None,
        body: str = "",
    ) -> Path:
        """
        Write a new record.

        Raises:
            RecordExistsError: If anything already occupies the record path
        """
        path = self.path_for(worklog_id)
        if path.exists() or path.is_symlink():
            raise RecordExistsError(worklog_id)
        # "x" refuses to clobber a file that appeared since the check above
        with open(path, "x", encoding="utf-8") as f:
            f.write(render_record(title, tags, body))
        logger.info("Created record %s at %s", worklog_id, path)
        return path

    def _load(self, worklog_id: str) -> frontmatter.Post:
        if not self.exists(worklog_id):
            raise RecordUnreadableError(worklog_id, "record not found")
        try:
            return load_document(self.path_for(worklog_id))
        except Exception as e:
            raise RecordUnreadableError(worklog_id, f"invalid frontmatter: {e}")

    def title_of(self, worklog_id: str) -> str:
        """
        Return the record's title.

        Raises:
            RecordUnreadableError: If the record is missing or has no scalar title
        """
        post = self._load(worklog_id)
        if "title" not in post.metadata:
            raise RecordUnreadableError(worklog_id, "missing title field")
        title = _scalar_title(post.metadata["title"])
        if title is None:
            raise RecordUnreadableError(worklog_id, "title is not a scalar value")
        return title

    def read(self, worklog_id: str) -> WorklogRecord:
        """Parse the full record (title, tags, body)."""
        title = self.title_of(worklog_id)
        post = self._load(worklog_id)
        tags = post.metadata.get("tags") or []
        if not isinstance(tags, list):
            tags = [tags]
        return WorklogRecord(
            id=worklog_id,
            title=title,
            tags=[str(tag) for tag in tags],
            body=post.content,
            file_path=self.path_for(worklog_id),
        )

    def list_ids(self) -> List[str]:
        """Ids of all record files, sorted by name."""
        if not self.data_root.is_dir():
            return []
        suffix = self.context.suffix
        ids = []
        for entry in sorted(self.data_root.iterdir()):
            if len(entry.name) <= len(suffix) or not entry.name.endswith(suffix):
                continue
            if entry.is_file() and not entry.is_symlink():
                ids.append(entry.name[: -len(suffix)])
        return ids
