from pathlib import Path
from typing import Optional

import pytest
from hypothesis import settings

from worklog_core.config import ConfigLoader, WorklogContext
from worklog_core.service import WorklogService

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("worklog-tests", database=None)
settings.load_profile("worklog-tests")


def make_context(root: Path, **overrides) -> WorklogContext:
    """Build a context rooted at ``root`` without consulting the real environment."""
    return ConfigLoader.load(root=root, env={"XDG_CONFIG_HOME": str(root / ".no-config")}, **overrides)


def write_record(root: Path, worklog_id: str, text: str, *, extension: str = "md") -> Path:
    """Write a raw record file, bypassing the store."""
    data = root / "data"
    data.mkdir(parents=True, exist_ok=True)
    path = data / f"{worklog_id}.{extension}"
    path.write_text(text, encoding="utf-8")
    return path


def write_config(directory: Path, body: str, name: str = "config.toml") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def service(store_root: Path) -> WorklogService:
    return WorklogService(make_context(store_root))


class SequentialIds:
    """Id factory yielding predictable ids, repeating ``collide`` first when set."""

    def __init__(self, collide: Optional[str] = None):
        self.collide = collide
        self.counter = 0

    def __call__(self) -> str:
        if self.collide is not None:
            value, self.collide = self.collide, None
            return value
        self.counter += 1
        return f"{self.counter:04x}-{self.counter:010x}"
