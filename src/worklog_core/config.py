"""Configuration and context resolution for worklog stores.

This module resolves the store root and related settings by layering
config sources.

Layer order (later wins):
1) System defaults (hardcoded; root under the per-user data directory)
2) TOML config file: explicit path, else $WORKLOG_CONFIG, else
   $XDG_CONFIG_HOME/worklog/config.toml (only when it exists)
3) Environment: WORKLOG_ROOT, WORKLOG_EXTENSION, WORKLOG_LOG_LEVEL
4) Explicit root override (e.g. the --root CLI option)

The environment is read here and nowhere else; the resulting
WorklogContext is handed to the service at construction.
"""

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .models import Board

# Conditional TOML import: stdlib tomllib (3.11+) or fallback tomli (<3.11)
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

ENV_ROOT = "WORKLOG_ROOT"
ENV_CONFIG = "WORKLOG_CONFIG"
ENV_EXTENSION = "WORKLOG_EXTENSION"
ENV_LOG_LEVEL = "WORKLOG_LOG_LEVEL"

DEFAULT_EXTENSION = "md"
DEFAULT_LOG_LEVEL = "warning"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

DATA_DIRNAME = "data"
TAGS_DIRNAME = "tags"


class WorklogContext(BaseModel):
    """Resolved store context: where records and boards live."""

    root: Path = Field(..., description="Store root holding data/, the boards and tags/")
    extension: str = Field(DEFAULT_EXTENSION, description="Record file extension, without dot")
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Default logging level name")
    config_file: Optional[Path] = Field(None, description="Config file that contributed, if any")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("extension")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        value = value.strip().lstrip(".")
        if not value or "/" in value or os.sep in value:
            raise ValueError(f"invalid record extension: {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"invalid log level: {value!r} (expected one of {', '.join(LOG_LEVELS)})")
        return value

    @property
    def data_root(self) -> Path:
        return self.root / DATA_DIRNAME

    @property
    def tags_root(self) -> Path:
        return self.root / TAGS_DIRNAME

    def board_root(self, board: Board) -> Path:
        return self.root / board.value

    @property
    def suffix(self) -> str:
        return f".{self.extension}"


class ConfigLoader:
    """Load and resolve worklog configuration."""

    ALLOWED_KEYS = {"root", "extension", "log"}
    ALLOWED_LOG_KEYS = {"level"}

    @staticmethod
    def default_root(env: Mapping[str, str]) -> Path:
        data_home = env.get("XDG_DATA_HOME")
        base = Path(data_home).expanduser() if data_home else Path.home() / ".local" / "share"
        return base / "worklog"

    @staticmethod
    def default_config_file(env: Mapping[str, str]) -> Path:
        config_home = env.get("XDG_CONFIG_HOME")
        base = Path(config_home).expanduser() if config_home else Path.home() / ".config"
        return base / "worklog" / "config.toml"

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any]:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except Exception as e:
            raise ConfigError(f"Failed to load TOML from {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config TOML must be a table: {path}")
        return data

    @staticmethod
    def _settings_from_file(path: Path) -> dict[str, Any]:
        data = ConfigLoader._read_toml(path)

        unknown = set(data) - ConfigLoader.ALLOWED_KEYS
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

        settings: dict[str, Any] = {}
        if "root" in data:
            root = Path(str(data["root"])).expanduser()
            if not root.is_absolute():
                root = path.parent / root
            settings["root"] = root
        if "extension" in data:
            settings["extension"] = str(data["extension"])

        log_section = data.get("log", {})
        if not isinstance(log_section, dict):
            raise ConfigError(f"[log] must be a table in {path}")
        unknown_log = set(log_section) - ConfigLoader.ALLOWED_LOG_KEYS
        if unknown_log:
            raise ConfigError(f"Unknown [log] keys in {path}: {', '.join(sorted(unknown_log))}")
        if "level" in log_section:
            settings["log_level"] = str(log_section["level"])
        return settings

    @staticmethod
    def _resolve_config_file(
        config_file: Optional[Path], env: Mapping[str, str]
    ) -> Optional[Path]:
        if config_file is not None:
            return Path(config_file).expanduser()
        env_config = (env.get(ENV_CONFIG) or "").strip()
        if env_config:
            return Path(env_config).expanduser()
        candidate = ConfigLoader.default_config_file(env)
        if candidate.is_file():
            return candidate
        return None

    @staticmethod
    def load(
        root: Optional[Path] = None,
        config_file: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> WorklogContext:
        """Resolve a WorklogContext from defaults, config file, environment and override.

        Args:
            root: Explicit store root (highest precedence)
            config_file: Explicit TOML config file; must exist when given
            env: Environment mapping (defaults to os.environ)

        Returns:
            WorklogContext

        Raises:
            ConfigError: If the config file is unreadable or any value is invalid
        """
        env = os.environ if env is None else env

        settings: dict[str, Any] = {
            "root": ConfigLoader.default_root(env),
            "extension": DEFAULT_EXTENSION,
            "log_level": DEFAULT_LOG_LEVEL,
        }

        resolved_file = ConfigLoader._resolve_config_file(config_file, env)
        if resolved_file is not None:
            logger.debug("Loading worklog config from %s", resolved_file)
            settings.update(ConfigLoader._settings_from_file(resolved_file))
            settings["config_file"] = resolved_file

        env_root = (env.get(ENV_ROOT) or "").strip()
        if env_root:
            settings["root"] = Path(env_root).expanduser()
        env_ext = (env.get(ENV_EXTENSION) or "").strip()
        if env_ext:
            settings["extension"] = env_ext
        env_level = (env.get(ENV_LOG_LEVEL) or "").strip()
        if env_level:
            settings["log_level"] = env_level

        if root is not None:
            settings["root"] = Path(root).expanduser()

        settings["root"] = Path(settings["root"]).resolve()

        try:
            return WorklogContext(**settings)
        except ValidationError as e:
            raise ConfigError(f"Invalid worklog configuration: {e}")
