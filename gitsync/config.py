"""Configuration management for git-sync."""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .platform import normalize_path


VALID_MODES = ("sync", "check")
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SyncConfig:
    """
    Immutable settings for one synchronization run.

    Built once at startup by load_configuration() and handed to every
    component; nothing below the CLI/server layer reads the environment.
    """

    # Repository to operate on
    repo_dir: Path = field(default_factory=Path.cwd)

    # Optional GIT_DIR / GIT_WORK_TREE overrides, e.g. for a bare dotfiles repo
    git_dir: Optional[Path] = None
    work_tree: Optional[Path] = None

    # Run mode: "sync" (default) or "check"
    mode: str = "sync"

    # Behaviour flags
    sync_new_files: bool = False
    sync_branch: bool = False
    recursive: bool = False

    # Ownership check
    allow_nonowner: bool = False
    provider_user: Optional[str] = None

    # Logging
    debug: bool = False
    log_level: str = "INFO"
    color: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.mode not in VALID_MODES:
            raise ValueError(f"Invalid mode: {self.mode}. Must be one of {list(VALID_MODES)}")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}")

        if self.provider_user is not None and not self.provider_user.strip():
            raise ValueError("provider_user must not be blank")

    @property
    def check_only(self) -> bool:
        """True when the run stops after the safety and ownership checks."""
        return self.mode == "check"

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug flag."""
        return "DEBUG" if self.debug else self.log_level.upper()

    def for_submodule(self, path: Path) -> "SyncConfig":
        """
        Derive the configuration for a submodule run.

        Flags are inherited; the git-dir/work-tree overrides only make sense
        for the parent repository and are dropped.
        """
        return dataclasses.replace(self, repo_dir=path, git_dir=None, work_tree=None)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    if not value:
        return None
    return normalize_path(value)


def load_configuration(**overrides) -> SyncConfig:
    """
    Load configuration from environment variables (and a .env file, if present).

    Keyword overrides, typically coming from CLI flags, win over the
    environment. Overrides whose value is None are ignored. Boolean flags are
    OR-ed with their environment counterpart, so a flag can enable but never
    disable what the environment asked for.
    """
    load_dotenv()

    try:
        values = {
            "repo_dir": _env_path("GIT_SYNC_DIR") or Path.cwd(),
            "git_dir": _env_path("GIT_SYNC_GIT_DIR"),
            "work_tree": _env_path("GIT_SYNC_WORK_TREE"),
            "sync_new_files": _env_flag("GIT_SYNC_NEW_FILES"),
            "sync_branch": _env_flag("GIT_SYNC_BRANCH"),
            "recursive": _env_flag("GIT_SYNC_RECURSIVE"),
            "debug": _env_flag("GIT_SYNC_DEBUG"),
            # Any non-empty value enables the bypass, like the original tool
            "allow_nonowner": bool(os.getenv("GIT_SYNC_ALLOW_NONOWNER")),
            "provider_user": os.getenv("GIT_SYNC_USER") or None,
            "log_level": os.getenv("GIT_SYNC_LOG_LEVEL", "INFO").upper(),
            "color": not os.getenv("NO_COLOR"),
        }

        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, bool) and isinstance(values.get(key), bool) and key != "color":
                values[key] = values[key] or value
            else:
                values[key] = value

        for key in ("repo_dir", "git_dir", "work_tree"):
            if values.get(key) is not None:
                values[key] = normalize_path(values[key])

        return SyncConfig(**values)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Configuration error: {e}")


def validate_configuration(config: SyncConfig) -> List[str]:
    """Validate configuration and return any errors or warnings."""
    errors = []

    if not config.repo_dir.exists():
        errors.append(f"ERROR: Repository directory does not exist: {config.repo_dir}")
    elif not config.repo_dir.is_dir():
        errors.append(f"ERROR: Repository path is not a directory: {config.repo_dir}")

    if config.git_dir is not None and not config.git_dir.exists():
        errors.append(f"ERROR: GIT_DIR override does not exist: {config.git_dir}")

    if config.work_tree is not None and config.git_dir is None:
        errors.append("WARNING: work tree override given without a git dir override")

    if config.allow_nonowner:
        logging.getLogger('gitsync.config').debug("Remote ownership check disabled")

    return errors
