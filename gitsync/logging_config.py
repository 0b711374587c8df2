"""Logging setup for git-sync."""

import logging
import sys
from typing import Any, MutableMapping, Tuple

from .config import SyncConfig
from .platform import supports_color


PREFIX = "gs ⟩ "

_LEVEL_COLORS = {
    logging.DEBUG: "\033[1;35m",
    logging.INFO: "\033[1;36m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[1;33m",
    logging.CRITICAL: "\033[1;31m",
}
_SUCCESS_COLOR = "\033[1;32m"
_RESET = "\033[0m"


class RepoFormatter(logging.Formatter):
    """Render records as 'gs ⟩ <repo> | <message>', optionally colored."""

    def __init__(self, color: bool = False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record):
        message = super().format(record)
        repo = getattr(record, 'repo', None) or "-"
        line = f"{PREFIX}{repo} | {message}"

        if not self.color:
            return line

        color = _SUCCESS_COLOR if getattr(record, 'success', False) else _LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{line}{_RESET}"


class RepoLoggerAdapter(logging.LoggerAdapter):
    """Attach the repository name to every record so concurrent runs stay readable."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        extra.update(kwargs.get('extra') or {})
        kwargs['extra'] = extra
        return msg, kwargs

    def success(self, msg: Any, *args, **kwargs) -> None:
        """Log a successful outcome at INFO level, rendered in green."""
        kwargs.setdefault('extra', {})['success'] = True
        self.info(msg, *args, **kwargs)


def get_repo_logger(name: str, repo_name: str) -> RepoLoggerAdapter:
    """Return a logger for the given module that tags records with repo_name."""
    return RepoLoggerAdapter(logging.getLogger(name), {'repo': repo_name})


def setup_logging(config: SyncConfig, stream=None) -> None:
    """Configure the 'gitsync' logger hierarchy for command-line use."""
    stream = stream if stream is not None else sys.stderr
    level = getattr(logging, config.effective_log_level)

    logger = logging.getLogger('gitsync')
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(RepoFormatter(color=config.color and supports_color(stream)))
    logger.addHandler(handler)
    logger.propagate = False

    # GitPython logs every command at DEBUG; only show it when debugging
    logging.getLogger('git').setLevel(logging.DEBUG if config.debug else logging.WARNING)
