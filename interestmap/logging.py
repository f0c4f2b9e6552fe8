"""Terminal and log file logging configuration.

The terminal handler follows ``-v`` / ``--verbose`` (WARNING by default,
DEBUG when verbose).  The log file is optional: it exists only when an output
directory is configured, lives at ``<output_dir>/.interestmap/interestmap.log``
and logs at ``file_level``, which callers take from the ``log_level`` setting
(``INTERESTMAP_LOG_LEVEL``, default INFO).
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOG_DIRNAME = ".interestmap"
_LOG_FILENAME = "interestmap.log"

# Rotate at 2 MB, keep two old files
_MAX_BYTES = 2 * 1024 * 1024
_BACKUP_COUNT = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

# SDK and HTTP client chatter stays at WARNING even with -v
_NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "anthropic", "openai")


def _parse_log_level(level_str: str) -> int:
    """Parse a log level name case-insensitively, falling back to INFO."""
    numeric = getattr(logging, level_str.strip().upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def log_path_for(output_dir: Path) -> Path:
    return output_dir / _LOG_DIRNAME / _LOG_FILENAME


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    return handler


def _file_handler(output_dir: Path, level: int) -> logging.Handler:
    log_path = log_path_for(output_dir)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    output_dir: Path | None = None,
    verbose: bool = False,
    file_level: str | None = None,
) -> None:
    """Install the root handlers, replacing any installed before.

    Args:
        output_dir: Where the log file goes; ``None`` means terminal only.
        verbose: Show DEBUG messages on the terminal.
        file_level: Level name for the log file.  ``None`` reads
            ``INTERESTMAP_LOG_LEVEL`` from the environment (default INFO).
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    # Handlers filter on their own; the root lets everything through
    root.setLevel(logging.DEBUG)
    root.addHandler(_terminal_handler(verbose))

    if output_dir is not None:
        if file_level is None:
            file_level = os.environ.get("INTERESTMAP_LOG_LEVEL", "INFO")
        root.addHandler(_file_handler(output_dir, _parse_log_level(file_level)))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
