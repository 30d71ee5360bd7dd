"""Log file setup for CourseHub processes.

Modules log through ``logging.getLogger(__name__)``, so everything lands under
the ``coursehub`` logger. setup_logging() gives that logger a rotating file
handler (plus an optional console handler) whose formatter redacts gateway
passwords and bearer tokens from every line, tracebacks included.

Where the logs go and how verbose they are is part of Settings
(``log_dir`` / ``log_level``); this module only applies it.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "coursehub"
DEFAULT_LOG_FILE = "coursehub.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_REDACTIONS = (
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"(?i)(password[\"']?\s*[:=]\s*[\"']?)[^\s,\"'}]+"), r"\1[REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
)


class RedactingFormatter(logging.Formatter):
    """Formatter that scrubs credentials from the fully rendered record."""

    def format(self, record: logging.LogRecord) -> str:
        return sanitize_for_log(super().format(record))


def setup_logging(
    log_dir: str | Path,
    level: str = "INFO",
    *,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    console: bool = True,
    extra_loggers: tuple[str, ...] = (),
) -> logging.Logger:
    """Send CourseHub logs to a rotating file.

    Calling it again replaces the previous handlers.

    Args:
        log_dir: Directory for log files; created if missing.
        level: Level name, e.g. "INFO" or "DEBUG".
        log_file: Log file name inside log_dir.
        max_bytes: File size that triggers rotation.
        backup_count: Rotated files to keep.
        console: Also write to stderr.
        extra_loggers: Server loggers (e.g. "uvicorn") that should write
            through the same handlers instead of propagating to root.

    Returns:
        The ``coursehub`` logger.
    """
    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = RedactingFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    for name in (ROOT_LOGGER, *extra_loggers):
        target = logging.getLogger(name)
        _reset(target)
        target.setLevel(log_level)
        for handler in handlers:
            target.addHandler(handler)
        if target is not logger:
            target.propagate = False

    logger.info("CourseHub logging to %s at %s", log_path, logging.getLevelName(log_level))
    return logger


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def truncate_output(output: str, max_length: int = 500) -> str:
    """Shorten text (e.g. a remote error body) to max_length characters plus a marker."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Replace passwords, bearer tokens and token query parameters with [REDACTED]."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text
