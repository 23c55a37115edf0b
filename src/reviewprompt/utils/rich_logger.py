"""
Rich logger for reviewprompt
============================

Structured logging on top of the standard ``logging`` module.

- Rich console output on stderr (stdout carries the prompt)
- Optional rotating file output with timezone-aware timestamps
- ``message | key=value`` context formatting
- Masking of token-like environment variable values
"""

import logging
import logging.handlers
import os
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import pytz
from rich.console import Console
from rich.logging import RichHandler

# Configuration constants
ROOT_LOGGER_NAME = "reviewprompt"
DEFAULT_TIMEZONE = pytz.utc
DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FILE = Path.home() / ".cache" / "reviewprompt" / "logs" / "reviewprompt.log"
MAX_LOG_FILE_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

SENSITIVE_ENV_PATTERNS = [
    'GH_TOKEN', 'GITHUB_TOKEN', 'TOKEN', 'PASSWORD', 'SECRET', 'API_KEY',
]


class TimezoneAwareFormatter(logging.Formatter):
    """Formatter that renders timestamps in a configured timezone."""

    def __init__(self, fmt=None, datefmt=None, style='%', tz=None):
        super().__init__(fmt, datefmt, style)
        self.tz = tz

    def formatTime(self, record, datefmt=None):  # noqa: N802
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.tz:
            dt = dt.astimezone(self.tz)
        return dt.strftime(datefmt) if datefmt else dt.isoformat()


def mask_sensitive_values(text: str, environ: Optional[dict] = None) -> str:
    """
    Mask values of sensitive environment variables in text.

    Args:
        text: Text that might contain secrets
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Text with each secret reduced to its first four characters
        followed by asterisks
    """
    env = os.environ if environ is None else environ
    masked = text
    for var, value in env.items():
        if not value or len(value) <= 4:
            continue
        if any(pattern in var.upper() for pattern in SENSITIVE_ENV_PATTERNS):
            masked = re.sub(re.escape(value), value[:4] + '*' * (len(value) - 4), masked)
    return masked


class RichLogger:
    """
    Thin structured wrapper around a stdlib logger.

    Handlers are attached only to the ``reviewprompt`` root logger by
    :func:`setup_logging`; module loggers propagate to it.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        self.name = name
        self.logger = logging.getLogger(name)

    def _format_message(self, message: str, **kwargs) -> str:
        if kwargs:
            context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{message} | {context}"
        return mask_sensitive_values(message)

    def debug(self, message: str, **kwargs) -> None:
        """Log a debug-level message with context."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs) -> None:
        """Log an info-level message with context."""
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs) -> None:
        """Log an error-level message with context."""
        self.logger.error(self._format_message(message, **kwargs))


# Global logger registry with thread safety
_loggers: dict[str, RichLogger] = {}
_logger_lock = threading.Lock()


def get_logger(name: str = ROOT_LOGGER_NAME) -> RichLogger:
    """
    Get or create a logger instance (thread-safe).

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        RichLogger instance
    """
    if name in _loggers:
        return _loggers[name]

    with _logger_lock:
        if name not in _loggers:
            _loggers[name] = RichLogger(name)
        return _loggers[name]


def setup_logging(
    level: int = DEFAULT_LOG_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    console_output: bool = True,
    file_output: bool = False,
    timezone: Optional[pytz.BaseTzInfo] = None,
) -> RichLogger:
    """
    Configure the ``reviewprompt`` root logger.

    Calling it again replaces the previously installed handlers.

    Args:
        level: Logging level
        log_file: Path of the log file (default under ~/.cache/reviewprompt)
        console_output: Log to stderr through rich
        file_output: Log to a rotating file
        timezone: Timezone for file timestamps (default UTC)

    Returns:
        The root RichLogger
    """
    root = get_logger(ROOT_LOGGER_NAME)
    logger = root.logger
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if file_output:
        path = Path(log_file).expanduser() if log_file else DEFAULT_LOG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding='utf-8',
        )
        file_format = (
            "%(asctime)s | %(levelname)8s | %(name)s | "
            f"PID:{os.getpid()} | %(message)s"
        )
        file_handler.setFormatter(
            TimezoneAwareFormatter(file_format, tz=timezone or DEFAULT_TIMEZONE)
        )
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return root
