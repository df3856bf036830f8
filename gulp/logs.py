"""
Logging — The logging collaborator brought up by init_core()

Installs, under the "gulp" logger:
- a file handler at <log_dir>/gulp.log
- a RecentLogHandler ring buffer read by the shell `log` command
- a stderr handler, only when not headless (the headless shell owns
  the terminal and must not be interleaved with log lines)

Any failure propagates to the caller; init_core() turns it into a
fatal exit because nothing else can record it.
"""

import logging
import threading
from collections import deque
from pathlib import Path
from typing import List, Optional

from .config import LoggingConfig

LOGGER_NAME = "gulp"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = "gulp.log"

logger = logging.getLogger(__name__)


class RecentLogHandler(logging.Handler):
    """Keeps the last N formatted log lines in memory."""

    def __init__(self, capacity: int = 200, level: int = logging.NOTSET):
        super().__init__(level)
        self._lines: deque = deque(maxlen=capacity)
        self._lines_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self._lines_lock:
            self._lines.append(line)

    def lines(self, limit: Optional[int] = None) -> List[str]:
        """Most recent lines, oldest first."""
        with self._lines_lock:
            items = list(self._lines)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items

    def clear(self) -> None:
        with self._lines_lock:
            self._lines.clear()


# Handlers installed by the last init_logging() call
_installed: List[logging.Handler] = []
_install_lock = threading.Lock()


def init_logging(headless: bool, config: Optional[LoggingConfig] = None) -> RecentLogHandler:
    """
    Configure the "gulp" logger.

    Calling it again replaces the handlers a previous call installed.

    Args:
        headless: True for the command shell (no console log output)
        config: Logging settings (defaults if None)

    Returns:
        The RecentLogHandler backing the `log` command

    Raises:
        OSError: If the log directory or file cannot be created
        ValueError: If the configured level is unknown
    """
    config = config or LoggingConfig()
    error = config.validate()
    if error:
        raise ValueError(error)

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_dir / LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(formatter)

    recent = RecentLogHandler(capacity=config.recent_lines)
    recent.setFormatter(formatter)

    handlers: List[logging.Handler] = [file_handler, recent]
    if not headless:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        handlers.append(console)

    root = logging.getLogger(LOGGER_NAME)
    with _install_lock:
        for handler in _installed:
            root.removeHandler(handler)
            handler.close()
        _installed.clear()

        root.setLevel(config.level_number)
        for handler in handlers:
            root.addHandler(handler)
        _installed.extend(handlers)

    logger.debug("Logging initialized (headless=%s, dir=%s)", headless, log_dir)
    return recent


def shutdown_logging() -> None:
    """Remove and close handlers installed by init_logging()."""
    root = logging.getLogger(LOGGER_NAME)
    with _install_lock:
        for handler in _installed:
            root.removeHandler(handler)
            handler.close()
        _installed.clear()
