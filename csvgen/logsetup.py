"""
logsetup - logging configuration for the generator CLI and library

Library modules only ask for loggers; the CLI decides once where records go
(stderr, an optional rotating log file) and at which level.

Usage:
    from csvgen.logsetup import setup_logging, get_logger

    # Once, in the entry point
    setup_logging(level='INFO', log_file='csvgen.log')

    # In any module
    logger = get_logger(__name__)
    logger.info("Generated %d records", count)
"""

import atexit
import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import List, Optional, Union


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LevelType = Union[int, str]


def _resolve_level(level: LevelType) -> int:
    """Turn a level name such as 'info' into its numeric value."""
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _file_handler(log_file: Union[str, Path], max_bytes: int, backup_count: int) -> logging.Handler:
    """Open a log file handler, rotating when ``max_bytes`` is positive."""
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    if max_bytes > 0:
        return logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
    return logging.FileHandler(path, encoding='utf-8')


class LogManager:
    """
    Process-wide owner of the handlers attached to the root logger.

    Reconfiguring replaces the handlers installed by the previous setup and
    leaves handlers added by anyone else (pytest's caplog, for one) alone.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance.handlers = []
                instance.configured = False
                atexit.register(instance.shutdown)
                cls._instance = instance
        return cls._instance

    def setup(
        self,
        level: LevelType = logging.WARNING,
        log_file: Optional[Union[str, Path]] = None,
        log_to_stderr: bool = True,
        format_string: str = LOG_FORMAT,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        """
        Configure the root logger.

        Args:
            level: Level name or number (e.g. 'INFO', logging.DEBUG)
            log_file: Optional path of a log file; parent folders are created
            log_to_stderr: Also write records to stderr
            format_string: Format applied to every handler
            max_bytes: Rotate the log file past this size (0 disables rotation)
            backup_count: Rotated files to keep

        Raises:
            ValueError: If ``level`` names an unknown logging level.
        """
        numeric_level = _resolve_level(level)
        self.shutdown()

        handlers: List[logging.Handler] = []
        if log_to_stderr:
            handlers.append(logging.StreamHandler(sys.stderr))
        if log_file:
            handlers.append(_file_handler(log_file, max_bytes, backup_count))

        formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)
        root = logging.getLogger()
        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)
        root.setLevel(numeric_level)

        self.handlers = handlers
        self.configured = True

    def shutdown(self) -> None:
        """Detach and close the handlers installed by ``setup``."""
        root = logging.getLogger()
        while self.handlers:
            handler = self.handlers.pop()
            root.removeHandler(handler)
            handler.close()
        self.configured = False


_log_manager = LogManager()


def setup_logging(
    level: LevelType = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    log_to_stderr: bool = True,
    format_string: str = LOG_FORMAT,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure logging for the current process.

    Call this once from the entry point. Calling it again replaces the
    previous configuration.

    Example:
        setup_logging(level='DEBUG', log_file='csvgen.log')
    """
    _log_manager.setup(
        level=level,
        log_file=log_file,
        log_to_stderr=log_to_stderr,
        format_string=format_string,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a named logger.

    Loggers created before setup_logging runs still reach its handlers
    through the root logger.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Remove and close the configured handlers. Also runs at exit."""
    _log_manager.shutdown()


def is_logging_setup() -> bool:
    """Return True while a setup_logging configuration is active."""
    return _log_manager.configured
