"""Logging configuration for cmdrecall."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .runtime import get_log_dir

# Global flag to track if logging has been initialized
_logging_initialized = False
_log_file_path = None
_handlers: list[logging.Handler] = []


def setup_logger(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    log_to_console: bool = False,
) -> None:
    """Configure the logging system globally.

    Called once at startup when --verbose is given. Session transitions and
    template loading are logged to a timestamped file under ~/.cmdrecall/logs/.

    Args:
        log_dir: Directory to store log files (default: ~/.cmdrecall/logs/)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_console: Whether to also log warnings to stderr
    """
    global _logging_initialized, _log_file_path

    if _logging_initialized:
        return

    if log_dir is None:
        log_dir = get_log_dir()

    if log_level is None:
        from config import Config

        log_level = Config.LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.DEBUG)
    logging.root.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True, parents=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"cmdrecall_{timestamp}.log"
    _log_file_path = str(log_file)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logging.root.addHandler(file_handler)
    _handlers.append(file_handler)

    # stdout carries only the final command
    if log_to_console:
        console_handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=False
        )
        console_handler.setLevel(logging.WARNING)
        logging.root.addHandler(console_handler)
        _handlers.append(console_handler)

    _logging_initialized = True

    logging.info(f"Logging initialized. Level: {log_level}, File: {_log_file_path}")


def shutdown_logger() -> None:
    """Detach the handlers installed by setup_logger()."""
    global _logging_initialized, _log_file_path

    for handler in _handlers:
        logging.root.removeHandler(handler)
        handler.close()
    _handlers.clear()
    _logging_initialized = False
    _log_file_path = None


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Without --verbose nothing is configured and records are dropped.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def get_log_file_path() -> Optional[str]:
    """Get the path to the current log file.

    Returns:
        Path to log file, or None if logging to file is disabled
    """
    return _log_file_path
