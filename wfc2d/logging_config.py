"""
Centralized logging configuration for wfc2d.

Library modules only create loggers through get_logger(); handlers are
attached by setup_logging(), which the CLI calls once at startup.

Usage:
    from wfc2d.logging_config import setup_logging
    setup_logging(console_level=logging.INFO)

All wfc2d.* loggers write to the console at console_level and, when a
log directory is given, DEBUG to a rotating file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


ROOT_LOGGER_NAME = "wfc2d"
LOG_FILE_NAME = "wfc2d.log"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB per file
BACKUP_COUNT = 3


def setup_logging(
    log_dir: Optional[Union[Path, str]] = None,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Optional[Path]:
    """
    Configure the wfc2d logger hierarchy.

    Args:
        log_dir: Directory for the rotating log file (None = console only)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file, or None when logging to console only
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers (for re-initialization)
    root_logger.handlers.clear()

    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-25s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-30s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    root_logger.info(f"Log file: {log_file.absolute()}")
    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger nested under the wfc2d logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    iteration: int,
    index: int,
    tile_id: int,
    entropy: int,
) -> None:
    """Log one select/collapse step."""
    logger.debug(f"STEP {iteration:05d} | COLLAPSE | cell={index} | tile={tile_id} | entropy={entropy}")


def log_propagation(
    logger: logging.Logger,
    seeds: int,
    visited: int,
    removed: int,
    contradiction: Optional[int] = None,
) -> None:
    """Log the outcome of one propagate() call."""
    status = "OK" if contradiction is None else f"CONTRADICTION at {contradiction}"
    logger.debug(f"PROPAGATE | seeds={seeds} | visited={visited} | removed={removed} | {status}")


def log_backtrack(
    logger: logging.Logger,
    depth: int,
    index: int,
    tile_id: int,
) -> None:
    """Log a rollback to an earlier checkpoint."""
    logger.debug(f"BACKTRACK | depth={depth} | cell={index} | banned tile={tile_id}")
