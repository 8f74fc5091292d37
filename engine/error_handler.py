"""
Centralized error handling and logging system.

This module provides:
- The package logger ("heatrun") with file + console handlers
- Custom exception types for board, config and validation failures
- Error logging and recovery helpers
"""
import logging
import traceback
from pathlib import Path
from typing import Optional, Callable
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

# Configure logger
logger = logging.getLogger("heatrun")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )
    logger.addHandler(console_handler)

    # File handler for detailed logs
    try:
        LOG_DIR.mkdir(exist_ok=True)
        log_file = LOG_DIR / f"game_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        logger.warning("Log directory %s is not writable; file logging disabled", LOG_DIR)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
        logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Child logger under the package logger, e.g. ``heatrun.pathfinding``."""
    return logger.getChild(name)


class GameError(Exception):
    """Base exception for game-specific errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class BoardError(GameError):
    """Board could not be built (duplicate coordinate, bad layout)."""
    pass


class ConfigError(GameError):
    """Rules file could not be read or written."""
    pass


class ValidationError(GameError):
    """Units or goal placed where the board does not allow them."""
    pass


def log_error(
    error: Exception,
    context: str = "",
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "signal:HeatChanged", "load_rules")
    """
    error_type = type(error).__name__
    error_msg = str(error)
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    logger.error(f"Error in {context}: {error_type}: {error_msg}\n{trace}")


def handle_critical_error(
    error: Exception,
    context: str,
    recovery_action: Optional[Callable[[], None]] = None,
) -> bool:
    """
    Handle an error that would otherwise stop the game loop.

    Args:
        error: The exception that occurred
        context: Where the error occurred
        recovery_action: Optional function to try for recovery

    Returns:
        True if error was handled, False if should re-raise
    """
    log_error(error, context)

    if recovery_action:
        try:
            recovery_action()
            logger.info(f"Recovery action executed for {context}")
            return True
        except Exception as recovery_error:
            log_error(recovery_error, f"{context}_recovery")

    return False
