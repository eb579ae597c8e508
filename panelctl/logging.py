"""Logging configuration for the panelctl package."""
import logging
import sys

from .config import Config


def resolve_level(name) -> int:
    """Map a level name such as "DEBUG" to its number, falling back to INFO."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str, level: int = None) -> logging.Logger:
    """
    Set up a logger with the specified name and log level.

    Args:
        name: The name of the logger
        level: The logging level (default: Config.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else resolve_level(Config.LOG_LEVEL))

    # Don't add handlers if they're already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(Config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(handler)

    return logger


def setup_logging(debug_mode: bool = False) -> None:
    """Configure root logging based on debug mode."""
    log_level = logging.DEBUG if debug_mode else resolve_level(Config.LOG_LEVEL)
    logging.basicConfig(
        level=log_level,
        format=Config.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logging.getLogger().setLevel(log_level)
    # Disable debug logging for noisy libraries
    if not debug_mode:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
