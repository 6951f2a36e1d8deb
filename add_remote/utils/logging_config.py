"""Logging configuration for add-remote."""

import logging
from typing import Optional


# Log level constants
DEFAULT_LOG_LEVEL = logging.INFO
DEBUG_LOG_LEVEL = logging.DEBUG


def setup_logging(log_level: Optional[int] = None, log_file: Optional[str] = None, verbose: bool = False) -> None:
    """
    Configure logging for the command-line tool.

    Logs are written to a file or suppressed entirely so they don't interleave
    with the interactive prompts on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to. If not provided, logs are suppressed.
        verbose: Also write DEBUG logs to stderr
    """
    if log_level is None:
        log_level = DEBUG_LOG_LEVEL if verbose else DEFAULT_LOG_LEVEL

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # NullHandler by default keeps the terminal for prompts and results
    root_logger.addHandler(logging.NullHandler())

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(log_level)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    # Set specific loggers to WARNING to minimize noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ from module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
