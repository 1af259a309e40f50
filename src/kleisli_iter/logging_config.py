"""
Logging Configuration for kleisli_iter.

Provides the package trace logger setup. Every module logs through
``logging.getLogger(__name__)``, so all records land under the
``kleisli_iter`` package logger configured here.

With tracing disabled the package logger only carries a NullHandler and
records propagate to whatever the application configured.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_LOG_LEVEL, TraceConfig
from .exceptions import ConfigError

PACKAGE_LOGGER = "kleisli_iter"

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Set by configure_logging; nothing is configured at import time
_configured = False


def _create_file_handler(log_path: Path) -> Optional[logging.FileHandler]:
    """
    Create a file handler for the trace log file.

    Args:
        log_path: Full path of the log file

    Returns:
        Configured FileHandler, or None if the file cannot be opened
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return handler


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_stderr_handler() -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return handler


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


def configure_logging(config: Optional[TraceConfig] = None) -> logging.Logger:
    """
    Configure the package logger, replacing any handlers it already has.

    Args:
        config: Trace configuration; read from the environment when omitted

    Returns:
        The configured ``kleisli_iter`` logger
    """
    global _configured

    if config is None:
        config = TraceConfig.from_env()

    logger = logging.getLogger(PACKAGE_LOGGER)
    _reset_handlers(logger)
    _configured = True

    if not config.enabled:
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        logger.addHandler(logging.NullHandler())
        return logger

    problems = config.validate()
    try:
        level = config.level_number
    except ConfigError:
        # Already reported by validate()
        level = logging.getLevelName(DEFAULT_LOG_LEVEL)

    logger.setLevel(level)
    logger.propagate = False  # Don't propagate to root logger

    if config.stderr:
        logger.addHandler(_create_stderr_handler())

    log_path = config.log_path
    if log_path is not None:
        file_handler = _create_file_handler(log_path)
        if file_handler:
            logger.addHandler(file_handler)
        else:
            problems.append(f"Could not open trace log file {log_path}")

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    for problem in problems:
        logger.warning(problem)

    return logger


def get_trace_logger(config: Optional[TraceConfig] = None) -> logging.Logger:
    """
    Get the package trace logger, configuring it on first use.

    Returns:
        Configured logger instance
    """
    # Only configure once
    if not _configured:
        return configure_logging(config)

    return logging.getLogger(PACKAGE_LOGGER)


def suppress_stderr_logging():
    """
    Suppress stderr output of the trace logger.

    File logging continues to work normally.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if isinstance(handler, FlushingStreamHandler):
            handler.setLevel(logging.CRITICAL + 1)  # Effectively disable


def restore_stderr_logging():
    """
    Restore stderr output of the trace logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if isinstance(handler, FlushingStreamHandler):
            handler.setLevel(logging.DEBUG)
