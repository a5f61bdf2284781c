# jitbench/logger.py
#
# Logging setup for the harness. Diagnostics go to stderr so that stdout
# carries nothing but the per-trial report lines.

import logging
import sys

from .config import ConfigurationError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_log_level(level) -> int:
    """
    Maps a level name such as 'debug' or 'WARNING' to its numeric value.
    Anything that is not a registered level name is a configuration error.
    """
    name = str(level).strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return value


def setup_logging(level="WARNING", stream=None) -> None:
    """
    Configures the root logger with a single plain stream handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        stream: Where log records are written. Defaults to stderr.

    Raises:
        ConfigurationError: If `level` is not a known level name.
    """
    log_level = resolve_log_level(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Returns a logger instance, typically for `__name__`."""
    return logging.getLogger(name)
