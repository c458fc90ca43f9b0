"""Package logger for flowkit.

Every module logs through ``get_logger(__name__)``, which hangs it under the
single ``flowkit`` logger configured here. The flow algorithms report at
DEBUG: reverse edges added and removed, each augmenting path with its
bottleneck, balancing vertices, and augmentation rollbacks. At the default
INFO level they are silent.

The starting level can be taken from the ``FLOWKIT_LOG_LEVEL`` environment
variable (a level name such as ``DEBUG``). ``trace_flow()`` turns DEBUG on
for one block, e.g. to follow the augmenting paths of a single run::

    with trace_flow():
        maximum_flow(graph, capacity, "s", "t", edge_factory)
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Generator, Optional

# Flag to track if we've already set up the root logger
_ROOT_LOGGER_CONFIGURED = False

_ROOT_LOGGER_NAME = "flowkit"
LOG_LEVEL_ENV = "FLOWKIT_LOG_LEVEL"

_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_from_env(default: int = logging.INFO) -> int:
    """Return the level named by ``FLOWKIT_LOG_LEVEL``, or ``default``.

    Unknown names fall back to ``default``.
    """
    name = os.getenv(LOG_LEVEL_ENV)
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single flowkit handler.

    Only the first call has an effect; later calls are ignored until
    ``reset_logging()`` runs.

    Args:
        level: Logging level. Defaults to ``FLOWKIT_LOG_LEVEL`` or INFO.
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stdout StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.setLevel(level_from_env() if level is None else level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a flowkit module.

    Args:
        name: Logger name, normally the ``__name__`` of the calling module.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    # Children carry no handlers of their own and inherit the level
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the log level for all flowkit loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    setup_root_logger()

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Enable debug logging for the entire package."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Disable debug logging, set to INFO level."""
    set_global_log_level(logging.INFO)


@contextmanager
def trace_flow(level: int = logging.DEBUG) -> Generator[logging.Logger, None, None]:
    """Lower the flowkit level for the duration of a block.

    The previous logger and handler levels are restored on exit, also when
    the block raises.

    Yields:
        logging.Logger: The ``flowkit`` logger.
    """
    setup_root_logger()

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    saved_level = root_logger.level
    saved_handler_levels = [(h, h.level) for h in root_logger.handlers]
    set_global_log_level(level)
    try:
        yield root_logger
    finally:
        root_logger.setLevel(saved_level)
        for handler, handler_level in saved_handler_levels:
            handler.setLevel(handler_level)


def reset_logging() -> None:
    """Reset logging configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
