"""
Developer-facing logging for the sprig package.

Every module logs through logging.getLogger(__name__). setup_logging()
attaches one rich handler (stderr) to the "sprig" logger; the root logger is
left alone so host applications keep their own configuration.

Level resolution: the level argument, else SPRIG_LOG_LEVEL, else WARNING.
"""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from .utils import Unset

ENVIRONMENT = "SPRIG_LOG_LEVEL"


def _level(level):
    if level is Unset or level is None:
        level = os.getenv(ENVIRONMENT, "WARNING")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level {level!r}")
        return resolved
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    raise TypeError("log level must be a level name or an integer")


def setup_logging(level=Unset, /):
    """
    configure the "sprig" logger once; later calls only adjust the level.
    returns the logger.
    """
    logger = logging.getLogger("sprig")
    logger.setLevel(_level(level))
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


__all__ = (
    "setup_logging",
    "ENVIRONMENT",
)
