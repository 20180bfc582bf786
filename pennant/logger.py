import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_PREFIX = "pennant"
_ENVIRONMENT = "PENNANT_LOG"


def _get_level():
    level_name = (os.getenv(_ENVIRONMENT) or "").strip().upper()
    if level_name == "1":
        return logging.INFO
    return logging.getLevelNamesMapping().get(level_name, logging.NOTSET)


def get_logger(name):
    """
    Return the package logger for a module name.

    Names outside the "pennant" namespace are nested under it; "__main__" maps
    to the root package logger. Handlers are attached once per logger.
    """
    if not name.startswith(_LOGGER_PREFIX):
        logger_name = f"{_LOGGER_PREFIX}.{name}" if name != "__main__" else _LOGGER_PREFIX
    else:
        logger_name = name
    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        _setup_logger(logger)
    return logger


def _setup_logger(logger):
    level = _get_level()

    if level != logging.NOTSET:
        logger.setLevel(level)
        handler = RichHandler(console=Console(stderr=True), show_path=True, markup=False)
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.propagate = False
    else:
        logger.addHandler(logging.NullHandler())


__all__ = ("get_logger",)
