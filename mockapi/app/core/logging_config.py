"""
Logging configuration for the ``mockapi`` logger hierarchy.

Every module logs through ``logging.getLogger(__name__)``, so all
application records pass through the ``mockapi`` logger.  HTTP error
responses are logged on ``mockapi.errors`` (see ``api.errors``) and
get their own level, which lets a deployment silence 4xx warnings
without hiding service logs.

``setup_logging`` is idempotent: handlers are named and only added
once, so calling ``create_app`` repeatedly (as tests do) does not
duplicate output.
"""

import logging
from pathlib import Path

from .config import Settings, settings

LOGGER_NAME = "mockapi"
ERRORS_LOGGER_NAME = "mockapi.errors"

CONSOLE_HANDLER = "mockapi.console"
FILE_HANDLER = "mockapi.file"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    value = getattr(logging, str(name).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def setup_logging(config: Settings = settings) -> logging.Logger:
    """Configure the ``mockapi`` loggers from ``config``.

    Parameters
    ----------
    config : Settings
        ``log_level`` sets the level of the ``mockapi`` logger,
        ``error_log_level`` the level of ``mockapi.errors``.  When
        ``log_file`` is set, records are also written to that file.

    Returns
    -------
    logging.Logger
        The configured ``mockapi`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level(config.log_level))
    logging.getLogger(ERRORS_LOGGER_NAME).setLevel(_level(config.error_log_level))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # A configured root logger (uvicorn --log-config, pytest) already
    # receives our records through propagation.
    if not logging.getLogger().handlers and not _has_handler(logger, CONSOLE_HANDLER):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.log_file and not _has_handler(logger, FILE_HANDLER):
        file_handler = logging.FileHandler(Path(config.log_file).resolve(), encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
