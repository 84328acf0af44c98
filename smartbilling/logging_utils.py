"""Mini README: Application-wide logging helpers for the billing assistant.

Structure:
    * configure_root_logger - one-off root logger setup with a readable format.
    * get_logger - module logger factory that guarantees baseline configuration.

Usage:
    The ledger store, storage backends, USSD machine and FastAPI routes each
    declare ``LOGGER = get_logger(__name__)``; payments, splits and preference
    changes log at INFO, rejected requests at WARNING. The CLI calls
    ``configure_root_logger`` with ``BillingSettings.log_level`` before any
    ledger work so the level is honoured. The root handler is installed once
    per process, so uvicorn auto-reload does not duplicate log lines.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Attach a single stream handler to the root logger.

    Later calls only adjust the level, so an explicit level from settings still
    applies after modules have created their loggers at import time.
    """

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if isinstance(level, str):
        level = level.upper()
    if _LOGGER_INITIALISED:
        if level is not None:
            root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(logging.INFO if level is None else level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
