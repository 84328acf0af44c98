"""Mini README: Tests for the shared logging helpers.

Module loggers are created at import time, so a level chosen later from
settings must still reach the root logger without adding handlers.
"""

from __future__ import annotations

import logging

from smartbilling.logging_utils import configure_root_logger, get_logger


def test_configured_level_applies_after_loggers_exist() -> None:
    root_logger = logging.getLogger()
    original_level = root_logger.level
    get_logger("smartbilling.ledger.store")
    handler_count = len(root_logger.handlers)

    try:
        configure_root_logger("debug")
        assert root_logger.level == logging.DEBUG
        configure_root_logger(logging.WARNING)
        assert root_logger.level == logging.WARNING
        configure_root_logger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == handler_count
    finally:
        root_logger.setLevel(original_level)
