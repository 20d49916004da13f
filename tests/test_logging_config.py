import logging
import sys

import pytest
import structlog

from orderbook.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_routes_through_structlog(restore_root_logger):
    setup_logging("debug")

    [handler] = restore_root_logger.handlers
    assert restore_root_logger.level == logging.DEBUG
    assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    assert handler.stream is sys.stderr
    assert logging.getLogger("httpx").level == logging.WARNING


def test_json_rendering_by_default(restore_root_logger):
    setup_logging("INFO")

    record = logging.LogRecord("orderbook.test", logging.INFO, __file__, 1, "Listing cancelled", None, None)
    output = restore_root_logger.handlers[0].format(record)

    assert '"event": "Listing cancelled"' in output
    assert '"level": "info"' in output
