"""
Logging setup for the orderbook client.

All modules log through stdlib ``logging``; this routes those records through
structlog so operation failures come out as one JSON line each (or as
colored console output when debugging). Output goes to stderr so CLI results
on stdout stay clean.
"""

import logging
import sys
from typing import List, Optional

import structlog

from .config import settings


QUIET_LOGGERS = ("httpcore", "httpx")


def _pre_chain() -> List[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Install the structlog formatter on the root logger.

    Args:
        log_level: Override log level (default: settings.log_level)
        json_logs: Force JSON (True) or console (False) rendering. Defaults to
            console at DEBUG level and JSON otherwise.
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    pre_chain = _pre_chain()
    if json_logs:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
