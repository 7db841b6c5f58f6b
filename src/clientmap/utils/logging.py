"""
Structured logging for clientmap, built on structlog.

Retrieval logs carry request URLs, and a published spreadsheet link is as
good as read access to the client list. Document ids in logged strings are
therefore masked before rendering.
"""

import logging
import re
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Spreadsheet and Drive document ids, raw or percent-encoded in a relay URL
_DOCUMENT_ID = re.compile(r"(/|%2F)d(/|%2F)(e(?:/|%2F))?([A-Za-z0-9_-]{4})[A-Za-z0-9_-]+")
_QUERY_ID = re.compile(r"([?&]id=|%3Fid%3D|%26id%3D)([A-Za-z0-9_-]{4})[A-Za-z0-9_-]+")

# Libraries whose debug output would repeat every request URL unmasked
_NOISY_LOGGERS = ("urllib3", "requests")


def mask_document_ids(text: str) -> str:
    """Keep the first four characters of each document id, mask the rest."""
    text = _DOCUMENT_ID.sub(lambda m: f"{m[1]}d{m[2]}{m[3] or ''}{m[4]}***", text)
    return _QUERY_ID.sub(lambda m: f"{m[1]}{m[2]}***", text)


def _mask_event(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = mask_document_ids(value)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Loggers are not cached, so each one writes to whatever sys.stdout is
    when it is created. The CLI test runner swaps stdout per invocation.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON lines instead of the console format.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _mask_event,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger for a module, usually called with ``__name__``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind values to every log line emitted inside the block.

    Example:
        with log_context(run_id="3f2a"):
            log.info("Retrieved payload", strategy="direct")
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
