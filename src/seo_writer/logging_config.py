# -*- coding: utf-8 -*-
"""
Logging setup: JSON lines (default) or plain text, with request and
generation session ids attached to every record.
"""
import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from .config import config
from .middleware import get_request_id, get_session_id

# Record attribute -> context getter
CONTEXT_FIELDS = {
    "request_id": get_request_id,
    "session_id": get_session_id,
}

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s/%(session_id)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ["httpx", "httpcore", "uvicorn.access"]


class ContextFilter(logging.Filter):
    """Copy the context variables onto each record ("-" when unset)."""

    def filter(self, record):
        for name, getter in CONTEXT_FIELDS.items():
            setattr(record, name, getter() or "-")
        return True


class ArticleJsonFormatter(JsonFormatter):
    """JSON formatter emitting level, logger name and context ids."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        for name in CONTEXT_FIELDS:
            log_record[name] = getattr(record, name, "-")


def build_formatter(json_output: bool) -> logging.Formatter:
    """Formatter for the root handler."""
    if not json_output:
        return logging.Formatter(TEXT_FORMAT)
    return ArticleJsonFormatter(
        fmt="%(timestamp)s %(level)s %(name)s %(request_id)s %(session_id)s %(message)s",
        rename_fields={"timestamp": "@timestamp", "levelname": "level"},
    )


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """
    Replace the root handlers with a single stdout handler.

    Args:
        level: Log level name. Defaults to config.LOG_LEVEL.
        json_output: JSON lines or plain text. Defaults to config.LOG_JSON.

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level or config.LOG_LEVEL))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(config.LOG_JSON if json_output is None else json_output))
    handler.addFilter(ContextFilter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
