"""Structured loggers that carry request fields on every record."""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Mapping
from typing import Any

from .request import ContextError, context_correlation_id, get_organisation_id

API_VERSION_KEY = "api_version"
API_ENVIRONMENT_KEY = "api_environment"
API_CMS_MAPPING_KEY = "api_cms_mapping"
CORRELATION_ID_KEY = "correlation_id"
ORGANISATION_ID_KEY = "organisation_id"
QUERY_KEY = "query"
COURSE_ID_KEY = "course_id"
SESSION_ID_KEY = "session_id"
STEP_ID_KEY = "step_id"
USER_ID_KEY = "user_id"
PK_KEY = "pk"
SK_KEY = "sk"
REQUEST_DURATION_KEY = "request_duration"
HTTP_METHOD_KEY = "http_method"
HTTP_STATUS_KEY = "http_status"
HTTP_CLIENT_NAME_KEY = "http_client_name"
HTTP_URL_KEY = "http_url"
ERROR_KEY = "error"

LOGGER_NAME = "mindhub"


class _FieldFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = getattr(record, "fields", None) or {}
        if fields:
            text += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return text


class _StdoutHandler(logging.Handler):
    """Writes to whatever sys.stdout is at the time of each record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stdout.write(self.format(record) + "\n")
            sys.stdout.flush()
        except Exception:
            self.handleError(record)


class _FieldLogger(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.pop("extra", None) or {})
        extra["fields"] = {**self.extra, **extra.pop("fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_fields(self, fields: Mapping[str, Any]) -> _FieldLogger:
        return _FieldLogger(self.logger, {**self.extra, **fields})


def _base_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, _StdoutHandler) for h in logger.handlers):
        handler = _StdoutHandler()
        handler.setFormatter(
            _FieldFormatter(
                "%(asctime)s %(levelname)s %(filename)s:%(lineno)d %(message)s"
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def new_logger() -> _FieldLogger:
    """Return a logger tagged with a fresh correlation ID."""
    return _FieldLogger(_base_logger(), {CORRELATION_ID_KEY: str(uuid.uuid1())})


def logger_from_context(ctx: Mapping[Any, Any]) -> _FieldLogger:
    """Return a logger tagged with the request's correlation and organisation IDs."""
    log = new_logger()

    try:
        correlation_id = context_correlation_id(ctx)
    except ContextError as exc:
        log.with_fields({ERROR_KEY: str(exc)}).error(
            "Error occurred getting context correlation ID"
        )
        correlation_id = ""

    try:
        organisation_id = get_organisation_id(ctx)
    except ContextError as exc:
        log.with_fields({ERROR_KEY: str(exc)}).error(
            "Error occurred getting context organisation ID"
        )
        organisation_id = ""

    return log.with_fields(
        {CORRELATION_ID_KEY: correlation_id, ORGANISATION_ID_KEY: organisation_id}
    )