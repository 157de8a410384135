"""Per-request state carried in a context mapping, and helpers to read it."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .auth import TokenError, get_token_organisation_id, get_user_claims

CORRELATION_ID_HEADER = "X-Correlation-Id"
AUTHORIZATION_HEADER = "Authorization"
VERSION_HEADER = "x-mind-api-version"
CONTEXT_KEY = "mind-hub-api:request-context"

_SUBJECT_DELIMITER = "|"
_AUTH_DELIMITER = " "


class ContextError(LookupError):
    """Raised when the request context lacks what a caller needs."""


@dataclass
class RequestContext:
    """The incoming request's headers and the headers set on its response."""

    headers: Mapping[str, Any] = field(default_factory=dict)
    path: str = "/"
    response_headers: dict[str, str] = field(default_factory=dict)

    def set_response_header(self, key: str, value: str) -> None:
        self.response_headers[key] = value


def get_header(key: str, headers: Mapping[str, Any]) -> str:
    """Return the first value of a header, matched case-insensitively, or ''."""
    wanted = key.lower()
    value = next((v for k, v in headers.items() if k.lower() == wanted), "")
    if isinstance(value, (list, tuple)):
        return value[0] if value else ""
    return value


def get_correlation_id_header(headers: Mapping[str, Any]) -> str:
    return get_header(CORRELATION_ID_HEADER, headers)


def get_authorization_header(headers: Mapping[str, Any]) -> str:
    return get_header(AUTHORIZATION_HEADER, headers)


def with_request_context(ctx: Mapping[Any, Any], request: RequestContext) -> dict[Any, Any]:
    """Return a new context holding the given request."""
    return {**ctx, CONTEXT_KEY: request}


def request_context(ctx: Mapping[Any, Any]) -> RequestContext:
    """Return the request stored in a context."""
    value = ctx.get(CONTEXT_KEY)
    if value is None:
        raise ContextError("could not retrieve gin.Context from context")
    if not isinstance(value, RequestContext):
        raise ContextError("gin.Context has wrong type")
    return value


def apply_version_header(request: RequestContext, version: str) -> None:
    """Set the API version header on the response."""
    request.set_response_header(VERSION_HEADER, version)


def context_correlation_id(ctx: Mapping[Any, Any]) -> str:
    """Return the request's correlation ID, or a fresh one if it has none."""
    request = request_context(ctx)
    correlation_id = get_correlation_id_header(request.headers)
    return correlation_id or str(uuid.uuid1())


def get_context_auth_token(request: RequestContext) -> str:
    """Return the token that follows the scheme in the Authorization header."""
    header = get_authorization_header(request.headers)
    if header == "":
        raise ContextError("no authorization header present in request")
    parts = header.split(_AUTH_DELIMITER)
    if len(parts) < 2:
        raise ContextError("malformed authorization header")
    return parts[1]


def _auth_token_from_context(ctx: Mapping[Any, Any]) -> str:
    return get_context_auth_token(request_context(ctx))


def get_user_id(ctx: Mapping[Any, Any]) -> str:
    """Return the user ID from the subject of the request's token."""
    try:
        token = _auth_token_from_context(ctx)
    except ContextError as exc:
        raise ContextError(f"no auth token in context {exc}") from exc

    try:
        claims = get_user_claims(token)
    except TokenError as exc:
        raise ContextError(f"no user claims in token {exc}") from exc

    subject = claims.subject.split(_SUBJECT_DELIMITER)
    if len(subject) < 2:
        raise ContextError("token user ID is an invalid Auth0 user ID")
    return subject[1]


def get_organisation_id(ctx: Mapping[Any, Any]) -> str:
    """Return the organisation ID from the scopes of the request's token."""
    try:
        token = _auth_token_from_context(ctx)
    except ContextError as exc:
        raise ContextError(f"no auth token in context {exc}") from exc

    try:
        return get_token_organisation_id(token)
    except TokenError as exc:
        raise ContextError(f"no organisation scope claim in token {exc}") from exc