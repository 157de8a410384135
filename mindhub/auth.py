"""Reading user claims and organisation scopes from bearer tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jwt

SCOPE_DELIMITER = " "
ORG_SCOPE_DELIMITER = ":"
ORG_SCOPE_PREFIX = "read:organisation"


class TokenError(ValueError):
    """Raised when a token or its claims cannot be read."""


@dataclass(frozen=True)
class CustomClaims:
    """The claims carried by a user's access token."""

    scope: str = ""
    subject: str = ""
    audience: str = ""
    issuer: str = ""
    id: str = ""
    expires_at: int = 0
    issued_at: int = 0
    not_before: int = 0

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> CustomClaims:
        return cls(
            scope=_text(payload, "scope"),
            subject=_text(payload, "sub"),
            audience=_text(payload, "aud"),
            issuer=_text(payload, "iss"),
            id=_text(payload, "jti"),
            expires_at=_number(payload, "exp"),
            issued_at=_number(payload, "iat"),
            not_before=_number(payload, "nbf"),
        )


def _text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key, "")
    if not isinstance(value, str):
        raise TokenError("invalid claims")
    return value


def _number(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TokenError("invalid claims")
    return int(value)


def get_user_claims(token: str) -> CustomClaims:
    """Decode the claims of a token without verifying its signature."""
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        raise TokenError("invalid token") from exc
    if not isinstance(payload, dict):
        raise TokenError("invalid claims")
    return CustomClaims._from_payload(payload)


def get_token_organisation_id(token: str) -> str:
    """Return the organisation ID named by the first organisation scope."""
    try:
        claims = get_user_claims(token)
    except TokenError as exc:
        raise TokenError(f"no user claims in token {exc}") from exc

    for scope in claims.scope.split(SCOPE_DELIMITER):
        if not scope.startswith(ORG_SCOPE_PREFIX):
            continue
        parts = scope.split(ORG_SCOPE_DELIMITER)
        if len(parts) != 3:
            raise TokenError("invalid organisation scope")
        return parts[2]

    raise TokenError("no organisation scopes present")