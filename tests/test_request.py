import uuid

import jwt
import pytest

from mindhub.request import (
    CONTEXT_KEY,
    ContextError,
    RequestContext,
    apply_version_header,
    context_correlation_id,
    get_authorization_header,
    get_context_auth_token,
    get_correlation_id_header,
    get_header,
    get_organisation_id,
    get_user_id,
    request_context,
    with_request_context,
)


def _ctx_with_token(claims):
    encoded = jwt.encode(claims, "secret", algorithm="HS256")
    request = RequestContext(headers={"Authorization": f"Bearer {encoded}"})
    return with_request_context({}, request)


def test_get_header_known():
    headers = {"widget": "gadget"}
    assert get_header("widget", headers) == "gadget"


def test_get_header_unknown():
    headers = {"widget": "gadget"}
    assert get_header("sprocket", headers) == ""


def test_get_header_is_case_insensitive_and_takes_first_value():
    headers = {"X-Thing": ["one", "two"]}
    assert get_header("x-thing", headers) == "one"


def test_correlation_id_header():
    assert get_correlation_id_header({"X-Correlation-Id": "cid-1"}) == "cid-1"
    assert get_correlation_id_header({}) == ""


def test_authorization_header():
    assert get_authorization_header({"Authorization": "Bearer token"}) == "Bearer token"
    assert get_authorization_header({}) == ""


def test_request_context_valid():
    request = RequestContext()
    ctx = with_request_context({}, request)
    assert request_context(ctx) is request


def test_request_context_missing():
    with pytest.raises(ContextError) as exc_info:
        request_context({})
    assert str(exc_info.value) == "could not retrieve gin.Context from context"


def test_request_context_wrong_type():
    with pytest.raises(ContextError) as exc_info:
        request_context({CONTEXT_KEY: "not a gin type"})
    assert str(exc_info.value) == "gin.Context has wrong type"


def test_with_request_context_leaves_original_untouched():
    original = {"other": 1}
    ctx = with_request_context(original, RequestContext())
    assert CONTEXT_KEY not in original
    assert ctx["other"] == 1


def test_context_correlation_id_from_header():
    cid = str(uuid.uuid4())
    ctx = with_request_context({}, RequestContext(headers={"X-Correlation-Id": cid}))
    assert context_correlation_id(ctx) == cid


def test_context_correlation_id_generated_when_absent():
    ctx = with_request_context({}, RequestContext(headers={}))
    first = context_correlation_id(ctx)
    second = context_correlation_id(ctx)
    assert uuid.UUID(first).version == 1
    assert first != second


def test_context_correlation_id_without_context():
    with pytest.raises(ContextError):
        context_correlation_id({})


def test_apply_version_header():
    request = RequestContext()
    apply_version_header(request, "1.2.3")
    assert request.response_headers == {"x-mind-api-version": "1.2.3"}


def test_get_context_auth_token():
    request = RequestContext(headers={"Authorization": "Bearer token"})
    assert get_context_auth_token(request) == "token"


def test_get_context_auth_token_missing_header():
    with pytest.raises(ContextError) as exc_info:
        get_context_auth_token(RequestContext())
    assert str(exc_info.value) == "no authorization header present in request"


def test_get_context_auth_token_without_scheme_separator():
    request = RequestContext(headers={"Authorization": "Bearer"})
    with pytest.raises(ContextError):
        get_context_auth_token(request)


def test_get_user_id_valid():
    ctx = _ctx_with_token({"sub": "auth0|abc123"})
    assert get_user_id(ctx) == "abc123"


def test_get_user_id_without_context():
    with pytest.raises(ContextError) as exc_info:
        get_user_id({})
    assert str(exc_info.value) == (
        "no auth token in context could not retrieve gin.Context from context"
    )


def test_get_user_id_invalid_subject():
    ctx = _ctx_with_token({"sub": "invalid user ID"})
    with pytest.raises(ContextError) as exc_info:
        get_user_id(ctx)
    assert str(exc_info.value) == "token user ID is an invalid Auth0 user ID"


def test_get_user_id_unreadable_token():
    ctx = with_request_context({}, RequestContext(headers={"Authorization": "Bearer token"}))
    with pytest.raises(ContextError) as exc_info:
        get_user_id(ctx)
    assert str(exc_info.value) == "no user claims in token invalid token"


def test_get_organisation_id_valid():
    ctx = _ctx_with_token({"scope": "alpha beta read:organisation:org-123"})
    assert get_organisation_id(ctx) == "org-123"


def test_get_organisation_id_without_context():
    with pytest.raises(ContextError) as exc_info:
        get_organisation_id({})
    assert str(exc_info.value) == (
        "no auth token in context could not retrieve gin.Context from context"
    )


def test_get_organisation_id_missing_scope():
    ctx = _ctx_with_token({"scope": "alpha beta gamma"})
    with pytest.raises(ContextError) as exc_info:
        get_organisation_id(ctx)
    assert str(exc_info.value) == (
        "no organisation scope claim in token no organisation scopes present"
    )