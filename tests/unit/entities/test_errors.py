import httpx
import pytest
from google.genai import errors as genai_errors

from app.entities.errors import (
    ErrorKind,
    NoResultURIError,
    UpstreamError,
    classify_status_code,
)


@pytest.mark.parametrize(
    ("code", "kind"),
    [
        (401, ErrorKind.AUTH_INVALID),
        (403, ErrorKind.AUTH_INVALID),
        (404, ErrorKind.NOT_FOUND),
        (429, ErrorKind.QUOTA_EXHAUSTED),
        (400, ErrorKind.REQUEST_REJECTED),
        (503, ErrorKind.UNAVAILABLE),
        (None, ErrorKind.UNKNOWN),
    ],
)
def test_classify_status_code(code, kind):
    assert classify_status_code(code) is kind


def test_not_found_can_mean_invalid_key():
    assert classify_status_code(404, not_found_is_auth=True) is ErrorKind.AUTH_INVALID


def test_from_api_error_keeps_provider_message():
    error = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
    )

    upstream = UpstreamError.from_exception(error)

    assert upstream.kind is ErrorKind.QUOTA_EXHAUSTED
    assert upstream.status_code == 429
    assert upstream.message == "Quota exceeded"
    assert upstream.is_auth_error is False


def test_from_transport_error_is_transport_kind():
    error = httpx.ConnectError("connection refused")

    upstream = UpstreamError.from_exception(error)

    assert upstream.kind is ErrorKind.TRANSPORT
    assert "connection refused" in upstream.message


def test_no_result_error_includes_reason():
    error = NoResultURIError("operations/1", "Safety filter triggered")

    assert "no URI returned" in str(error)
    assert "Safety filter triggered" in str(error)
