"""Tests for the error taxonomy and HTTP failure classification."""

import httpx
import pytest

from drive_client.errors import (
    DriveError,
    ErrorKind,
    classify,
    classify_transport_error,
    is_retryable,
    missing_required_field,
    network_error,
    wrap,
)


class TestClassify:
    """Status code to error kind mapping."""

    @pytest.mark.parametrize(
        "status_code, kind, retryable",
        [
            (400, ErrorKind.VALIDATION, False),
            (401, ErrorKind.AUTHENTICATION, False),
            (403, ErrorKind.AUTHORIZATION, False),
            (404, ErrorKind.NOT_FOUND, False),
            (409, ErrorKind.CONFLICT, False),
            (429, ErrorKind.RATE_LIMIT, True),
            (500, ErrorKind.API_ERROR, True),
            (502, ErrorKind.API_ERROR, True),
            (503, ErrorKind.API_ERROR, True),
            (504, ErrorKind.API_ERROR, True),
        ],
    )
    def test_status_table(self, status_code, kind, retryable):
        error = classify(status_code, {"message": "boom"}, "/api/v1/files")

        assert error.kind is kind
        assert error.retryable is retryable
        assert error.status_code == status_code

    def test_unlisted_client_status_is_not_retryable(self):
        error = classify(418, "teapot", "/api/v1/files")

        assert error.kind is ErrorKind.API_ERROR
        assert error.retryable is False

    def test_unlisted_server_status_is_retryable(self):
        error = classify(507, None, "/api/v1/files")

        assert error.kind is ErrorKind.API_ERROR
        assert error.retryable is True

    def test_message_from_json_body(self):
        error = classify(400, {"message": "Name is invalid"}, "/api/v1/folders")
        assert error.message == "Name is invalid"

    def test_message_from_text_body(self):
        error = classify(404, "no such file", "/api/v1/files/abc")
        assert error.message == "no such file"

    def test_generic_message_when_body_empty(self):
        assert classify(500, "", "/x").message == "HTTP 500"
        assert classify(500, None, "/x").message == "HTTP 500"
        assert classify(404, {"code": "NOT_FOUND"}, "/x").message == "HTTP 404"

    def test_context_has_endpoint_status_and_errors(self):
        body = {"message": "Invalid", "errors": {"name": ["is required"]}}
        error = classify(400, body, "/api/v1/folders")

        assert error.context["endpoint"] == "/api/v1/folders"
        assert error.context["status_code"] == 400
        assert error.context["errors"] == {"name": ["is required"]}

    def test_context_without_errors(self):
        error = classify(403, {"message": "nope"}, "/api/v1/trash")
        assert "errors" not in error.context

    def test_rate_limit_retry_after_header(self):
        error = classify(429, {"message": "slow down"}, "/api/v1/files", headers={"Retry-After": "30"})

        assert error.kind is ErrorKind.RATE_LIMIT
        assert error.retry_after_seconds == 30
        assert error.message == "slow down"

    def test_rate_limit_default_message(self):
        error = classify(429, None, "/api/v1/files", headers=httpx.Headers({"retry-after": "5"}))

        assert error.retry_after_seconds == 5
        assert error.message == "Rate limit exceeded. Retry after 5 seconds"

    def test_rate_limit_unparseable_retry_after(self):
        error = classify(429, None, "/x", headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})

        assert error.retry_after_seconds is None
        assert error.message == "Rate limit exceeded"


class TestDriveError:
    """Behavior of the single tagged error type."""

    def test_defaults_per_kind(self):
        error = DriveError(ErrorKind.NETWORK_ERROR, "down")

        assert error.status_code == 503
        assert error.code == "NETWORK_ERROR"
        assert error.retryable is True
        assert str(error) == "down"

    def test_attributes_are_read_only(self):
        error = classify(404, None, "/x")

        with pytest.raises(AttributeError):
            error.kind = ErrorKind.CONFLICT
        with pytest.raises(AttributeError):
            error.retryable = True
        with pytest.raises(TypeError):
            error.context["endpoint"] = "/y"

    def test_to_dict(self):
        error = classify(429, None, "/x", headers={"Retry-After": "2"})
        data = error.to_dict()

        assert data["kind"] == "rate_limit"
        assert data["code"] == "RATE_LIMIT_EXCEEDED"
        assert data["status_code"] == 429
        assert data["retryable"] is True
        assert data["retry_after_seconds"] == 2
        assert data["context"] == {"endpoint": "/x", "status_code": 429}

    def test_missing_required_field(self):
        error = missing_required_field("emails")

        assert error.kind is ErrorKind.MISSING_REQUIRED_FIELD
        assert error.context["field"] == "emails"
        assert error.retryable is False

    def test_network_error_factory(self):
        error = network_error("Upload timeout", timeout=5)
        assert error.kind is ErrorKind.NETWORK_ERROR
        assert error.context["timeout"] == 5


class TestWrap:
    """wrap() and is_retryable()."""

    def test_wrap_returns_classified_error_unchanged(self):
        error = classify(503, None, "/x")

        assert wrap(error) is error
        assert wrap(wrap(error)) is error
        assert wrap(error).retryable is True

    def test_wrap_is_idempotent_for_exceptions(self):
        wrapped = wrap(ValueError("bad value"))
        assert wrap(wrapped) is wrapped

    def test_wrap_exception(self):
        error = wrap(KeyError("k"), "lookup failed")

        assert error.kind is ErrorKind.INTERNAL_ERROR
        assert error.context["original_error"] == "KeyError"
        assert error.retryable is False

    def test_wrap_exception_without_message_uses_default(self):
        error = wrap(RuntimeError(), "API request to /x failed")
        assert error.message == "API request to /x failed"

    def test_wrap_string_and_other_values(self):
        assert wrap("plain message").message == "plain message"
        assert wrap(42, "fallback").message == "fallback"

    def test_is_retryable(self):
        assert is_retryable(classify(500, None, "/x")) is True
        assert is_retryable(classify(400, None, "/x")) is False
        assert is_retryable(ValueError("x")) is False
        assert is_retryable(None) is False


class TestTransportClassification:
    """Transport faults become network errors."""

    def test_connect_error(self):
        error = classify_transport_error(httpx.ConnectError("refused"), "/api/v1/files", "GET")

        assert error.kind is ErrorKind.NETWORK_ERROR
        assert error.retryable is True
        assert error.context["endpoint"] == "/api/v1/files"
        assert error.context["method"] == "GET"

    @pytest.mark.parametrize(
        "exception, timeout_type",
        [
            (httpx.ConnectTimeout("t"), "connect"),
            (httpx.ReadTimeout("t"), "read"),
            (httpx.WriteTimeout("t"), "write"),
            (httpx.PoolTimeout("t"), "pool"),
        ],
    )
    def test_timeouts(self, exception, timeout_type):
        error = classify_transport_error(exception, "/x")

        assert error.kind is ErrorKind.NETWORK_ERROR
        assert error.context["timeout_type"] == timeout_type
