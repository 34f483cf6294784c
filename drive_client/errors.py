"""Error taxonomy and HTTP failure classification for the drive client."""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Tag identifying which kind of failure a DriveError represents."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    API_ERROR = "api_error"
    NETWORK_ERROR = "network_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    FILE_OPERATION = "file_operation"
    CONFIGURATION = "configuration"
    INTERNAL_ERROR = "internal_error"


# Default (code, status_code) for each kind
_KIND_DEFAULTS: Dict[ErrorKind, tuple[str, int]] = {
    ErrorKind.VALIDATION: ("VALIDATION_ERROR", 400),
    ErrorKind.AUTHENTICATION: ("AUTHENTICATION_ERROR", 401),
    ErrorKind.AUTHORIZATION: ("AUTHORIZATION_ERROR", 403),
    ErrorKind.NOT_FOUND: ("NOT_FOUND", 404),
    ErrorKind.CONFLICT: ("CONFLICT", 409),
    ErrorKind.RATE_LIMIT: ("RATE_LIMIT_EXCEEDED", 429),
    ErrorKind.API_ERROR: ("API_ERROR", 500),
    ErrorKind.NETWORK_ERROR: ("NETWORK_ERROR", 503),
    ErrorKind.MISSING_REQUIRED_FIELD: ("MISSING_REQUIRED_FIELD", 400),
    ErrorKind.FILE_OPERATION: ("FILE_OPERATION_ERROR", 400),
    ErrorKind.CONFIGURATION: ("CONFIGURATION_ERROR", 500),
    ErrorKind.INTERNAL_ERROR: ("INTERNAL_ERROR", 500),
}

_STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTHENTICATION,
    403: ErrorKind.AUTHORIZATION,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    429: ErrorKind.RATE_LIMIT,
}

_ALWAYS_RETRYABLE = {ErrorKind.RATE_LIMIT, ErrorKind.NETWORK_ERROR}


def _compute_retryable(kind: ErrorKind, status_code: int) -> bool:
    if kind in _ALWAYS_RETRYABLE:
        return True
    if kind is ErrorKind.API_ERROR:
        return status_code >= 500 or status_code == 429
    return False


class DriveError(Exception):
    """Single exception type for every drive client failure.

    The ``kind`` tag says what went wrong; there are no per-kind
    subclasses. All attributes are read-only and ``retryable`` is
    decided once, here, from ``kind`` and ``status_code``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
        retry_after_seconds: Optional[int] = None,
    ):
        """
        Initialize a classified error.

        Args:
            kind (ErrorKind): Failure kind
            message (str): Human readable message
            status_code (Optional[int]): HTTP-like status, defaults per kind
            context (Optional[Mapping]): Additional error context
            code (Optional[str]): Fine-grained error code, defaults per kind
            retry_after_seconds (Optional[int]): Server supplied Retry-After
        """
        default_code, default_status = _KIND_DEFAULTS[kind]
        self._kind = kind
        self._message = message
        self._status_code = default_status if status_code is None else status_code
        self._code = code or default_code
        self._context = MappingProxyType(dict(context or {}))
        self._retry_after_seconds = retry_after_seconds
        self._retryable = _compute_retryable(kind, self._status_code)

        log_message = f"{kind.name}: {message}"
        if self._context:
            log_message += f" | Context: {dict(self._context)}"
        logger.debug(log_message)

        super().__init__(message)

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def code(self) -> str:
        return self._code

    @property
    def context(self) -> Mapping[str, Any]:
        return self._context

    @property
    def retryable(self) -> bool:
        return self._retryable

    @property
    def retry_after_seconds(self) -> Optional[int]:
        return self._retry_after_seconds

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-serializable dictionary."""
        data = {
            "kind": self._kind.value,
            "code": self._code,
            "message": self._message,
            "status_code": self._status_code,
            "context": dict(self._context),
            "retryable": self._retryable,
        }
        if self._retry_after_seconds is not None:
            data["retry_after_seconds"] = self._retry_after_seconds
        return data

    def __repr__(self) -> str:
        return (
            f"DriveError(kind={self._kind.name}, status_code={self._status_code}, "
            f"message={self._message!r})"
        )


def _parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    if not headers:
        return None
    value = headers.get("Retry-After") or headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        # HTTP-date form is not supported
        return None


def _extract_message(status_code: int, body: Any) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        return f"HTTP {status_code}"
    if isinstance(body, str) and body:
        return body
    return f"HTTP {status_code}"


def classify(
    status_code: int,
    body: Any,
    endpoint: str,
    headers: Optional[Mapping[str, str]] = None,
) -> DriveError:
    """
    Map a failed HTTP response to a DriveError.

    Args:
        status_code (int): HTTP status code of the response
        body (Any): Decoded JSON body, raw text, or None
        endpoint (str): Request path the failure came from
        headers (Optional[Mapping]): Response headers, used for Retry-After

    Returns:
        DriveError: Classified error for the status code
    """
    message = _extract_message(status_code, body)
    context: Dict[str, Any] = {"endpoint": endpoint, "status_code": status_code}
    if isinstance(body, dict) and body.get("errors"):
        context["errors"] = body["errors"]

    kind = _STATUS_KINDS.get(status_code, ErrorKind.API_ERROR)

    if kind is ErrorKind.RATE_LIMIT:
        retry_after = _parse_retry_after(headers)
        if message == f"HTTP {status_code}":
            message = (
                f"Rate limit exceeded. Retry after {retry_after} seconds"
                if retry_after
                else "Rate limit exceeded"
            )
        return DriveError(
            kind,
            message,
            status_code=status_code,
            context=context,
            retry_after_seconds=retry_after,
        )

    return DriveError(kind, message, status_code=status_code, context=context)


def classify_transport_error(
    exception: Exception,
    endpoint: str,
    method: Optional[str] = None,
) -> DriveError:
    """Turn a transport-level fault (no response received) into a network error."""
    context: Dict[str, Any] = {"endpoint": endpoint}
    if method:
        context["method"] = method

    if isinstance(exception, httpx.TimeoutException):
        timeout_type = "unknown"
        if isinstance(exception, httpx.ConnectTimeout):
            timeout_type = "connect"
        elif isinstance(exception, httpx.ReadTimeout):
            timeout_type = "read"
        elif isinstance(exception, httpx.WriteTimeout):
            timeout_type = "write"
        elif isinstance(exception, httpx.PoolTimeout):
            timeout_type = "pool"
        context["timeout_type"] = timeout_type
        return DriveError(
            ErrorKind.NETWORK_ERROR,
            f"Request timed out ({timeout_type})",
            context=context,
        )

    if isinstance(exception, httpx.ConnectError):
        return DriveError(
            ErrorKind.NETWORK_ERROR,
            f"Unable to connect to the server: {exception}",
            context=context,
        )

    return DriveError(
        ErrorKind.NETWORK_ERROR,
        f"Network request failed: {exception}" if str(exception) else "Network request failed",
        context=context,
    )


def network_error(message: str = "Network request failed", **context) -> DriveError:
    return DriveError(ErrorKind.NETWORK_ERROR, message, context=context)


def missing_required_field(field: str, **context) -> DriveError:
    return DriveError(
        ErrorKind.MISSING_REQUIRED_FIELD,
        f"Missing required field: {field}",
        context={"field": field, **context},
    )


def file_operation_error(message: str, code: Optional[str] = None, **context) -> DriveError:
    return DriveError(ErrorKind.FILE_OPERATION, message, context=context, code=code)


def configuration_error(message: str, **context) -> DriveError:
    return DriveError(ErrorKind.CONFIGURATION, message, context=context)


def wrap(value: Any, default_message: str = "An error occurred") -> DriveError:
    """
    Ensure a value is a DriveError.

    Already classified errors are returned unchanged, so wrapping twice
    gives the same object back.

    Args:
        value (Any): Exception, message string, or anything else
        default_message (str): Message used when the value carries none

    Returns:
        DriveError: The original error, or an INTERNAL_ERROR around it
    """
    if isinstance(value, DriveError):
        return value

    if isinstance(value, BaseException):
        return DriveError(
            ErrorKind.INTERNAL_ERROR,
            str(value) or default_message,
            context={"original_error": type(value).__name__},
        )

    if isinstance(value, str) and value:
        return DriveError(ErrorKind.INTERNAL_ERROR, value)

    return DriveError(ErrorKind.INTERNAL_ERROR, default_message)


def is_retryable(error: Any) -> bool:
    """Return the stored retryable verdict, False for anything unclassified."""
    if isinstance(error, DriveError):
        return error.retryable
    return False
