"""Async HTTP client for the drive API: auth, serialization and error raising."""

import json
import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import DriveConfig
from .errors import DriveError, classify, classify_transport_error, wrap
from .models import RequestDescriptor
from .query import QueryBuilder
from .retry import RetryController, RetryPolicy

logger = logging.getLogger(__name__)


def _is_json(response: httpx.Response) -> bool:
    return "json" in response.headers.get("content-type", "").lower()


def _has_content_type(headers: Mapping[str, str]) -> bool:
    return any(key.lower() == "content-type" for key in headers)


def _encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def _decode_error_body(response: httpx.Response) -> Any:
    try:
        if _is_json(response):
            return response.json()
        return response.text
    except (ValueError, UnicodeDecodeError):
        return f"HTTP {response.status_code}"


class DriveClient:
    """Drive API client with bearer auth, typed errors and bounded retry."""

    def __init__(
        self,
        config: DriveConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_controller: Optional[RetryController] = None,
    ):
        """Initialize drive client.

        Args:
            config: Drive configuration with base URL and credential.
            transport: Optional httpx transport, mainly for tests.
            retry_controller: Optional controller, defaults to one built
                from ``config.retry_policy``.
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._retry = retry_controller or RetryController(config.retry_policy)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared asynchronous HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(self.config.timeout),
                headers=self.config.default_headers,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _build_headers(self, descriptor: RequestDescriptor) -> Dict[str, str]:
        headers = {**self.config.auth_header, **descriptor.headers}
        if descriptor.has_body and not _has_content_type(headers):
            headers["Content-Type"] = "application/json"
        return headers

    def _build_url(self, descriptor: RequestDescriptor) -> str:
        return descriptor.path + QueryBuilder.from_mapping(descriptor.query).build_with_prefix()

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """Perform exactly one request/response cycle.

        Returns decoded JSON, text, or the unread ``httpx.Response`` when
        ``raw_response`` is set (the caller must close it).

        Raises:
            DriveError: classified HTTP error, network error, or wrapped
                internal error.
        """
        client = self._get_client()
        request_kwargs: Dict[str, Any] = {}
        if descriptor.timeout is not None:
            request_kwargs["timeout"] = descriptor.timeout

        request = client.build_request(
            descriptor.method,
            self._build_url(descriptor),
            headers=self._build_headers(descriptor),
            content=_encode_body(descriptor.body),
            **request_kwargs,
        )

        log_fields = {"method": descriptor.method, "path": descriptor.path}
        logger.debug("API request started", extra=log_fields)
        start = time.monotonic()

        try:
            response = await client.send(request, stream=descriptor.raw_response)
        except httpx.TransportError as e:
            error = classify_transport_error(e, descriptor.path, descriptor.method)
            self._log_failure(error, start, log_fields)
            raise error from e
        except httpx.HTTPError as e:
            error = wrap(e, f"API request to {descriptor.path} failed")
            self._log_failure(error, start, log_fields)
            raise error from e

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug(
            "API request completed",
            extra={**log_fields, "status_code": response.status_code, "duration_ms": duration_ms},
        )

        if not response.is_success:
            if descriptor.raw_response:
                try:
                    await response.aread()
                except httpx.TransportError as e:
                    error = classify_transport_error(e, descriptor.path, descriptor.method)
                    self._log_failure(error, start, log_fields)
                    raise error from e
                finally:
                    await response.aclose()
            error = classify(
                response.status_code,
                _decode_error_body(response),
                descriptor.path,
                headers=response.headers,
            )
            self._log_failure(error, start, log_fields)
            raise error

        if descriptor.raw_response:
            return response

        try:
            if _is_json(response):
                return response.json()
            return response.text
        except (ValueError, UnicodeDecodeError) as e:
            raise wrap(e, f"Failed to decode response from {descriptor.path}") from e

    def _log_failure(self, error: DriveError, start: float, log_fields: Dict[str, Any]) -> None:
        logger.error(
            "API request failed",
            extra={
                **log_fields,
                "error_code": error.code,
                "duration_ms": int((time.monotonic() - start) * 1000),
            },
        )

    async def send(
        self,
        descriptor: RequestDescriptor,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> Any:
        """Execute a descriptor under the retry controller."""
        controller = self._retry
        if retry_policy is not None:
            controller = RetryController(retry_policy)
        return await controller.execute(
            lambda: self.execute(descriptor),
            context={"method": descriptor.method, "path": descriptor.path},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        raw_response: bool = False,
        timeout: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> Any:
        """Build a descriptor for one logical call and send it with retry."""
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            headers=headers or {},
            query=query or {},
            body=body,
            timeout=timeout,
            raw_response=raw_response,
        )
        return await self.send(descriptor, retry_policy=retry_policy)

    async def get(self, path: str, query: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.request("GET", path, query=query, **kwargs)

    async def post(self, path: str, body: Any = None, query: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.request("POST", path, body=body, query=query, **kwargs)

    async def put(self, path: str, body: Any = None, query: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.request("PUT", path, body=body, query=query, **kwargs)

    async def patch(self, path: str, body: Any = None, query: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.request("PATCH", path, body=body, query=query, **kwargs)

    async def delete(self, path: str, query: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.request("DELETE", path, query=query, **kwargs)

    async def aclose(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
