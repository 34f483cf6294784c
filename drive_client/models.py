"""Request and upload descriptors shared by the client and the uploader."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .errors import classify


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable snapshot of one planned API request."""

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    timeout: Optional[float] = None
    raw_response: bool = False

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))

    @property
    def has_body(self) -> bool:
        return self.body is not None


@dataclass(frozen=True)
class UploadDescriptor:
    """A local file and the form fields to send along with it."""

    file_path: Union[str, Path]
    endpoint: str
    form_fields: Mapping[str, Optional[str]] = field(default_factory=dict)
    timeout: float = 120.0

    def __post_init__(self):
        object.__setattr__(self, "form_fields", MappingProxyType(dict(self.form_fields)))


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload.

    A non-2xx response does not raise; it comes back with
    ``success=False`` and the raw response text in ``error``. Call
    ``unwrap`` to get the data or the classified error raised.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    def unwrap(self, endpoint: str = "") -> Any:
        """Return the uploaded data, or raise the failure as a DriveError."""
        if self.success:
            return self.data

        body: Any = self.error
        if self.error:
            try:
                body = json.loads(self.error)
            except ValueError:
                body = self.error
        raise classify(self.status_code or 500, body, endpoint)
