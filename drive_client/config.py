"""Drive client configuration."""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from .retry import RetryPolicy, DEFAULT_RETRY

DEFAULT_BASE_URL = "https://drive.futurixai.com"
DEFAULT_USER_AGENT = "drive-tools/1.0"


@dataclass(frozen=True)
class DriveConfig:
    """Connection, credential and retry settings for the drive client.

    Built once (usually from ``Settings.to_drive_config``) and passed to
    the client and uploader constructors; nothing mutates it afterwards.
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL

    # Timeout settings (in seconds)
    timeout: float = 30.0
    upload_timeout: float = 120.0

    # 100MB
    max_upload_size: int = 100 * 1024 * 1024

    retry_policy: RetryPolicy = DEFAULT_RETRY

    default_headers: Optional[Dict[str, str]] = None

    def __post_init__(self):
        """Initialize default values."""
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.default_headers is None:
            object.__setattr__(
                self,
                "default_headers",
                {
                    "Accept": "application/json",
                    "User-Agent": DEFAULT_USER_AGENT,
                },
            )

    @property
    def auth_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def with_base_url(self, base_url: str) -> "DriveConfig":
        """Create a new config with different base URL."""
        return replace(self, base_url=base_url)

    def with_headers(self, headers: Dict[str, str]) -> "DriveConfig":
        """Create a new config with additional headers."""
        new_headers = dict(self.default_headers or {})
        new_headers.update(headers)
        return replace(self, default_headers=new_headers)

    def with_retry_policy(self, retry_policy: RetryPolicy) -> "DriveConfig":
        """Create a new config with different retry configuration."""
        return replace(self, retry_policy=retry_policy)
