"""Shared fixtures: a drive client wired to an in-memory transport."""

import httpx
import pytest

from drive_client.api import DriveAPI
from drive_client.client import DriveClient
from drive_client.config import DriveConfig
from drive_client.retry import RetryController, RetryPolicy
from drive_client.upload import FileUploader


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class RecordingHandler:
    """MockTransport handler replaying canned responses and keeping requests."""

    def __init__(self, *responses):
        self.responses = list(responses) or [httpx.Response(200, json={"ok": True})]
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        # Fresh copy per request; a Response is bound to one request
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    @property
    def last(self):
        return self.requests[-1]


class FailingStream(httpx.AsyncByteStream):
    """Body that yields some bytes, then drops the connection."""

    async def __aiter__(self):
        yield b"abc"
        raise httpx.ReadError("connection reset")


@pytest.fixture
def drive_config():
    return DriveConfig(
        api_key="test-key",
        base_url="https://drive.test/",
        retry_policy=RetryPolicy(max_retries=3, base_delay=1.0, jitter=False),
    )


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def make_client(drive_config, fake_sleep):
    """Build a DriveClient whose transport is the given handler."""
    def factory(handler, config=None):
        config = config or drive_config
        return DriveClient(
            config,
            transport=httpx.MockTransport(handler),
            retry_controller=RetryController(config.retry_policy, sleep=fake_sleep),
        )
    return factory


@pytest.fixture
def make_api(drive_config, make_client):
    """Build a DriveAPI whose client and uploader share one handler."""
    def factory(handler):
        client = make_client(handler)
        uploader = FileUploader(drive_config, transport=httpx.MockTransport(handler))
        return DriveAPI(client, uploader)
    return factory
