"""Tests for multipart file uploads."""

import asyncio

import httpx
import pytest

from conftest import RecordingHandler
from drive_client.config import DriveConfig
from drive_client.errors import DriveError, ErrorKind
from drive_client.models import UploadDescriptor, UploadResult
from drive_client.upload import FileUploader, validate_file_path


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "report.txt"
    path.write_bytes(b"quarterly numbers")
    return path


def make_uploader(handler, **config_overrides):
    config = DriveConfig(api_key="test-key", base_url="https://drive.test", **config_overrides)
    return FileUploader(config, transport=httpx.MockTransport(handler))


class TestValidateFilePath:
    """Local checks made before any network traffic."""

    def test_existing_file(self, sample_file):
        assert validate_file_path(sample_file) == sample_file

    def test_relative_path_resolves_against_cwd(self, sample_file, monkeypatch):
        monkeypatch.chdir(sample_file.parent)
        assert validate_file_path("report.txt") == sample_file

    def test_missing_file(self, tmp_path):
        with pytest.raises(DriveError) as exc_info:
            validate_file_path(tmp_path / "nope.txt")

        assert exc_info.value.kind is ErrorKind.FILE_OPERATION
        assert exc_info.value.code == "FILE_NOT_FOUND"

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(DriveError) as exc_info:
            validate_file_path(tmp_path)
        assert exc_info.value.code == "INVALID_FILE_TYPE"

    def test_file_too_large(self, sample_file):
        with pytest.raises(DriveError) as exc_info:
            validate_file_path(sample_file, max_size=4)

        assert exc_info.value.code == "FILE_TOO_LARGE"
        assert exc_info.value.context["size"] == len(b"quarterly numbers")
        assert exc_info.value.context["max_size"] == 4


class TestFileUploader:
    """Multipart requests and soft-failure results."""

    def test_personal_upload(self, sample_file):
        handler = RecordingHandler(httpx.Response(201, json={"id": "file-1"}))
        uploader = make_uploader(handler)

        result = asyncio.run(uploader.upload_personal_file(sample_file, "Docs/2024"))

        assert result.success is True
        assert result.data == {"id": "file-1"}
        assert result.status_code == 201

        request = handler.last
        assert request.method == "POST"
        assert request.url.path == "/api/v1/files/upload"
        assert request.headers["authorization"] == "Bearer test-key"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="file"; filename="report.txt"' in request.content
        assert b"quarterly numbers" in request.content
        assert b'name="folderPath"' in request.content
        assert b"Docs/2024" in request.content

    def test_workspace_upload(self, sample_file):
        handler = RecordingHandler(httpx.Response(200, json={"id": "file-2"}))
        uploader = make_uploader(handler)

        result = asyncio.run(uploader.upload_workspace_file("ws-1", sample_file, folder_id="f-9"))

        assert result.success is True
        assert handler.last.url.path == "/api/v1/workspaces/ws-1/files/upload"
        assert b'name="folderId"' in handler.last.content
        assert b"f-9" in handler.last.content

    def test_empty_form_fields_are_skipped(self, sample_file):
        handler = RecordingHandler()
        uploader = make_uploader(handler)
        descriptor = UploadDescriptor(
            file_path=sample_file,
            endpoint="/api/v1/files/upload",
            form_fields={"folderPath": "", "tag": None, "note": "kept"},
        )

        asyncio.run(uploader.upload(descriptor))

        assert b'name="folderPath"' not in handler.last.content
        assert b'name="tag"' not in handler.last.content
        assert b'name="note"' in handler.last.content

    def test_text_response(self, sample_file):
        handler = RecordingHandler(httpx.Response(200, text="stored"))
        result = asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert result.data == "stored"

    def test_error_status_is_soft_failure(self, sample_file):
        handler = RecordingHandler(httpx.Response(413, text='{"message": "Quota exceeded"}'))
        result = asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert result.success is False
        assert result.status_code == 413
        assert result.error == '{"message": "Quota exceeded"}'

        with pytest.raises(DriveError) as exc_info:
            result.unwrap("/api/v1/files/upload")
        assert exc_info.value.message == "Quota exceeded"
        assert exc_info.value.status_code == 413

    def test_error_status_without_body(self, sample_file):
        handler = RecordingHandler(httpx.Response(500))
        result = asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert result.error == "HTTP 500"

    def test_validation_happens_before_request(self, sample_file):
        handler = RecordingHandler()
        uploader = make_uploader(handler, max_upload_size=4)

        with pytest.raises(DriveError) as exc_info:
            asyncio.run(uploader.upload_personal_file(sample_file))

        assert exc_info.value.code == "FILE_TOO_LARGE"
        assert handler.requests == []

    def test_transport_error_raises(self, sample_file):
        handler = RecordingHandler(httpx.ConnectError("refused"))

        with pytest.raises(DriveError) as exc_info:
            asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert exc_info.value.context["endpoint"] == "/api/v1/files/upload"

    def test_other_httpx_error_is_wrapped(self, sample_file):
        handler = RecordingHandler(httpx.DecodingError("bad gzip"))

        with pytest.raises(DriveError) as exc_info:
            asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert exc_info.value.kind is ErrorKind.INTERNAL_ERROR
        assert exc_info.value.context["original_error"] == "DecodingError"
        assert exc_info.value.retryable is False

    def test_upload_follows_redirect(self, sample_file):
        def handler(request):
            if request.url.path == "/api/v1/files/upload":
                return httpx.Response(307, headers={"location": "/api/v2/files/upload"})
            return httpx.Response(201, json={"id": "moved"})

        result = asyncio.run(make_uploader(handler).upload_personal_file(sample_file))

        assert result.success is True
        assert result.data == {"id": "moved"}

    def test_httpx_timeout_raises(self, sample_file):
        handler = RecordingHandler(httpx.WriteTimeout("stalled"))

        with pytest.raises(DriveError) as exc_info:
            asyncio.run(make_uploader(handler, upload_timeout=5.0).upload_personal_file(sample_file))

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert exc_info.value.context["timeout"] == 5.0
        assert exc_info.value.context["timeout_type"] == "write"

    def test_overall_timeout(self, sample_file):
        async def slow_handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200)

        uploader = make_uploader(slow_handler)
        descriptor = UploadDescriptor(
            file_path=sample_file,
            endpoint="/api/v1/files/upload",
            timeout=0.05,
        )

        with pytest.raises(DriveError) as exc_info:
            asyncio.run(uploader.upload(descriptor))

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert exc_info.value.context["timeout"] == 0.05


def test_upload_result_unwrap_success():
    assert UploadResult(success=True, data={"id": 1}).unwrap() == {"id": 1}


def test_upload_result_unwrap_plain_text_error():
    result = UploadResult(success=False, error="Forbidden", status_code=403)

    with pytest.raises(DriveError) as exc_info:
        result.unwrap("/api/v1/files/upload")

    assert exc_info.value.kind is ErrorKind.AUTHORIZATION
    assert exc_info.value.message == "Forbidden"
