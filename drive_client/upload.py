"""Multipart file uploads to the drive API."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from .config import DriveConfig
from .endpoints import FileEndpoints, WorkspaceEndpoints
from .errors import classify_transport_error, file_operation_error, network_error, wrap
from .models import UploadDescriptor, UploadResult

logger = logging.getLogger(__name__)


def validate_file_path(file_path: Union[str, Path], max_size: Optional[int] = None) -> Path:
    """
    Check that a path names an existing regular file.

    Relative paths are resolved against the current working directory.

    Args:
        file_path: Local path to validate
        max_size: Optional size limit in bytes

    Returns:
        Path: Absolute path of the file

    Raises:
        DriveError: FILE_OPERATION with FILE_NOT_FOUND, INVALID_FILE_TYPE
            or FILE_TOO_LARGE code
    """
    path = Path(file_path).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path

    if not path.exists():
        raise file_operation_error(
            f"File not found: {file_path}", code="FILE_NOT_FOUND", file_path=str(file_path)
        )

    if not path.is_file():
        raise file_operation_error(
            f"Path is not a file: {file_path}", code="INVALID_FILE_TYPE", file_path=str(file_path)
        )

    if max_size is not None:
        size = path.stat().st_size
        if size > max_size:
            raise file_operation_error(
                f"File too large: {size} bytes exceeds limit of {max_size} bytes",
                code="FILE_TOO_LARGE",
                file_path=str(file_path),
                size=size,
                max_size=max_size,
            )

    return path


def _decode_upload_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        # Response might not be JSON
        return response.text


class FileUploader:
    """Streams local files to upload endpoints as multipart/form-data.

    Unlike ``DriveClient``, a completed upload with an error status does
    not raise: it returns ``UploadResult(success=False)``. Local
    validation, transport faults and timeouts still raise DriveError.
    """

    def __init__(self, config: DriveConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    async def upload(self, descriptor: UploadDescriptor) -> UploadResult:
        path = validate_file_path(descriptor.file_path, self.config.max_upload_size)
        fields: Dict[str, str] = {
            key: value for key, value in descriptor.form_fields.items() if value
        }

        logger.debug(
            "Starting file upload",
            extra={"file_path": str(path), "endpoint": descriptor.endpoint},
        )

        try:
            with path.open("rb") as file_handle:
                async with httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(descriptor.timeout),
                    headers=self.config.default_headers,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    response = await asyncio.wait_for(
                        client.post(
                            descriptor.endpoint,
                            files={"file": (path.name, file_handle)},
                            data=fields,
                            headers=self.config.auth_header,
                        ),
                        timeout=descriptor.timeout,
                    )
        except asyncio.TimeoutError as e:
            logger.error("Upload timed out", extra={"endpoint": descriptor.endpoint})
            raise network_error(
                f"Upload timeout after {descriptor.timeout}s",
                endpoint=descriptor.endpoint,
                timeout=descriptor.timeout,
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Upload timed out", extra={"endpoint": descriptor.endpoint})
            error = classify_transport_error(e, descriptor.endpoint, "POST")
            raise network_error(
                f"Upload timeout after {descriptor.timeout}s",
                timeout=descriptor.timeout,
                **dict(error.context),
            ) from e
        except httpx.TransportError as e:
            logger.error("Upload request failed", extra={"endpoint": descriptor.endpoint})
            raise classify_transport_error(e, descriptor.endpoint, "POST") from e
        except httpx.HTTPError as e:
            logger.error("Upload request failed", extra={"endpoint": descriptor.endpoint})
            raise wrap(e, f"Upload to {descriptor.endpoint} failed") from e

        if not response.is_success:
            logger.error(
                "Upload failed",
                extra={"endpoint": descriptor.endpoint, "status_code": response.status_code},
            )
            return UploadResult(
                success=False,
                error=response.text or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.info("Upload completed successfully", extra={"endpoint": descriptor.endpoint})
        return UploadResult(
            success=True,
            data=_decode_upload_body(response),
            status_code=response.status_code,
        )

    async def upload_personal_file(
        self,
        file_path: Union[str, Path],
        folder_path: Optional[str] = None,
    ) -> UploadResult:
        """Upload a file to personal storage, optionally under a folder path."""
        form_fields = {"folderPath": folder_path} if folder_path else {}
        return await self.upload(
            UploadDescriptor(
                file_path=file_path,
                endpoint=FileEndpoints.UPLOAD,
                form_fields=form_fields,
                timeout=self.config.upload_timeout,
            )
        )

    async def upload_workspace_file(
        self,
        workspace_id: str,
        file_path: Union[str, Path],
        folder_id: Optional[str] = None,
    ) -> UploadResult:
        """Upload a file into a workspace, optionally into one of its folders."""
        form_fields = {"folderId": folder_id} if folder_id else {}
        return await self.upload(
            UploadDescriptor(
                file_path=file_path,
                endpoint=WorkspaceEndpoints.upload_file(workspace_id),
                form_fields=form_fields,
                timeout=self.config.upload_timeout,
            )
        )
