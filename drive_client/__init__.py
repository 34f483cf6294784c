"""Async client for the remote drive API with typed errors and retry logic."""

from .api import DriveAPI, FilesAPI, FoldersAPI, TrashAPI, WorkspacesAPI
from .body import UNSET, RequestBodyBuilder, build_request_body
from .client import DriveClient
from .config import DriveConfig
from .errors import (
    DriveError,
    ErrorKind,
    classify,
    classify_transport_error,
    configuration_error,
    file_operation_error,
    is_retryable,
    missing_required_field,
    network_error,
    wrap,
)
from .formatting import (
    ToolResult,
    create_error_result,
    create_success_result,
    format_error,
    format_success,
    with_error_handling,
)
from .models import RequestDescriptor, UploadDescriptor, UploadResult
from .query import QueryBuilder, build_query_string, build_query_string_with_prefix
from .retry import (
    AGGRESSIVE_RETRY,
    DEFAULT_RETRY,
    NO_RETRY,
    RetryController,
    RetryPolicy,
    with_retry,
)
from .upload import FileUploader, validate_file_path

__all__ = [
    # Client
    "DriveClient",
    "DriveConfig",
    "DriveAPI",
    "FilesAPI",
    "FoldersAPI",
    "WorkspacesAPI",
    "TrashAPI",

    # Builders
    "QueryBuilder",
    "RequestBodyBuilder",
    "UNSET",
    "build_query_string",
    "build_query_string_with_prefix",
    "build_request_body",

    # Descriptors
    "RequestDescriptor",
    "UploadDescriptor",
    "UploadResult",

    # Retry
    "RetryPolicy",
    "RetryController",
    "with_retry",
    "DEFAULT_RETRY",
    "NO_RETRY",
    "AGGRESSIVE_RETRY",

    # Upload
    "FileUploader",
    "validate_file_path",

    # Errors
    "DriveError",
    "ErrorKind",
    "classify",
    "classify_transport_error",
    "configuration_error",
    "file_operation_error",
    "is_retryable",
    "missing_required_field",
    "network_error",
    "wrap",

    # Formatting
    "ToolResult",
    "create_error_result",
    "create_success_result",
    "format_error",
    "format_success",
    "with_error_handling",
]
