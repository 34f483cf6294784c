"""Tool registry mapping agent tool names to drive operations."""

import logging
import time
from typing import Any, Awaitable, Callable, Dict

from drive_client.api import DriveAPI
from drive_client.errors import DriveError, ErrorKind
from drive_client.formatting import ToolResult, create_error_result, with_error_handling

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[Any]]


class ToolRegistry:
    """Registry of available tools."""

    def __init__(self, api: DriveAPI):
        self.api = api
        files, folders = api.files, api.folders
        workspaces, trash = api.workspaces, api.trash

        self._tools: Dict[str, ToolHandler] = {
            # Files
            "list_files": files.list_files,
            "get_file": files.get_file,
            "upload_file": files.upload_file,
            "download_file": files.download_file,
            "generate_signed_url": files.generate_signed_url,
            "fetch_file_content": files.fetch_file_content,
            "move_file": files.move_file,
            "share_file": files.share_file,
            # Folders
            "list_folders": folders.list_folders,
            "create_folder": folders.create_folder,
            "get_folder": folders.get_folder,
            "update_folder": folders.update_folder,
            "delete_folder": folders.delete_folder,
            "move_folder": folders.move_folder,
            "share_folder": folders.share_folder,
            # Workspaces
            "list_workspaces": workspaces.list_workspaces,
            "create_workspace": workspaces.create_workspace,
            "get_workspace": workspaces.get_workspace,
            "upload_workspace_file": workspaces.upload_workspace_file,
            "list_workspace_files": workspaces.list_workspace_files,
            "list_workspace_folders": workspaces.list_workspace_folders,
            "create_workspace_folder": workspaces.create_workspace_folder,
            "get_workspace_folder": workspaces.get_workspace_folder,
            "update_workspace_folder": workspaces.update_workspace_folder,
            "delete_workspace_folder": workspaces.delete_workspace_folder,
            # Trash
            "list_trash": trash.list_trash,
            "restore_from_trash": trash.restore_from_trash,
            "empty_trash": trash.empty_trash,
        }

    async def execute(self, tool_name: str, **arguments) -> ToolResult:
        """
        Execute a tool by name.

        Args:
            tool_name: Name of the tool to execute
            **arguments: Already validated, snake_case tool arguments

        Returns:
            ToolResult with the formatted data, or an error result
        """
        handler = self._tools.get(tool_name)
        if handler is None:
            return create_error_result(
                DriveError(
                    ErrorKind.VALIDATION,
                    f"Unknown tool: {tool_name}",
                    context={"tool": tool_name},
                )
            )

        logger.info("Tool execution started", extra={"tool": tool_name})
        start = time.monotonic()

        result = await with_error_handling(lambda: handler(**arguments))

        logger.info(
            "Tool execution completed",
            extra={
                "tool": tool_name,
                "is_error": result.is_error,
                "duration_ms": int((time.monotonic() - start) * 1000),
            },
        )
        return result

    def has_tool(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def list_tools(self) -> list[str]:
        """List available tool names."""
        return list(self._tools.keys())
