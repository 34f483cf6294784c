"""Render operation results and errors as text for the calling agent."""

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List

from .errors import DriveError


@dataclass
class ToolResult:
    """Text content returned to the agent for one tool call."""

    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(block["text"] for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"content": list(self.content)}
        if self.is_error:
            data["isError"] = True
        return data


def format_success(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def format_error(error: Any) -> str:
    """Format any error value; DriveErrors get their code and context."""
    if isinstance(error, DriveError):
        return _format_drive_error(error)
    if isinstance(error, BaseException):
        return f"Error: {error}"
    if isinstance(error, str):
        return f"Error: {error}"
    return "Error: An unknown error occurred"


def _format_drive_error(error: DriveError) -> str:
    parts = [f"Error: {error.message}", f"Code: {error.code}"]

    entries = [
        f"{key}: {json.dumps(value, default=str)}"
        for key, value in error.context.items()
        if value is not None
    ]
    if entries:
        parts.append("Context: { " + ", ".join(entries) + " }")

    return "\n".join(parts)


def create_text_result(text: str) -> ToolResult:
    return ToolResult(content=[{"type": "text", "text": text}])


def create_success_result(data: Any) -> ToolResult:
    # Plain text content (e.g. fetched file bodies) is passed through as is
    if isinstance(data, str):
        return create_text_result(data)
    return create_text_result(format_success(data))


def create_error_result(error: Any) -> ToolResult:
    return ToolResult(content=[{"type": "text", "text": format_error(error)}], is_error=True)


async def with_error_handling(handler: Callable[[], Awaitable[Any]]) -> ToolResult:
    """Await a handler and turn its outcome into a ToolResult."""
    try:
        result = await handler()
    except Exception as e:
        return create_error_result(e)
    return create_success_result(result)
