"""Logging setup for drive tools.

Everything goes to stderr so stdout stays free for the agent protocol.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from drive_client.errors import DriveError

# Configure rich console
console = Console(stderr=True)

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for the drive client and tool registry.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
        json_format: Use JSON format for logs

    Returns:
        Configured logger
    """
    logger = logging.getLogger("drive_client")
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers = []

    if json_format:
        # JSON format for structured logging
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
    else:
        # Rich format for human-readable output
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    # File handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    # The tool registry logs under its own module name
    tools_logger = logging.getLogger("tools")
    tools_logger.setLevel(logger.level)
    tools_logger.handlers = list(logger.handlers)

    return logger


class JsonFormatter(logging.Formatter):
    """JSON log formatter that keeps extra fields and error context."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        # Special handling for exceptions
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            log_data.update({
                "exception_type": exc_type.__name__,
                "exception_message": str(exc_value),
            })
            if isinstance(exc_value, DriveError):
                log_data["error_context"] = dict(exc_value.context)

        if isinstance(record.msg, DriveError):
            log_data["error_context"] = dict(record.msg.context)

        # Add extra fields
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)
