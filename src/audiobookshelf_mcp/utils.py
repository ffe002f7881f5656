"""Error handling utilities for Audiobookshelf MCP Server.

This module turns handler outcomes into tool results: the upstream body on
success, a readable failure message for configuration, argument, transport
and upstream errors, and for anything unexpected.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mcp.types as types

from audiobookshelf.client import AudiobookshelfClient
from audiobookshelf.exceptions import (
    ConfigurationError,
    MissingArgumentError,
    TransportError,
    UpstreamError,
)

from .arguments import ToolArguments
from .handlers import Handler

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    """Raised at the MCP boundary so the SDK reports an error tool result."""

    pass


@dataclass
class ToolResult:
    """Outcome of one tool invocation.

    Attributes:
        text: Upstream response body, or the failure message
        is_error: True for failures
        error_kind: Exception class name for failures (e.g., "UpstreamError")
    """

    text: str
    is_error: bool = False
    error_kind: Optional[str] = None

    @classmethod
    def success(cls, body: bytes) -> "ToolResult":
        # Binary sub-resources (cover, author image) are not valid UTF-8
        return cls(text=body.decode("utf-8", errors="replace"))

    @classmethod
    def failure(cls, error: BaseException) -> "ToolResult":
        return cls(text=str(error), is_error=True, error_kind=type(error).__name__)

    def to_content(self) -> list[types.TextContent]:
        return [types.TextContent(type="text", text=self.text)]


async def safe_tool_execution(
    tool_name: str,
    handler: Handler,
    client: AudiobookshelfClient,
    arguments: Optional[Mapping[str, Any]],
) -> ToolResult:
    """Execute a tool handler, converting every error into a failure result.

    Args:
        tool_name: Name of the tool being executed
        handler: Handler built in handlers.py
        client: Client performing the HTTP request
        arguments: Raw tool arguments

    Returns:
        ToolResult carrying the response body or the error message
    """
    try:
        body = await handler(client, ToolArguments(arguments))
        return ToolResult.success(body)

    except ConfigurationError as e:
        logger.error(f"Configuration missing in {tool_name}: {e}")
        return ToolResult.failure(e)

    except MissingArgumentError as e:
        logger.error(f"Invalid arguments in {tool_name}: {e}")
        return ToolResult.failure(e)

    except UpstreamError as e:
        logger.error(f"Audiobookshelf returned HTTP {e.status_code} in {tool_name}")
        return ToolResult.failure(e)

    except TransportError as e:
        logger.error(f"Request failed in {tool_name}: {e}")
        return ToolResult.failure(e)

    except Exception as e:
        logger.exception(f"Unexpected error in {tool_name}")
        return ToolResult(
            text=f"An unexpected error occurred: {str(e)}. Please check the logs for details.",
            is_error=True,
            error_kind=type(e).__name__,
        )
