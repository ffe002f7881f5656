"""Main MCP Server class with stdio transport.

This module implements the MCPServer class that exposes the Audiobookshelf
tool registry over the Model Context Protocol.
"""

import asyncio
import logging
import os
from typing import Any, Optional

import mcp.server.stdio
import mcp.types as types
from dotenv import load_dotenv
from mcp.server import Server

from audiobookshelf.client import AudiobookshelfClient
from audiobookshelf.models import BASE_URL_ENV, TOKEN_ENV

from .logger import setup_logging
from .tools import ToolRegistry
from .utils import ToolExecutionError

logger = logging.getLogger(__name__)


class MCPServer:
    """Main MCP server class coordinating Audiobookshelf tools.

    This class:
    - Owns one AudiobookshelfClient shared by all tool calls
    - Registers every tool from ToolRegistry
    - Provides stdio transport for MCP hosts
    """

    def __init__(self, client: Optional[AudiobookshelfClient] = None):
        """Initialize MCP server.

        Server URL and token are resolved per call, so missing environment
        variables only produce a warning here.

        Args:
            client: AudiobookshelfClient to use (default: a new one)
        """
        for env_var in (BASE_URL_ENV, TOKEN_ENV):
            if not os.getenv(env_var):
                logger.warning(
                    f"{env_var} is not set; tools will require it as a per-call argument"
                )

        self.client = client or AudiobookshelfClient()
        self.tool_registry = ToolRegistry(self.client)

        # Create MCP server instance
        self.server = Server("audiobookshelf-mcp-server")

        # Register handlers
        self.server.list_tools()(self.list_tools)
        # Arguments reach the handlers unvalidated; they check presence themselves
        self.server.call_tool(validate_input=False)(self.call_tool)

        logger.info("Audiobookshelf MCP Server initialized")

    async def list_tools(self) -> list[types.Tool]:
        """Return all available tools."""
        tools = self.tool_registry.get_all()
        logger.info(f"Listing {len(tools)} tools")
        return tools

    async def call_tool(
        self, name: str, arguments: dict[str, Any]
    ) -> list[types.TextContent]:
        """Execute a tool by name.

        Raises:
            ValueError: If the tool is unknown
            ToolExecutionError: If the tool failed; the SDK turns it into an
                error result carrying the message
        """
        logger.info(f"Executing tool: {name}")

        result = await self.tool_registry.call(name, arguments)
        if result.is_error:
            raise ToolExecutionError(result.text)

        return result.to_content()

    async def run(self):
        """Run the MCP server with stdio transport."""
        logger.info("Starting Audiobookshelf MCP Server with stdio transport")

        try:
            async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.client.close()


async def main():
    """Main entry point for the MCP server."""
    load_dotenv()
    setup_logging()

    # Create and run server
    server = MCPServer()
    await server.run()


def cli():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
