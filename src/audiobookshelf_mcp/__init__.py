"""Audiobookshelf MCP Server - Model Context Protocol integration for Audiobookshelf.

This package provides a Model Context Protocol (MCP) server that exposes an
Audiobookshelf media server to LLM applications as callable tools.

Components:
    - server.py: Main MCP server class with stdio transport
    - tools.py: Tool catalog and registry
    - handlers.py: Builders translating tool arguments into API requests
    - arguments.py: Typed accessors over tool arguments
    - utils.py: Error handling and tool results
    - logger.py: Logging configuration
"""

__version__ = "0.1.0"
