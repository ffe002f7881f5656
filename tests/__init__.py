"""Test suite for the Audiobookshelf MCP Server.

All tests mock the HTTP layer (httpx.MockTransport) or the Audiobookshelf
client, so no Audiobookshelf server is needed.
"""
