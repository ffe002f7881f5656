"""Integration tests for MCPServer wiring."""

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from audiobookshelf_mcp.server import MCPServer
from audiobookshelf_mcp.utils import ToolExecutionError


@pytest.fixture
def server(mock_abs_client) -> MCPServer:
    return MCPServer(client=mock_abs_client)


def test_server_starts_without_environment(no_abs_env, mock_abs_client, caplog):
    """Verify missing environment only warns; config is resolved per call."""
    server = MCPServer(client=mock_abs_client)

    assert server.client is mock_abs_client
    assert "ABS_BASE_URL is not set" in caplog.text


@pytest.mark.asyncio
async def test_list_tools_returns_registry_tools(server):
    tools = await server.list_tools()

    assert len(tools) == len(server.tool_registry.get_all())
    assert "library" in [tool.name for tool in tools]


@pytest.mark.asyncio
async def test_call_tool_returns_text_content(abs_env, server, mock_abs_client):
    mock_abs_client.get.return_value = b'{"id":"lib123"}'

    content = await server.call_tool("library", {"library_id": "lib123", "items": True})

    assert content[0].type == "text"
    assert content[0].text == '{"id":"lib123"}'
    mock_abs_client.get.assert_awaited_once_with(
        "https://abs.example.com/api", "env-token", "/libraries/lib123/items"
    )


@pytest.mark.asyncio
async def test_call_tool_failure_raises_for_error_result(no_abs_env, server, mock_abs_client):
    with pytest.raises(ToolExecutionError) as exc_info:
        await server.call_tool("libraries", {})

    assert "ABS_BASE_URL" in str(exc_info.value)
    mock_abs_client.get.assert_not_called()


@pytest.mark.asyncio
async def test_call_unknown_tool(server):
    with pytest.raises(ValueError, match="Unknown tool"):
        await server.call_tool("nonexistent_tool", {})


class TestProtocolRoundTrip:
    """Tool calls sent by a real MCP client session."""

    @pytest.mark.asyncio
    async def test_success_passes_body_through(self, abs_env, server, mock_abs_client):
        mock_abs_client.get.return_value = b'{"libraries":[]}'

        async with create_connected_server_and_client_session(server.server) as session:
            result = await session.call_tool("libraries", {})

        assert not result.isError
        assert result.content[0].text == '{"libraries":[]}'

    @pytest.mark.asyncio
    async def test_unconfigured_call_is_error_result(self, no_abs_env, server, mock_abs_client):
        async with create_connected_server_and_client_session(server.server) as session:
            result = await session.call_tool("libraries", {})

        assert result.isError
        assert "base_url parameter or ABS_BASE_URL environment variable is required" in result.content[0].text
        mock_abs_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_required_argument_reaches_handler(self, abs_env, server, mock_abs_client):
        async with create_connected_server_and_client_session(server.server) as session:
            result = await session.call_tool("library", {})

        assert result.isError
        assert 'required argument "library_id" not found' in result.content[0].text
        mock_abs_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_string_flag_and_number_are_not_schema_rejected(self, abs_env, server, mock_abs_client):
        async with create_connected_server_and_client_session(server.server) as session:
            library = await session.call_tool("library", {"library_id": "lib1", "items": "true"})
            progress = await session.call_tool("update_progress", {"item_id": "li_1", "progress": "120"})

        assert not library.isError
        assert not progress.isError
        mock_abs_client.get.assert_awaited_once_with(
            "https://abs.example.com/api", "env-token", "/libraries/lib1/items"
        )
        mock_abs_client.post.assert_awaited_once_with(
            "https://abs.example.com/api", "env-token", "/me/progress",
            {"libraryItemId": "li_1", "currentTime": 120.0},
        )
