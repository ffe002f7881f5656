"""MCP Tools Registry - Audiobookshelf operations exposed as tools.

This module declares every tool (name, description, input schema) and binds
it to a handler from handlers.py. Every tool accepts optional base_url and
token arguments that override the ABS_BASE_URL and ABS_API_KEY environment
variables for that call.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Type

import mcp.types as types

from audiobookshelf.client import AudiobookshelfClient

from . import handlers
from .handlers import (
    BOOLEAN,
    NUMBER,
    STRING,
    Handler,
    ItemView,
    LibraryView,
    MeView,
    PayloadField,
    PodcastsView,
    PodcastView,
    SubResource,
    UserView,
)
from .utils import ToolResult, safe_tool_execution


def _property(kind: str, description: str) -> Dict[str, Any]:
    return {"type": kind, "description": description}


AUTH_PROPERTIES = {
    "base_url": _property(
        STRING,
        "Audiobookshelf server URL, e.g. https://abs.example.com (defaults to ABS_BASE_URL env var)",
    ),
    "token": _property(
        STRING,
        "Bearer token used to authenticate with Audiobookshelf (defaults to ABS_API_KEY env var)",
    ),
}


def _flags(choices: Type[SubResource], descriptions: Mapping[str, str]) -> Dict[str, Any]:
    """Boolean schema properties for a sub-resource enum, in precedence order."""
    return {
        choice.value: _property(BOOLEAN, descriptions[choice.value]) for choice in choices
    }


@dataclass(frozen=True)
class ToolDefinition:
    """A tool's public contract and the handler serving it."""

    name: str
    description: str
    handler: Handler
    properties: Dict[str, Any] = field(default_factory=dict)
    required: Sequence[str] = ()

    def to_tool(self) -> types.Tool:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {**AUTH_PROPERTIES, **self.properties},
        }
        if self.required:
            schema["required"] = list(self.required)
        return types.Tool(name=self.name, description=self.description, inputSchema=schema)


LIBRARY_FLAGS = _flags(
    LibraryView,
    {
        "items": "Include all items in the library",
        "authors": "Include all authors in the library",
        "series": "Include all series in the library",
        "collections": "Include all collections in the library",
        "playlists": "Include all playlists in the library",
        "personalized": "Include personalized view for the library",
        "filterdata": "Include filter data for the library",
        "stats": "Include library statistics",
        "search": "Search the library items",
        "episode-downloads": "Include episode downloads for the library",
        "recent-episodes": "Include recent episodes for the library",
    },
)

ITEM_FLAGS = _flags(
    ItemView,
    {
        "cover": "Include cover image for the item",
        "tone-object": "Include tone object for the item",
    },
)

USER_FLAGS = _flags(
    UserView,
    {
        "listening-sessions": "Get listening sessions for the user",
        "listening-stats": "Get listening statistics for the user",
    },
)

ME_FLAGS = _flags(
    MeView,
    {
        "listening-sessions": "Get listening sessions for the user",
        "listening-stats": "Get listening statistics for the user",
        "items-in-progress": "Get items currently in progress for the user",
    },
)

PODCASTS_FLAGS = _flags(
    PodcastsView,
    {
        "feed": "Get podcast RSS feed",
        "opml": "Get podcast OPML export",
    },
)

PODCAST_FLAGS = _flags(
    PodcastView,
    {
        "downloads": "Get downloads for the podcast",
        "search-episode": "Search for episodes in the podcast",
    },
)


TOOL_DEFINITIONS = (
    # Libraries
    ToolDefinition(
        "libraries",
        "List Audiobookshelf libraries",
        handlers.simple_get("/libraries"),
    ),
    ToolDefinition(
        "library",
        "Retrieve a single Audiobookshelf library by ID, optionally with sub-resources "
        "(only the first selected sub-resource is used)",
        handlers.get_by_id_with_sub_resource("/libraries/{}", "library_id", LibraryView),
        {"library_id": _property(STRING, "Library identifier to fetch"), **LIBRARY_FLAGS},
        ("library_id",),
    ),
    ToolDefinition(
        "create_library",
        "Create a new Audiobookshelf library",
        handlers.create_library,
        {
            "name": _property(STRING, "Library name"),
            "folders": _property(STRING, "Comma-separated list of folder paths for the library"),
            "media_type": _property(STRING, "Media type: book or podcast"),
            "icon": _property(STRING, "Library icon (default: database)"),
            "provider": _property(STRING, "Metadata provider (default: google)"),
        },
        ("name", "folders", "media_type"),
    ),
    # Items
    ToolDefinition(
        "item",
        "Retrieve a single Audiobookshelf item (audiobook or podcast) by ID, optionally with sub-resources",
        handlers.get_by_id_with_sub_resource("/items/{}", "item_id", ItemView),
        {"item_id": _property(STRING, "Item identifier to fetch"), **ITEM_FLAGS},
        ("item_id",),
    ),
    # Authors
    ToolDefinition(
        "author",
        "Retrieve a single Audiobookshelf author by ID",
        handlers.get_by_id("/authors/{}", "author_id"),
        {"author_id": _property(STRING, "Author identifier to fetch")},
        ("author_id",),
    ),
    ToolDefinition(
        "author_image",
        "Retrieve author image by ID",
        handlers.get_by_id("/authors/{}/image", "author_id"),
        {"author_id": _property(STRING, "Author identifier")},
        ("author_id",),
    ),
    # Current user
    ToolDefinition(
        "me",
        "Get authenticated user information, or fetch specific user sub-resources",
        handlers.me,
        {
            **ME_FLAGS,
            "progress_item_id": _property(STRING, "Get progress for a specific library item ID"),
            "progress_episode_id": _property(
                STRING, "Get progress for a specific episode ID (requires progress_item_id)"
            ),
        },
    ),
    ToolDefinition(
        "update_progress",
        "Update listening progress for a media item",
        handlers.post_json("/me/progress", fields=handlers.UPDATE_PROGRESS_FIELDS),
        {
            "item_id": _property(STRING, "Library item ID"),
            "progress": _property(NUMBER, "Progress in seconds"),
            "duration": _property(NUMBER, "Total duration in seconds"),
            "is_finished": _property(BOOLEAN, "Mark as finished"),
            "episode_id": _property(STRING, "Episode ID (for podcasts)"),
        },
        ("item_id", "progress"),
    ),
    # Sessions
    ToolDefinition(
        "sessions",
        "List all playback sessions",
        handlers.simple_get("/sessions"),
    ),
    ToolDefinition(
        "session",
        "Retrieve a single playback session by ID",
        handlers.get_by_id("/sessions/{}", "session_id"),
        {"session_id": _property(STRING, "Session identifier to fetch")},
        ("session_id",),
    ),
    # Podcasts
    ToolDefinition(
        "podcasts",
        "List all podcasts, or fetch podcast-related resources",
        handlers.get_with_sub_resource("/podcasts", PodcastsView),
        PODCASTS_FLAGS,
    ),
    ToolDefinition(
        "podcast",
        "Retrieve a single podcast by ID, or fetch podcast sub-resources",
        handlers.podcast,
        {
            "podcast_id": _property(STRING, "Podcast identifier to fetch"),
            **PODCAST_FLAGS,
            "episode_id": _property(STRING, "Get a specific episode by ID"),
        },
        ("podcast_id",),
    ),
    ToolDefinition(
        "check_podcast_episodes",
        "Check for new episodes for a podcast",
        handlers.post_json("/podcasts/{}/check-new-episodes", ("podcast_id",)),
        {"podcast_id": _property(STRING, "Podcast ID to check")},
        ("podcast_id",),
    ),
    # Collections
    ToolDefinition(
        "collections",
        "List all Audiobookshelf collections",
        handlers.simple_get("/collections"),
    ),
    ToolDefinition(
        "collection",
        "Retrieve a single Audiobookshelf collection by ID",
        handlers.get_by_id("/collections/{}", "collection_id"),
        {"collection_id": _property(STRING, "Collection identifier to fetch")},
        ("collection_id",),
    ),
    ToolDefinition(
        "create_collection",
        "Create a new collection",
        handlers.post_json(
            "/collections",
            fields=(
                PayloadField("libraryId", "library_id", required=True),
                PayloadField("name", "name", required=True),
                PayloadField("description", "description"),
            ),
        ),
        {
            "library_id": _property(STRING, "Library ID"),
            "name": _property(STRING, "Collection name"),
            "description": _property(STRING, "Collection description"),
        },
        ("library_id", "name"),
    ),
    ToolDefinition(
        "add_to_collection",
        "Add a book to an existing collection",
        handlers.post_json(
            "/collections/{}/book",
            ("collection_id",),
            (PayloadField("id", "book_id", required=True),),
        ),
        {
            "collection_id": _property(STRING, "Collection ID"),
            "book_id": _property(STRING, "Book ID to add"),
        },
        ("collection_id", "book_id"),
    ),
    # Playlists
    ToolDefinition(
        "playlists",
        "List all Audiobookshelf playlists",
        handlers.simple_get("/playlists"),
    ),
    ToolDefinition(
        "playlist",
        "Retrieve a single Audiobookshelf playlist by ID",
        handlers.get_by_id("/playlists/{}", "playlist_id"),
        {"playlist_id": _property(STRING, "Playlist identifier to fetch")},
        ("playlist_id",),
    ),
    ToolDefinition(
        "create_playlist",
        "Create a new playlist",
        handlers.post_json(
            "/playlists",
            fields=(
                PayloadField("libraryId", "library_id", required=True),
                PayloadField("name", "name", required=True),
                PayloadField("description", "description"),
            ),
        ),
        {
            "library_id": _property(STRING, "Library ID"),
            "name": _property(STRING, "Playlist name"),
            "description": _property(STRING, "Playlist description"),
        },
        ("library_id", "name"),
    ),
    ToolDefinition(
        "add_to_playlist",
        "Add an item to an existing playlist",
        handlers.post_json(
            "/playlists/{}/item",
            ("playlist_id",),
            (
                PayloadField("libraryItemId", "item_id", required=True),
                PayloadField("episodeId", "episode_id"),
            ),
        ),
        {
            "playlist_id": _property(STRING, "Playlist ID"),
            "item_id": _property(STRING, "Library item ID to add"),
            "episode_id": _property(STRING, "Episode ID (for podcast episodes)"),
        },
        ("playlist_id", "item_id"),
    ),
    # Server status (outside the /api root)
    ToolDefinition(
        "ping",
        "Simple health check endpoint",
        handlers.simple_get("/ping", root_level=True),
    ),
    ToolDefinition(
        "healthcheck",
        "Server health verification endpoint",
        handlers.simple_get("/healthcheck", root_level=True),
    ),
    ToolDefinition(
        "status",
        "Get server initialization status and configuration",
        handlers.simple_get("/status", root_level=True),
    ),
    # Users
    ToolDefinition(
        "users",
        "List all Audiobookshelf users",
        handlers.simple_get("/users"),
    ),
    ToolDefinition(
        "users_online",
        "Get currently online users",
        handlers.simple_get("/users/online"),
    ),
    ToolDefinition(
        "user",
        "Retrieve a single user by ID, optionally with sub-resources",
        handlers.get_by_id_with_sub_resource("/users/{}", "user_id", UserView),
        {"user_id": _property(STRING, "User identifier to fetch"), **USER_FLAGS},
        ("user_id",),
    ),
    # Series
    ToolDefinition(
        "series",
        "Retrieve a single series by ID",
        handlers.get_by_id("/series/{}", "series_id"),
        {"series_id": _property(STRING, "Series identifier to fetch")},
        ("series_id",),
    ),
    # Server administration
    ToolDefinition(
        "backups",
        "List all server backups",
        handlers.simple_get("/backups"),
    ),
    ToolDefinition(
        "create_backup",
        "Create a server backup",
        handlers.post_json("/backups"),
    ),
    ToolDefinition(
        "filesystem",
        "List available filesystem paths",
        handlers.simple_get("/filesystem"),
    ),
    ToolDefinition(
        "authorize",
        "Get authorized user and server information",
        handlers.simple_get("/authorize"),
    ),
    # Tags and genres
    ToolDefinition(
        "tags",
        "Get all library tags",
        handlers.simple_get("/tags"),
    ),
    ToolDefinition(
        "genres",
        "Get all available genres",
        handlers.simple_get("/genres"),
    ),
)


class ToolRegistry:
    """Registry routing tool calls to their handlers.

    Attributes:
        client: AudiobookshelfClient shared by all invocations
        definitions: Tool name to ToolDefinition
        tools: Tool name to MCP Tool description
    """

    def __init__(
        self,
        client: AudiobookshelfClient,
        definitions: Sequence[ToolDefinition] = TOOL_DEFINITIONS,
    ):
        self.client = client
        self.definitions = {definition.name: definition for definition in definitions}
        self.tools = {name: definition.to_tool() for name, definition in self.definitions.items()}

    def get_all(self) -> list[types.Tool]:
        """Get all tool descriptions, in declaration order."""
        return list(self.tools.values())

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        """Execute a tool by name.

        Args:
            name: Tool name
            arguments: Raw tool arguments

        Returns:
            ToolResult; handler errors never propagate

        Raises:
            ValueError: If the tool name is unknown
        """
        definition = self.definitions.get(name)
        if definition is None:
            raise ValueError(f"Unknown tool: {name}")

        return await safe_tool_execution(name, definition.handler, self.client, arguments)
