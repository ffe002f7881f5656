"""Handler builders translating tool arguments into Audiobookshelf requests.

Every handler has the same shape: resolve configuration, validate required
arguments, build path (and body), then call the client. Handlers return the
raw response body and raise AudiobookshelfError subclasses; turning either
into a tool result is the job of utils.safe_tool_execution.

Builders:
    - simple_get: fixed path, optionally outside the "/api" root
    - get_by_id: path template with one identifier
    - get_by_id_with_sub_resource: identifier plus an optional sub-resource
    - get_with_sub_resource: fixed path plus an optional sub-resource
    - post_json: POST with a body assembled by build_payload
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Type, TypeVar

from audiobookshelf.client import AudiobookshelfClient
from audiobookshelf.models import AudiobookshelfConfig

from .arguments import ToolArguments

Handler = Callable[[AudiobookshelfClient, ToolArguments], Awaitable[bytes]]

E = TypeVar("E", bound="SubResource")


class SubResource(str, Enum):
    """Base for per-tool sub-resource choices.

    The value is both the boolean flag name and the appended path segment.
    Declaration order is precedence: when several flags are true, the
    earliest-declared member wins.
    """

    def apply(self, path: str) -> str:
        return f"{path}/{self.value}"


class LibraryView(SubResource):
    ITEMS = "items"
    AUTHORS = "authors"
    SERIES = "series"
    COLLECTIONS = "collections"
    PLAYLISTS = "playlists"
    PERSONALIZED = "personalized"
    FILTERDATA = "filterdata"
    STATS = "stats"
    SEARCH = "search"
    EPISODE_DOWNLOADS = "episode-downloads"
    RECENT_EPISODES = "recent-episodes"


class ItemView(SubResource):
    COVER = "cover"
    TONE_OBJECT = "tone-object"


class UserView(SubResource):
    LISTENING_SESSIONS = "listening-sessions"
    LISTENING_STATS = "listening-stats"


class MeView(SubResource):
    LISTENING_SESSIONS = "listening-sessions"
    LISTENING_STATS = "listening-stats"
    ITEMS_IN_PROGRESS = "items-in-progress"


class PodcastsView(SubResource):
    FEED = "feed"
    OPML = "opml"


class PodcastView(SubResource):
    DOWNLOADS = "downloads"
    SEARCH_EPISODE = "search-episode"


def resolve_config(arguments: ToolArguments, root_level: bool = False) -> AudiobookshelfConfig:
    """Resolve base URL and token from the per-call arguments or environment."""
    return AudiobookshelfConfig.resolve(
        arguments.get_string("base_url"),
        arguments.get_string("token"),
        root_level=root_level,
    )


def select_sub_resource(arguments: ToolArguments, choices: Type[E]) -> Optional[E]:
    """Return the first choice, in declaration order, whose flag is true.

    Args:
        arguments: Tool arguments
        choices: SubResource enum for the tool

    Returns:
        Selected member, or None when no flag is set
    """
    for choice in choices:
        if arguments.get_bool(choice.value):
            return choice
    return None


def simple_get(path: str, root_level: bool = False) -> Handler:
    """Build a handler for a fixed GET endpoint.

    Args:
        path: Endpoint path (e.g., "/libraries")
        root_level: True for endpoints outside the "/api" root
    """

    async def handler(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
        config = resolve_config(arguments, root_level=root_level)
        return await client.get(config.base_url, config.token, path)

    return handler


def get_by_id(path_template: str, id_arg: str) -> Handler:
    """Build a handler for a GET endpoint addressed by one identifier.

    Args:
        path_template: Path with a single "{}" placeholder
        id_arg: Name of the required identifier argument
    """

    async def handler(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
        config = resolve_config(arguments)
        identifier = arguments.require_string(id_arg)
        return await client.get(config.base_url, config.token, path_template.format(identifier))

    return handler


def get_by_id_with_sub_resource(
    path_template: str, id_arg: str, choices: Type[SubResource]
) -> Handler:
    """Build a GET-by-ID handler that may append one sub-resource segment.

    Args:
        path_template: Path with a single "{}" placeholder
        id_arg: Name of the required identifier argument
        choices: SubResource enum; see select_sub_resource for precedence
    """

    async def handler(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
        config = resolve_config(arguments)
        identifier = arguments.require_string(id_arg)

        path = path_template.format(identifier)
        choice = select_sub_resource(arguments, choices)
        if choice is not None:
            path = choice.apply(path)

        return await client.get(config.base_url, config.token, path)

    return handler


def get_with_sub_resource(path: str, choices: Type[SubResource]) -> Handler:
    """Build a fixed-path GET handler that may append one sub-resource segment."""

    async def handler(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
        config = resolve_config(arguments)
        choice = select_sub_resource(arguments, choices)
        target = choice.apply(path) if choice is not None else path
        return await client.get(config.base_url, config.token, target)

    return handler


# Payload assembly

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"


@dataclass(frozen=True)
class PayloadField:
    """Maps one tool argument onto one JSON body key.

    Attributes:
        key: JSON key in the request body
        argument: Tool argument name
        kind: STRING, NUMBER or BOOLEAN
        required: Required fields fail fast; optional ones are sent only
            when present and non-default (non-empty, > 0, or true)
    """

    key: str
    argument: str
    kind: str = STRING
    required: bool = False


def build_payload(arguments: ToolArguments, fields: Sequence[PayloadField]) -> Dict[str, object]:
    """Assemble a JSON body from declared fields, in declaration order.

    Raises:
        MissingArgumentError: If a required field is absent or empty
    """
    payload: Dict[str, object] = {}

    for field in fields:
        if field.kind == NUMBER:
            if field.required:
                payload[field.key] = arguments.require_float(field.argument)
            else:
                number = arguments.get_float(field.argument)
                if number > 0:
                    payload[field.key] = number
        elif field.kind == BOOLEAN:
            if arguments.get_bool(field.argument):
                payload[field.key] = True
            elif field.required:
                payload[field.key] = False
        else:
            if field.required:
                payload[field.key] = arguments.require_string(field.argument)
            else:
                text = arguments.get_string(field.argument)
                if text:
                    payload[field.key] = text

    return payload


def post_json(
    path_template: str,
    path_args: Sequence[str] = (),
    fields: Sequence[PayloadField] = (),
) -> Handler:
    """Build a POST handler.

    Path identifiers are validated before body fields. With no fields the
    request is sent without a body.

    Args:
        path_template: Path with one "{}" placeholder per path argument
        path_args: Required identifier arguments substituted into the path
        fields: Body declaration for build_payload
    """

    async def handler(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
        config = resolve_config(arguments)
        identifiers = [arguments.require_string(name) for name in path_args]
        payload = build_payload(arguments, fields) if fields else None
        return await client.post(
            config.base_url, config.token, path_template.format(*identifiers), payload
        )

    return handler


# Custom handlers

CREATE_LIBRARY_FIELDS = (
    PayloadField("name", "name", required=True),
    PayloadField("folders", "folders", required=True),
    PayloadField("mediaType", "media_type", required=True),
    PayloadField("icon", "icon"),
    PayloadField("provider", "provider"),
)

UPDATE_PROGRESS_FIELDS = (
    PayloadField("libraryItemId", "item_id", required=True),
    PayloadField("currentTime", "progress", kind=NUMBER, required=True),
    PayloadField("duration", "duration", kind=NUMBER),
    PayloadField("isFinished", "is_finished", kind=BOOLEAN),
    PayloadField("episodeId", "episode_id"),
)


def parse_folders(folders: str) -> List[Dict[str, str]]:
    """Split "/a, /b" into [{"fullPath": "/a"}, {"fullPath": "/b"}]."""
    return [{"fullPath": path.strip()} for path in folders.split(",")]


async def create_library(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
    """POST /libraries with folders parsed from a comma-separated string."""
    config = resolve_config(arguments)
    payload = build_payload(arguments, CREATE_LIBRARY_FIELDS)
    payload["folders"] = parse_folders(str(payload["folders"]))
    return await client.post(config.base_url, config.token, "/libraries", payload)


async def me(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
    """GET the authenticated user, or one of its sub-views.

    Boolean views take precedence over progress lookups; a progress lookup
    with both an item and an episode identifier targets the episode.
    """
    config = resolve_config(arguments)

    path = "/me"
    view = select_sub_resource(arguments, MeView)
    if view is not None:
        path = view.apply(path)
    else:
        item_id = arguments.get_string("progress_item_id")
        if item_id:
            path = f"/me/progress/{item_id}"
            episode_id = arguments.get_string("progress_episode_id")
            if episode_id:
                path = f"{path}/{episode_id}"

    return await client.get(config.base_url, config.token, path)


async def podcast(client: AudiobookshelfClient, arguments: ToolArguments) -> bytes:
    """GET a podcast, one of its sub-resources, or one of its episodes."""
    config = resolve_config(arguments)
    podcast_id = arguments.require_string("podcast_id")

    path = f"/podcasts/{podcast_id}"
    view = select_sub_resource(arguments, PodcastView)
    if view is not None:
        path = view.apply(path)
    else:
        episode_id = arguments.get_string("episode_id")
        if episode_id:
            path = f"{path}/episode/{episode_id}"

    return await client.get(config.base_url, config.token, path)
