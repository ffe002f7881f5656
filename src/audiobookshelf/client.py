"""HTTP client for the Audiobookshelf REST API."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from .exceptions import TransportError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class AudiobookshelfClient:
    """Async HTTP client issuing single, unretried Audiobookshelf requests.

    The client holds no server configuration: base URL and token are passed
    with every request, so one instance can serve any number of concurrent
    tool invocations against any server.

    Attributes:
        timeout: Seconds allowed for a whole call, body read included
        client: httpx.AsyncClient used for HTTP requests

    Example:
        >>> client = AudiobookshelfClient()
        >>> body = await client.request(
        ...     "https://abs.example.com/api", "secret", "/libraries"
        ... )
        >>> await client.close()
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize Audiobookshelf API client.

        Args:
            http_client: Preconfigured httpx.AsyncClient (default: a new one)
            timeout: Overall per-call timeout in seconds (default: 10)
        """
        self.timeout = timeout

        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                limits=httpx.Limits(
                    max_connections=100,  # Max total connections
                    max_keepalive_connections=20,  # Max persistent connections
                    keepalive_expiry=5.0,  # Keep connections alive for 5s
                ),
                follow_redirects=True,
            )
        self.client = http_client

    async def __aenter__(self) -> "AudiobookshelfClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.aclose()

    @staticmethod
    def _build_url(base_url: str, path: str) -> str:
        """Join base URL and path.

        Only a trailing slash on base_url is trimmed; path is used verbatim.
        """
        return base_url.rstrip("/") + path

    @staticmethod
    def _build_headers(token: str, has_body: bool) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        base_url: str,
        token: str,
        path: str,
        method: str = "GET",
        payload: Optional[Any] = None,
    ) -> bytes:
        """Perform one request and return the raw response body.

        Args:
            base_url: Server URL, "/api" root included where applicable
            token: Bearer token (omitted from headers when empty)
            path: Endpoint path appended verbatim (e.g., "/libraries/lib1")
            method: "GET" or "POST"
            payload: JSON-serializable body; None sends no body

        Returns:
            Response body bytes, unmodified

        Raises:
            TransportError: For request construction, network errors and timeouts
            UpstreamError: For any status outside [200, 300)
        """
        url = self._build_url(base_url, path)

        content = None
        if payload is not None:
            try:
                content = json.dumps(payload).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise TransportError(f"marshal payload: {e}", cause=e) from e

        headers = self._build_headers(token, content is not None)

        logger.debug(f"{method} {url}")
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, headers=headers, content=content),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"{method} {url} timed out after {self.timeout}s")
            raise TransportError(
                f"call Audiobookshelf API: timed out after {self.timeout:g}s", cause=e
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise TransportError(f"call Audiobookshelf API: {e}", cause=e) from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")
            raise UpstreamError(
                response.status_code, response.reason_phrase, response.text
            )

        logger.debug(f"{method} {url} returned {len(response.content)} bytes")
        return response.content

    async def get(self, base_url: str, token: str, path: str) -> bytes:
        """GET an endpoint; see request()."""
        return await self.request(base_url, token, path)

    async def post(
        self, base_url: str, token: str, path: str, payload: Optional[Any] = None
    ) -> bytes:
        """POST a JSON payload (or no body); see request()."""
        return await self.request(base_url, token, path, method="POST", payload=payload)
