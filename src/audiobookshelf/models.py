"""Data models for Audiobookshelf API integration."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

BASE_URL_ENV = "ABS_BASE_URL"
TOKEN_ENV = "ABS_API_KEY"
API_ROOT = "/api"


@dataclass(frozen=True)
class AudiobookshelfConfig:
    """Connection settings for a single tool invocation.

    Attributes:
        base_url: Server URL, including the "/api" root for resource endpoints
        token: Bearer token (API key) sent with every request
    """

    base_url: str
    token: str

    @classmethod
    def resolve(
        cls,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        root_level: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AudiobookshelfConfig":
        """Build configuration from per-call values with environment fallback.

        Per-call values win; an empty string counts as absent. The "/api" root
        is appended unless the endpoint lives at the server root
        (ping, healthcheck, status).

        Args:
            base_url: Per-call base URL, e.g. "https://abs.example.com"
            token: Per-call bearer token
            root_level: True for endpoints outside the API root
            environ: Environment mapping (default: os.environ)

        Returns:
            AudiobookshelfConfig ready for a request

        Raises:
            ConfigurationError: If base_url or token is still empty
        """
        env = os.environ if environ is None else environ

        resolved_url = base_url or env.get(BASE_URL_ENV, "")
        resolved_token = token or env.get(TOKEN_ENV, "")

        if not resolved_url:
            raise ConfigurationError("base_url", BASE_URL_ENV)
        if not resolved_token:
            raise ConfigurationError("token", TOKEN_ENV)

        resolved_url = resolved_url.rstrip("/")
        if not root_level:
            resolved_url = f"{resolved_url}{API_ROOT}"

        return cls(base_url=resolved_url, token=resolved_token)
