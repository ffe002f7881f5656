"""Audiobookshelf API client module for media server access."""

__version__ = "1.0.0"

from .client import DEFAULT_TIMEOUT, AudiobookshelfClient
from .exceptions import (
    AudiobookshelfError,
    ConfigurationError,
    MissingArgumentError,
    TransportError,
    UpstreamError,
)
from .models import API_ROOT, BASE_URL_ENV, TOKEN_ENV, AudiobookshelfConfig

__all__ = [
    # Client
    "AudiobookshelfClient",
    "DEFAULT_TIMEOUT",
    # Models
    "AudiobookshelfConfig",
    "API_ROOT",
    "BASE_URL_ENV",
    "TOKEN_ENV",
    # Exceptions
    "AudiobookshelfError",
    "ConfigurationError",
    "MissingArgumentError",
    "TransportError",
    "UpstreamError",
]
