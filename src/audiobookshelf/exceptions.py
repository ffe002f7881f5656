"""Exception classes for Audiobookshelf API client."""

from typing import Optional


class AudiobookshelfError(Exception):
    """Base exception for all Audiobookshelf tool errors.

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(AudiobookshelfError):
    """Base URL or token missing after per-call and environment lookup.

    Attributes:
        field: Name of the missing setting ("base_url" or "token")
        env_var: Environment variable consulted as fallback
    """

    def __init__(self, field: str, env_var: str):
        self.field = field
        self.env_var = env_var
        super().__init__(
            f"{field} parameter or {env_var} environment variable is required"
        )


class MissingArgumentError(AudiobookshelfError):
    """Required tool argument absent, empty, or of the wrong type.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        super().__init__(message or f"required argument \"{argument}\" not found")


class TransportError(AudiobookshelfError):
    """Request could not be built, sent, or completed in time.

    Attributes:
        cause: Underlying exception raised by the HTTP layer
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class UpstreamError(AudiobookshelfError):
    """Audiobookshelf answered with a status outside [200, 300).

    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        body: Response body text, kept for diagnostics
    """

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        status = f"{status_code} {reason}".strip()
        super().__init__(f"Audiobookshelf API returned {status}: {body}")
