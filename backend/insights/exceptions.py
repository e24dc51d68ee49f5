# insights/exceptions.py
"""
Failures of the AI layer.

Storage failures are not wrapped: Django's ``DatabaseError`` family reaches
the caller untouched.
"""

from typing import Optional


class GenerationError(Exception):
    """
    The AI provider failed or returned content that cannot be used.

    ``error_code`` is machine-readable (AUTH_ERROR, RATE_LIMIT, TIMEOUT,
    CONNECTION_ERROR, BAD_REQUEST, API_ERROR_<status>, EMPTY_RESPONSE,
    JSON_PARSE_ERROR, ...).
    """

    default_code = "GENERATION_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_code = error_code or self.default_code


class GeneratorNotConfiguredError(GenerationError):
    """Raised when the generator is used without an API key."""

    default_code = "GENERATOR_NOT_CONFIGURED"


class MalformedResponseError(GenerationError):
    """The provider answered, but not with the JSON the caller asked for."""

    default_code = "JSON_PARSE_ERROR"


class MalformedCachedPayloadError(Exception):
    """A cached entry's content could not be decoded by its reader."""

    def __init__(self, cache_key: str, message: str = "") -> None:
        super().__init__(message or f"Cached content for '{cache_key}' is not valid JSON")
        self.cache_key = cache_key
