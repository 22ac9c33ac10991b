"""
Exceptions for the This or That service.

Generation errors are created by the Gemini client and returned inside a
GenerationResult; they are never raised past the client boundary.
"""
import json
from typing import Any, Optional


USER_HINT = "Please check your network or API key configuration."


class ThisOrThatError(Exception):
    """Base exception for the This or That service."""


class ConfigurationError(ThisOrThatError):
    """Raised when required configuration is missing or invalid."""


class ValidationError(ThisOrThatError):
    """Raised when client input fails validation."""


class GenerationError(ThisOrThatError):
    """Base class for failures while generating an option pair."""

    kind = "generation"

    @property
    def user_message(self) -> str:
        """Message shown in place of the option panels."""
        return f"Failed to fetch options: {self}. {USER_HINT}"


class NetworkError(GenerationError):
    """Transport failure talking to the generation service."""

    kind = "network"


class HttpStatusError(GenerationError):
    """Generation service answered with a non-success status."""

    kind = "http_status"

    def __init__(self, status: int, body: Optional[Any] = None):
        self.status = status
        self.body = body
        details = json.dumps(body) if isinstance(body, (dict, list)) else body
        super().__init__(f"HTTP error! Status: {status}. Details: {details}")


class ParseError(GenerationError):
    """Response envelope or payload could not be decoded."""

    kind = "parse"


class SchemaError(GenerationError):
    """Decoded payload is not exactly two non-empty strings."""

    kind = "schema"
