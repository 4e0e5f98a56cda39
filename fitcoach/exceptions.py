from typing import Any, Dict, Optional


class FitCoachError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        message: internal description, logged server-side
        public_message: the flat message returned to the client
        http_status: status code used by the exception handler
    """

    http_status = 500
    default_public_message = "Internal server error"

    def __init__(self, message: str = "", public_message: Optional[str] = None):
        super().__init__(message or self.default_public_message)
        self.message = message or self.default_public_message
        self.public_message = public_message or self.default_public_message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.public_message}

    def __str__(self) -> str:
        return self.message


class AuthenticationError(FitCoachError):
    """No session, or the bearer token was rejected by Supabase Auth."""

    http_status = 401
    default_public_message = "Unauthorized"


class ValidationError(FitCoachError):
    """Missing or malformed request fields."""

    http_status = 400
    default_public_message = "Invalid request"

    def __init__(self, message: str = "", public_message: Optional[str] = None):
        # the message is safe to show; it describes the caller's own input
        super().__init__(message, public_message or message or None)


class NotFoundError(FitCoachError):
    http_status = 404
    default_public_message = "Not found"

    def __init__(self, message: str = "", public_message: Optional[str] = None):
        super().__init__(message, public_message or message or None)


class GenerationError(FitCoachError):
    """The AI response could not be turned into a usable result."""

    default_public_message = "Failed to generate plan"


class ExtractionError(GenerationError):
    """No brace-delimited JSON blob in the AI text."""


class ParseError(GenerationError):
    """The JSON blob was not valid JSON."""


class NormalizationError(GenerationError):
    """The JSON parsed but did not yield a well-formed plan."""


class AIProviderError(GenerationError):
    """The AI provider call failed or returned nothing."""


class GenerationTimeoutError(GenerationError):
    """The AI provider did not answer within the allowed time."""


class DownstreamError(FitCoachError):
    """A database read or write failed."""
