"""
Exception types raised by the caption service.
Routes map these to the JSON error envelope.
"""

from typing import Optional


class CaptionServiceError(Exception):
    """Base class for every error the caption service reports."""


class ValidationError(CaptionServiceError):
    """The inbound request body is missing fields or has the wrong types."""


class ConfigurationError(CaptionServiceError):
    """A required setting is missing or could not be parsed."""


# --- UPSTREAM ERRORS ---

class UpstreamError(CaptionServiceError):
    """Base class for failures talking to the chat-completion API."""


class UpstreamTransportError(UpstreamError):
    """DNS, connect, TLS or timeout failure before a response arrived."""


class UpstreamStatusError(UpstreamError):
    """The upstream answered with an HTTP status of 400 or above."""

    def __init__(self, status: str, body: str, status_code: Optional[int] = None):
        self.status = status
        self.status_code = status_code
        self.body = body
        super().__init__(f"OpenRouter error status: {status} | body: {body}")


class UpstreamResponseError(UpstreamError):
    """The upstream body was empty, not JSON, or carried no usable text."""

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)
