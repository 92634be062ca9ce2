"""portfolio_assistant/errors.py

Exception hierarchy for the assistant pipeline.
"""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for every error raised by portfolio_assistant."""


class ConfigurationError(AssistantError):
    """Required configuration (API key, endpoint) is missing or invalid."""


class KnowledgeFetchError(AssistantError):
    """The knowledge-base query against the data collaborator failed."""


class ChatError(AssistantError):
    """A completion call produced no usable reply.

    Attributes:
        kind: Short machine-readable code used to pick the user-facing text.
    """

    kind = "chat"


class CompletionTransportError(ChatError):
    """Network, timeout or HTTP failure talking to the completion API."""

    kind = "transport"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class CompletionEmptyError(ChatError):
    """The API answered but returned no choices or empty content."""

    kind = "empty"


class DegenerateContentWarning(UserWarning):
    """A reply was present but looked like error text or boilerplate."""
