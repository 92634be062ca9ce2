"""portfolio_assistant/completion.py

Client for an OpenAI-compatible chat-completion endpoint (OpenRouter by
default). One request per call, no streaming, no retries.
"""

from __future__ import annotations

# Standard Library
import os
import logging
from dataclasses import dataclass

# Third-Party Libraries
import httpx
from openai import APIError, APIStatusError, APITimeoutError, AsyncOpenAI

# Local Modules
from portfolio_assistant.errors import (
    ChatError,
    ConfigurationError,
    CompletionEmptyError,
    CompletionTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "deepseek/deepseek-chat-v3-0324:free"


@dataclass(frozen=True)
class CompletionConfig:
    """Remote model settings, fixed for the lifetime of the process."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 30.0
    referer: str = "http://localhost"
    title: str = "Portfolio Assistant"

    @classmethod
    def from_env(cls) -> "CompletionConfig":
        """Load settings from environment variables.

        Raises:
            ConfigurationError: If OPENROUTER_API_KEY is not set.
        """
        api_key = os.getenv("OPENROUTER_API_KEY", "")
        if not api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is not set")
        return cls(
            api_key=api_key,
            base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            model=os.getenv("OPENROUTER_MODEL_NAME") or DEFAULT_MODEL,
            timeout=float(os.getenv("COMPLETION_TIMEOUT", "30")),
            referer=os.getenv("SITE_URL", "http://localhost"),
            title=os.getenv("SITE_TITLE", "Portfolio Assistant"),
        )


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of one completion call: either ``text`` or ``error`` is set."""

    text: str | None = None
    error: ChatError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CompletionClient:
    """Sends a full transcript and returns the first choice's content."""

    def __init__(
        self,
        config: CompletionConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Endpoint, credential and sampling settings.
            http_client: Transport handed to the OpenAI SDK, mainly so tests
                can mount an ``httpx.MockTransport``.
        """
        self.config = config
        self.client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
            http_client=http_client,
            default_headers={
                # Attribution only; OpenRouter uses these for its rankings.
                "HTTP-Referer": config.referer,
                "X-Title": config.title,
            },
        )

    async def aclose(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Run one chat completion.

        Args:
            messages: Ordered role/content dicts, system message first.

        Returns:
            The first choice's message content.

        Raises:
            CompletionTransportError: On network failure, timeout, non-2xx
                status, or a body that cannot be decoded.
            CompletionEmptyError: If the reply has no choices or no content.
        """
        logger.debug("Sending %d messages (model=%s)", len(messages), self.config.model)

        try:
            completion = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except APITimeoutError as exc:
            raise CompletionTransportError(f"Completion request timed out: {exc}") from exc
        except APIStatusError as exc:
            raise CompletionTransportError(
                f"Completion API returned HTTP {exc.status_code}",
                status_code=exc.status_code,
                payload=exc.body,
            ) from exc
        except (APIError, ValueError) as exc:
            raise CompletionTransportError(f"Completion request failed: {exc}") from exc

        choices = getattr(completion, "choices", None)
        if not choices:
            raise CompletionEmptyError(f"No choices in completion response: {completion!r}")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not content or not content.strip():
            raise CompletionEmptyError(f"Empty response content from model: {completion!r}")

        logger.debug("Received completion: %d chars", len(content))
        return content

    async def try_complete(self, messages: list[dict[str, str]]) -> CompletionResult:
        """Like ``complete`` but returns failures as a value instead of raising."""
        try:
            return CompletionResult(text=await self.complete(messages))
        except ChatError as exc:
            return CompletionResult(error=exc)
