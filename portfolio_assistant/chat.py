"""portfolio_assistant/chat.py

Conversation orchestration for the portfolio assistant.
Assembles the outgoing request (system prompt + history + new user turn),
makes exactly one completion call, screens the reply and maps every failure
to a user-facing apology so callers always get text back.
"""

from __future__ import annotations

# Standard Library
import logging
from dataclasses import dataclass

# Local Modules
from portfolio_assistant.classifier import classify
from portfolio_assistant.completion import CompletionClient, CompletionResult
from portfolio_assistant.errors import (
    ChatError,
    CompletionTransportError,
    DegenerateContentWarning,
)
from portfolio_assistant.prompt import PromptBuilder

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

TRANSPORT_FALLBACK = "I'm sorry, I encountered an error. Please try again later."
EMPTY_FALLBACK = (
    "I'm sorry, I couldn't come up with an answer to that. "
    "Could you try rephrasing your question, or clear the conversation and start over?"
)
DEGENERATE_FALLBACK = (
    "I'm sorry, I seem to be having trouble generating a proper response. "
    "Could you try asking your question differently? "
    "You can also try clearing the chat and starting again."
)

FALLBACK_BY_KIND: dict[str, str] = {
    "transport": TRANSPORT_FALLBACK,
    "empty": EMPTY_FALLBACK,
}


@dataclass(frozen=True)
class TurnResult:
    """Everything one turn produced.

    Attributes:
        request: The exact message list dispatched to the model.
        reply: Text to show the user (never empty).
        error: The completion failure, if the reply is a fallback for one.
        warning: Set when a degenerate model reply was replaced.
    """

    request: list[dict[str, str]]
    reply: str
    error: ChatError | None = None
    warning: DegenerateContentWarning | None = None

    @property
    def transcript(self) -> list[dict[str, str]]:
        """The dispatched request followed by the assistant's reply."""
        return [*self.request, {"role": "assistant", "content": self.reply}]


class ChatOrchestrator:
    """Runs single conversation turns against the remote model."""

    def __init__(
        self,
        completion: CompletionClient,
        prompt_builder: PromptBuilder,
    ) -> None:
        self.completion = completion
        self.prompt_builder = prompt_builder

        logger.info(
            "ChatOrchestrator initialized: model=%s, endpoint=%s, owner=%s",
            completion.config.model,
            completion.config.base_url,
            prompt_builder.owner_name,
        )

    async def _with_system_message(
        self, messages: list[dict[str, str]]
    ) -> list[dict[str, str]]:
        """Ensure exactly one system message, placed first."""
        system = [msg for msg in messages if msg["role"] == "system"]
        others = [msg for msg in messages if msg["role"] != "system"]

        if len(system) > 1:
            logger.warning("History held %d system messages; keeping the first", len(system))
        if system:
            return [system[0], *others]

        try:
            content = await self.prompt_builder.build_system_prompt()
        except Exception as exc:
            logger.warning(
                "System prompt build failed, sending fixed instructions only: %s",
                exc,
                exc_info=True,
            )
            content = self.prompt_builder.base_instruction()
        return [{"role": "system", "content": content}, *others]

    def _resolve(self, result: CompletionResult) -> tuple[str, DegenerateContentWarning | None]:
        if result.error is not None:
            return FALLBACK_BY_KIND.get(result.error.kind, TRANSPORT_FALLBACK), None

        text = result.text or ""
        reason = classify(text)
        if reason is None:
            return text, None

        logger.warning("Unexpected AI response detected (reason=%s): %r", reason, text)
        return DEGENERATE_FALLBACK, DegenerateContentWarning(reason)

    def _log_failure(self, error: ChatError) -> None:
        if isinstance(error, CompletionTransportError):
            logger.error(
                "Completion transport error: %s (status=%s, payload=%r)",
                error,
                error.status_code,
                error.payload,
            )
        else:
            logger.error("Completion returned no usable content: %s", error)

    async def run_turn(
        self,
        history: list[dict[str, str]],
        new_user_text: str,
    ) -> TurnResult:
        """Process one user message.

        The caller's ``history`` is copied, never modified.

        Args:
            history: Prior messages, with or without a system message.
            new_user_text: The user's new input.

        Returns:
            TurnResult with the dispatched request and the reply to display.
        """
        messages = [{"role": msg["role"], "content": msg["content"]} for msg in history]
        messages.append({"role": "user", "content": new_user_text})
        messages = await self._with_system_message(messages)

        logger.debug("Sending %d messages to LLM", len(messages))

        try:
            result = await self.completion.try_complete(messages)
        except Exception as exc:
            logger.error("Chat error: %s", exc, exc_info=True)
            result = CompletionResult(error=CompletionTransportError(str(exc)))

        if result.error is not None:
            self._log_failure(result.error)

        reply, warning = self._resolve(result)
        return TurnResult(request=messages, reply=reply, error=result.error, warning=warning)

    async def send_message(
        self,
        history: list[dict[str, str]],
        new_user_text: str,
    ) -> str:
        """Send a message and get the reply text. Never raises on model failure."""
        turn = await self.run_turn(history, new_user_text)
        return turn.reply
