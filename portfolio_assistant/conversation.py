"""portfolio_assistant/conversation.py

Per-session transcript owned by a presentation shell.
Tracks the message history, the busy latch that blocks overlapping sends,
and the clear/reset behavior of the chat window.
"""

from __future__ import annotations

# Standard Library
import logging

# Local Modules
from portfolio_assistant.chat import ChatOrchestrator

logger = logging.getLogger(__name__)


class Conversation:
    """A single chat session's history and send latch.

    Only one turn may be in flight at a time: a ``send`` issued while a
    reply is outstanding is rejected and leaves the transcript untouched.
    Nothing is persisted; the transcript lives as long as the instance.
    """

    def __init__(
        self,
        orchestrator: ChatOrchestrator,
        owner_name: str | None = None,
        greeting: str | None = None,
    ) -> None:
        """Initialize the conversation.

        Args:
            orchestrator: Runs each turn against the remote model.
            owner_name: Used in the default greeting.
            greeting: Opening assistant message shown after every reset.
                Pass ``""`` for no greeting.
        """
        self.orchestrator = orchestrator
        if greeting is None:
            who = f"{owner_name}'s" if owner_name else "the"
            greeting = f"Hi there! I'm {who} AI assistant. How can I help you today?"
        self.greeting = greeting
        self.busy = False
        self._generation = 0
        self._messages: list[dict[str, str]] = []
        self.clear()

    async def send(self, text: str) -> str | None:
        """Send user input and return the assistant's reply.

        Args:
            text: Raw user input; surrounding whitespace is stripped.

        Returns:
            The reply text, or None when the input is blank, a previous
            turn is still in flight, or the conversation was cleared before
            the reply arrived.
        """
        text = text.strip()
        if not text:
            return None

        if self.busy:
            logger.warning("Send rejected: a reply is still pending")
            return None

        generation = self._generation
        self.busy = True
        try:
            turn = await self.orchestrator.run_turn(self._messages, text)
        finally:
            if generation == self._generation:
                self.busy = False

        if generation != self._generation:
            # Cleared while the reply was in flight.
            logger.info("Discarding reply to a cleared conversation")
            return None

        self._messages = turn.transcript
        return turn.reply

    def get_context(self) -> list[dict[str, str]]:
        """Return a copy of the transcript, system message first if present."""
        return [dict(msg) for msg in self._messages]

    def display_messages(self) -> list[dict[str, str]]:
        """Return the user-visible part of the transcript (no system message)."""
        return [dict(msg) for msg in self._messages if msg["role"] != "system"]

    def clear(self) -> None:
        """Reset the transcript to the greeting.

        The system message is dropped too, so the next turn rebuilds it with
        the current knowledge context.
        """
        self._messages = (
            [{"role": "assistant", "content": self.greeting}] if self.greeting else []
        )
        self.busy = False
        self._generation += 1
        logger.info("Conversation history cleared")

    def message_count(self) -> int:
        """Number of messages, excluding the system message."""
        return len(self.display_messages())
