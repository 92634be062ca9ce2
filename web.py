"""web.py

Gradio web interface for the portfolio assistant.
Serves the chat widget at 0.0.0.0:7860.

The Conversation is a module-level singleton holding one visitor's
transcript; this mirrors the single-tab, no-persistence model of the site.

Exposed interfaces:
    demo (gr.Blocks): The Gradio application.  Launch via ``python web.py``.
"""

from __future__ import annotations

# Standard Library
import os
import logging

# Third-Party Libraries
import gradio as gr
from dotenv import load_dotenv

# Local Modules
from portfolio_assistant import build_conversation
from portfolio_assistant.conversation import Conversation

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

QUICK_QUESTIONS: list[str] = [
    "What technologies do you work with?",
    "Tell me about your experience",
    "What projects have you worked on?",
    "How can I contact you?",
]

# ---------------------------------------------------------------------------
# Singleton conversation
# ---------------------------------------------------------------------------
conversation: Conversation = build_conversation()
_model: str = conversation.orchestrator.completion.config.model
logger.info("Conversation ready: model=%s", _model)


# ---------------------------------------------------------------------------
# Gradio handler functions
# ---------------------------------------------------------------------------


async def respond(
    message: str,
    history: list[dict[str, str]],
) -> tuple[str, list[dict[str, str]]]:
    """Send a user message and refresh the chat display.

    The Conversation keeps the authoritative transcript; the ``history``
    argument is only returned untouched when nothing was sent.

    Args:
        message: The user's input text.
        history: Current Gradio chat history (list of role/content dicts).

    Returns:
        A tuple of (cleared input text, updated chat history).
    """
    reply = await conversation.send(message)
    if reply is None:
        return message if conversation.busy else "", history
    return "", conversation.display_messages()


def clear_history() -> list[dict[str, str]]:
    """Reset the conversation to its greeting.

    Returns:
        Greeting-only history consumed by the Gradio Chatbot component.
    """
    conversation.clear()
    logger.info("Conversation cleared via web UI")
    return conversation.display_messages()


# ---------------------------------------------------------------------------
# Gradio UI layout
# ---------------------------------------------------------------------------

with gr.Blocks(title="AI Assistant") as demo:
    gr.Markdown("# AI Assistant\n*Ask about skills, experience, projects and services.*")

    chatbot = gr.Chatbot(
        value=conversation.display_messages(),
        label="AI Assistant",
        height=540,
        layout="bubble",
        buttons=["copy"],
    )

    with gr.Row():
        txt = gr.Textbox(
            placeholder="Type your message and press Enter…",
            show_label=False,
            container=False,
            scale=9,
            autofocus=True,
        )
        send_btn = gr.Button("Send", variant="primary", scale=1)

    gr.Examples(examples=QUICK_QUESTIONS, inputs=txt)

    with gr.Row():
        clear_btn = gr.Button("🗑️  Clear", variant="secondary")
        gr.Markdown(f"**Model:** `{_model}`")

    # ------------------------------------------------------------------
    # Event wiring
    # ------------------------------------------------------------------
    txt.submit(respond, inputs=[txt, chatbot], outputs=[txt, chatbot])
    send_btn.click(respond, inputs=[txt, chatbot], outputs=[txt, chatbot])
    clear_btn.click(clear_history, outputs=chatbot)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    demo.launch(
        server_name="0.0.0.0",
        server_port=int(os.getenv("PORT", "7860")),
        theme=gr.themes.Soft(),
    )
