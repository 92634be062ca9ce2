#!/usr/bin/env python3
"""main.py

Terminal front end for the portfolio assistant.
Provides an interactive CLI chat using the Rich library.
"""

from __future__ import annotations

# Standard Library
import sys
import asyncio
from typing import NoReturn

# Third-Party Libraries
from dotenv import load_dotenv
from rich.panel import Panel
from rich.theme import Theme
from rich.prompt import Prompt
from rich.console import Console
from rich.markdown import Markdown

# Local Modules
from portfolio_assistant import build_conversation
from portfolio_assistant.conversation import Conversation
from portfolio_assistant.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Initialize Rich console with custom theme
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "user": "bold blue",
        "assistant": "green",
    }
)
console = Console(theme=custom_theme)


def display_help() -> None:
    """Display available commands and usage information."""
    help_text = """
**Available Commands:**

- `/help` - Show this help message
- `/clear` - Clear the conversation and start over
- `/stats` - Show conversation statistics
- `/quit` or `/exit` - Leave the chat
- Any other text - Ask the assistant

**Try asking:**

- What technologies do you work with?
- Tell me about your experience
- What projects have you worked on?
- How can I contact you?
    """
    console.print(Panel(Markdown(help_text), title="Help", border_style="cyan"))


def display_stats(conversation: Conversation) -> None:
    """Display current conversation statistics.

    Args:
        conversation: The active Conversation.
    """
    config = conversation.orchestrator.completion.config
    has_system = any(msg["role"] == "system" for msg in conversation.get_context())

    stats_text = f"""
**Conversation Statistics:**

- Messages: {conversation.message_count()}
- System prompt loaded: {"yes" if has_system else "not yet"}
- Model: `{config.model}`
- Endpoint: `{config.base_url}`
    """
    console.print(Panel(Markdown(stats_text), title="Statistics", border_style="cyan"))


def display_reply(content: str) -> None:
    """Render an assistant reply as markdown in a green panel."""
    console.print(
        Panel(
            Markdown(content),
            title="[bold green]Assistant[/bold green]",
            border_style="green",
        )
    )
    console.print()


async def chat_loop(conversation: Conversation) -> None:
    """Read user input and relay it to the conversation until the user quits."""
    display_reply(conversation.greeting)

    while True:
        user_input = (
            await asyncio.to_thread(Prompt.ask, "[bold blue]You[/bold blue]")
        ).strip()

        if not user_input:
            continue

        command = user_input.lower()
        if command in ["/quit", "/exit"]:
            return

        elif command == "/help":
            display_help()
            continue

        elif command == "/clear":
            conversation.clear()
            console.print("🗑️  Conversation cleared.\n", style="success")
            display_reply(conversation.greeting)
            continue

        elif command == "/stats":
            display_stats(conversation)
            continue

        console.print()
        with console.status("[bold green]Typing...", spinner="dots"):
            reply = await conversation.send(user_input)

        if reply is not None:
            display_reply(reply)


def main() -> NoReturn:
    """Main entry point for the CLI."""
    console.print("⚙️  Starting portfolio assistant...", style="info")

    try:
        conversation = build_conversation()
    except ConfigurationError as exc:
        console.print(f"❌ {exc}", style="error")
        console.print(
            "\nSet OPENROUTER_API_KEY, SUPABASE_URL and SUPABASE_ANON_KEY "
            "in your environment or a .env file.\n",
            style="warning",
        )
        sys.exit(1)

    console.print(
        "Type [bold]/help[/bold] for commands, or start chatting!\n", style="info"
    )

    try:
        asyncio.run(chat_loop(conversation))
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n👋 Interrupted. Goodbye!\n", style="warning")
        sys.exit(0)

    console.print("\n👋 Goodbye!\n", style="success")
    sys.exit(0)


if __name__ == "__main__":
    main()
