# Standard Library
import os
from datetime import date
from typing import Callable

# Local Modules
from portfolio_assistant.knowledge import KnowledgeContextFetcher

DEFAULT_OWNER_NAME = "Jacob Varghese"


class PromptBuilder:
    """Combines the fixed behavioral policy with the live knowledge context."""

    def __init__(
        self,
        fetcher: KnowledgeContextFetcher,
        owner_name: str | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.fetcher = fetcher
        self.owner_name = owner_name or os.getenv("PORTFOLIO_OWNER_NAME", DEFAULT_OWNER_NAME)
        self._today = today

    def base_instruction(self) -> str:
        """Builds the fixed policy sections, stamped with today's date."""
        owner = self.owner_name
        sections = [
            f"You are an AI assistant for {owner}'s portfolio website.",
            "ROLE AND PURPOSE:\n"
            f"- You help visitors learn about {owner}'s skills, experience, projects, and services\n"
            f"- You represent {owner} professionally and should be friendly, helpful, and concise",
            "ALLOWED TOPICS:\n"
            f"- {owner}'s technical skills and expertise\n"
            f"- {owner}'s work experience and background\n"
            f"- {owner}'s projects and portfolio items\n"
            f"- {owner}'s services and how to work with them\n"
            f"- How to contact {owner} (always suggest the contact form or email)",
            "PROHIBITED TOPICS:\n"
            f"- Do NOT discuss topics unrelated to {owner} or their professional work\n"
            f"- Do NOT generate code unless specifically asked about {owner}'s coding skills\n"
            "- Do NOT make up information that isn't provided in your knowledge base\n"
            "- Do NOT discuss personal or political topics",
            "RESPONSE STYLE:\n"
            "- Be concise and to the point\n"
            "- Use markdown formatting for better readability\n"
            "- Use bullet points for lists\n"
            "- Keep responses under 150 words when possible\n"
            "- Be friendly but professional",
            f"Current date: {self._today().strftime('%B %d, %Y')}",
        ]
        return "\n\n".join(sections)

    async def build_system_prompt(self) -> str:
        """Returns the full system message: policy, then the knowledge base."""
        context = await self.fetcher.get_context()
        base = self.base_instruction()
        if not context:
            return base
        return f"{base}\n\n{context}"
