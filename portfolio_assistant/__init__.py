"""portfolio_assistant

Chat assistant pipeline for a personal portfolio site: knowledge-base
context, system prompt assembly, remote completion and reply screening.
"""

from __future__ import annotations

# Local Modules
from portfolio_assistant.chat import ChatOrchestrator, TurnResult
from portfolio_assistant.conversation import Conversation
from portfolio_assistant.completion import CompletionClient, CompletionConfig
from portfolio_assistant.knowledge import ContextCache, KnowledgeContextFetcher
from portfolio_assistant.prompt import PromptBuilder
from portfolio_assistant.supabase import SupabaseClient, SupabaseConfig

__all__ = [
    "ChatOrchestrator",
    "CompletionClient",
    "CompletionConfig",
    "ContextCache",
    "Conversation",
    "KnowledgeContextFetcher",
    "PromptBuilder",
    "SupabaseClient",
    "SupabaseConfig",
    "TurnResult",
    "build_conversation",
]


def build_conversation(
    completion_config: CompletionConfig | None = None,
    supabase_config: SupabaseConfig | None = None,
    owner_name: str | None = None,
) -> Conversation:
    """Wire the full assistant stack from environment configuration.

    Args:
        completion_config: Remote model settings. Defaults to
            ``CompletionConfig.from_env()``.
        supabase_config: Data collaborator settings. Defaults to
            ``SupabaseConfig.from_env()``.
        owner_name: Portfolio owner named in the system prompt. Falls back to
            the PORTFOLIO_OWNER_NAME env var.

    Returns:
        A ready-to-use Conversation seeded with its greeting.
    """
    completion_config = completion_config or CompletionConfig.from_env()
    supabase_config = supabase_config or SupabaseConfig.from_env()

    fetcher = KnowledgeContextFetcher(SupabaseClient(supabase_config))
    builder = PromptBuilder(fetcher, owner_name=owner_name)
    orchestrator = ChatOrchestrator(CompletionClient(completion_config), builder)
    return Conversation(orchestrator, owner_name=builder.owner_name)
