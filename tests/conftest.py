"""tests/conftest.py

Pytest configuration and shared fixtures for the portfolio assistant test suite.
"""

from __future__ import annotations

# Standard Library
from datetime import date
from typing import Any, Callable
from unittest.mock import AsyncMock, Mock

# Third-Party Libraries
import httpx
import pytest

# Local Modules
from portfolio_assistant.completion import CompletionConfig, CompletionResult
from portfolio_assistant.knowledge import ContextCache, KnowledgeContextFetcher
from portfolio_assistant.prompt import PromptBuilder
from portfolio_assistant.records import KnowledgeRecord
from portfolio_assistant.supabase import SupabaseConfig


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def completion_body(content: str | None, choices: bool = True) -> dict[str, Any]:
    """Build an OpenAI-style chat.completion response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1760000000,
        "model": "test/model",
        "choices": (
            [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ]
            if choices
            else []
        ),
    }


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def completion_config() -> CompletionConfig:
    return CompletionConfig(
        api_key="test-key",
        base_url="https://llm.test/api/v1",
        model="test/model",
        referer="https://portfolio.test",
        title="Test Portfolio",
    )


@pytest.fixture
def supabase_config() -> SupabaseConfig:
    return SupabaseConfig(url="https://db.test", anon_key="anon-key")


@pytest.fixture
def sample_records() -> list[KnowledgeRecord]:
    """Knowledge records in priority-descending order, two categories."""
    return [
        KnowledgeRecord(id=1, category="skills", topic="stack", content="React, Node.js", priority=3),
        KnowledgeRecord(id=2, category="experience", topic="current role", content="Senior engineer", priority=2),
        KnowledgeRecord(id=3, category="skills", topic="cloud", content="AWS, Docker", priority=1),
    ]


@pytest.fixture
def knowledge_source(sample_records: list[KnowledgeRecord]) -> Mock:
    """Mock data collaborator returning ``sample_records``."""
    source = Mock()
    source.fetch_knowledge_records = AsyncMock(return_value=sample_records)
    return source


@pytest.fixture
def prompt_builder(knowledge_source: Mock, fake_clock: FakeClock) -> PromptBuilder:
    fetcher = KnowledgeContextFetcher(knowledge_source, ContextCache(clock=fake_clock))
    return PromptBuilder(fetcher, owner_name="Jacob", today=lambda: date(2026, 1, 15))


@pytest.fixture
def mock_completion(completion_config: CompletionConfig) -> Mock:
    """Mock completion client whose ``try_complete`` always succeeds.

    Returns:
        Mock with a real ``config`` and an AsyncMock ``try_complete``.
    """
    completion = Mock()
    completion.config = completion_config
    completion.try_complete = AsyncMock(
        return_value=CompletionResult(text="This is a test response from the mock LLM.")
    )
    return completion


@pytest.fixture
def mock_transport_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for ``httpx.AsyncClient`` instances backed by a handler function."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def make_completion_body() -> Callable[..., dict[str, Any]]:
    return completion_body


@pytest.fixture
def sample_messages() -> list[dict[str, str]]:
    """Create sample message history for testing.

    Returns:
        List of sample message dictionaries.
    """
    return [
        {"role": "assistant", "content": "Hi there! How can I help you today?"},
        {"role": "user", "content": "What do you do?"},
        {"role": "assistant", "content": "I build web applications."},
    ]
