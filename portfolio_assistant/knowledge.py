"""portfolio_assistant/knowledge.py

Knowledge-base context for the system prompt.
Formats prioritized records into prompt text and keeps the result in a
time-bounded cache so repeated turns don't re-query the database.
"""

from __future__ import annotations

# Standard Library
import time
import logging
from typing import Callable, Iterable, Protocol

# Local Modules
from portfolio_assistant.errors import KnowledgeFetchError
from portfolio_assistant.records import KnowledgeRecord

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60
KNOWLEDGE_BASE_HEADER = "### KNOWLEDGE BASE ###"


class KnowledgeSource(Protocol):
    async def fetch_knowledge_records(self) -> list[KnowledgeRecord]: ...


def format_context(records: Iterable[KnowledgeRecord]) -> str:
    """Group records by category into a markdown-like knowledge block.

    Categories appear in order of first appearance and records keep their
    input order within a category. An empty input yields ``""``.

    Args:
        records: Knowledge records, normally ordered by priority descending.

    Returns:
        The formatted knowledge-base section.
    """
    grouped: dict[str, list[KnowledgeRecord]] = {}
    for record in records:
        grouped.setdefault(record.category, []).append(record)

    if not grouped:
        return ""

    blocks: list[str] = [KNOWLEDGE_BASE_HEADER]
    for category, items in grouped.items():
        blocks.append(f"## {category.upper()}")
        blocks.extend(f"# {item.topic}\n{item.content}" for item in items)

    return "\n\n".join(blocks) + "\n"


class ContextCache:
    """Single-value cache with a fixed time-to-live.

    The clock is injectable so tests can step time deterministically.
    """

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._value: str | None = None
        self._fetched_at: float | None = None

    def get(self) -> str | None:
        """Return the cached value, or None when empty or stale."""
        if self.is_stale():
            return None
        return self._value

    def set(self, value: str) -> None:
        # Last write wins when two refreshes overlap.
        self._value = value
        self._fetched_at = self._clock()

    def is_stale(self) -> bool:
        if self._value is None or self._fetched_at is None:
            return True
        return self._clock() - self._fetched_at >= self.ttl

    def clear(self) -> None:
        self._value = None
        self._fetched_at = None


class KnowledgeContextFetcher:
    """Produces the formatted knowledge context, served from cache when fresh."""

    def __init__(
        self,
        source: KnowledgeSource,
        cache: ContextCache | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            source: Data collaborator exposing ``fetch_knowledge_records``.
            cache: Cache to use. A private five-minute cache is created when
                omitted.
        """
        self.source = source
        self.cache = cache or ContextCache()

    async def get_context(self) -> str:
        """Return the knowledge context, refreshing it if the cache is stale.

        Never raises: a failed query degrades to an empty context and is not
        cached, so the next call tries again.
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        try:
            records = await self.source.fetch_knowledge_records()
        except KnowledgeFetchError as exc:
            logger.warning("Knowledge base unavailable, using empty context: %s", exc)
            return ""
        except Exception as exc:
            logger.warning(
                "Knowledge source failed unexpectedly, using empty context: %s", exc, exc_info=True
            )
            return ""

        context = format_context(records)
        self.cache.set(context)
        logger.info(
            "Knowledge context refreshed: %d records, %d chars",
            len(records),
            len(context),
        )
        return context

    def invalidate(self) -> None:
        """Drop the cached context so the next call re-queries."""
        self.cache.clear()
