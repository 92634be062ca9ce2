"""portfolio_assistant/supabase.py

Read-only access to the hosted portfolio database over its PostgREST API.

Only ``fetch_knowledge_records`` raises; every other read fails soft to an
empty or default value, logging the failure, so the site keeps rendering with
whatever content is reachable.
"""

from __future__ import annotations

# Standard Library
import os
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, TypeVar

# Third-Party Libraries
import httpx
from pydantic import BaseModel, ValidationError

# Local Modules
from portfolio_assistant.errors import ConfigurationError, KnowledgeFetchError
from portfolio_assistant.records import (
    FAQ,
    ContactInfo,
    ContactResult,
    ContactSubmission,
    Education,
    Experience,
    KnowledgeRecord,
    PersonalInfo,
    Project,
    Service,
    SocialLink,
    Technology,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

KNOWLEDGE_TABLE = "ai_assistant_data"

# httpx.InvalidURL is not an HTTPError subclass.
QUERY_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError)


@dataclass(frozen=True)
class SupabaseConfig:
    url: str
    anon_key: str
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "SupabaseConfig":
        """Load the project URL and anon key from environment variables."""
        url = os.getenv("SUPABASE_URL", "")
        anon_key = os.getenv("SUPABASE_ANON_KEY", "")
        if not url or not anon_key:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must both be set"
            )
        return cls(
            url=url.rstrip("/"),
            anon_key=anon_key,
            timeout=float(os.getenv("SUPABASE_TIMEOUT", "10")),
        )


class SupabaseClient:
    """Thin async wrapper over the Supabase REST endpoint."""

    def __init__(
        self,
        config: SupabaseConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Project URL, anon key and request timeout.
            http_client: Pre-built client, mainly for tests. When omitted an
                ``httpx.AsyncClient`` is created and owned by this instance.
        """
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "SupabaseClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {self.config.anon_key}",
            "Accept": "application/json",
        }

    async def _select(
        self, table: str, params: dict[str, str] | None = None
    ) -> list[dict[str, Any]]:
        """Run a PostgREST select and return the decoded rows.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
            ValueError: If the body is not a JSON array.
        """
        query = {"select": "*"}
        query.update(params or {})
        response = await self._http.get(
            f"{self.config.url}/rest/v1/{table}",
            params=query,
            headers=self._headers,
        )
        response.raise_for_status()
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError(f"Expected a list of rows from {table}, got {type(rows).__name__}")
        return rows

    async def _select_models(
        self,
        table: str,
        model: type[ModelT],
        params: dict[str, str] | None = None,
    ) -> list[ModelT]:
        """Fail-soft select that validates rows into ``model`` instances."""
        try:
            rows = await self._select(table, params)
            return [model.model_validate(row) for row in rows]
        except QUERY_ERRORS as exc:
            logger.error("Error fetching %s: %s", table, exc)
            return []

    async def _select_column(
        self, table: str, column: str, params: dict[str, str] | None = None
    ) -> list[Any]:
        query = {"select": column}
        query.update(params or {})
        rows = await self._select(table, query)
        return [row[column] for row in rows]

    # ------------------------------------------------------------------
    # Knowledge base
    # ------------------------------------------------------------------

    async def fetch_knowledge_records(self) -> list[KnowledgeRecord]:
        """Return every knowledge record, highest priority first.

        Raises:
            KnowledgeFetchError: If the query fails or a row is malformed.
        """
        try:
            rows = await self._select(KNOWLEDGE_TABLE, {"order": "priority.desc"})
            records = [KnowledgeRecord.model_validate(row) for row in rows]
        except QUERY_ERRORS as exc:
            raise KnowledgeFetchError(f"Could not load {KNOWLEDGE_TABLE}: {exc}") from exc

        logger.debug("Fetched %d knowledge records", len(records))
        return records

    async def list_knowledge_records(self) -> list[KnowledgeRecord]:
        """Fail-soft variant of ``fetch_knowledge_records``."""
        try:
            return await self.fetch_knowledge_records()
        except KnowledgeFetchError as exc:
            logger.error("Error fetching AI assistant data: %s", exc)
            return []

    # ------------------------------------------------------------------
    # Portfolio content
    # ------------------------------------------------------------------

    async def get_services(self) -> list[Service]:
        """Return services, each with its skills from ``service_skills``."""
        try:
            rows = await self._select("services")
        except QUERY_ERRORS as exc:
            logger.error("Error fetching services: %s", exc)
            return []

        async def _with_skills(row: dict[str, Any]) -> Service:
            try:
                skills = await self._select_column(
                    "service_skills", "skill", {"service_id": f"eq.{row['id']}"}
                )
            except (*QUERY_ERRORS, KeyError) as exc:
                logger.error("Error fetching skills for service %s: %s", row.get("id"), exc)
                skills = []
            return Service.model_validate({**row, "skills": skills})

        try:
            return list(await asyncio.gather(*(_with_skills(row) for row in rows)))
        except ValidationError as exc:
            logger.error("Malformed service row: %s", exc)
            return []

    async def get_technology_categories(self) -> list[str]:
        try:
            return await self._select_column("technology_categories", "name")
        except (*QUERY_ERRORS, KeyError) as exc:
            logger.error("Error fetching technology categories: %s", exc)
            return []

    async def get_technologies(self, category: str | None = None) -> list[Technology]:
        params = {"category": f"eq.{category}"} if category else None
        return await self._select_models("technologies", Technology, params)

    async def get_projects(self) -> list[Project]:
        """Return projects with their tags, features and grouped technologies."""
        try:
            rows = await self._select("projects")
        except QUERY_ERRORS as exc:
            logger.error("Error fetching projects: %s", exc)
            return []

        async def _with_details(row: dict[str, Any]) -> Project:
            where = {"project_id": f"eq.{row.get('id')}"}
            details: dict[str, Any] = {"tags": [], "features": [], "technologies": {}}
            try:
                details["tags"] = await self._select_column("project_tags", "tag", where)
                details["features"] = await self._select_column(
                    "project_features", "feature", where
                )
                tech_rows = await self._select(
                    "project_technologies", {"select": "category,technology", **where}
                )
            except (*QUERY_ERRORS, KeyError) as exc:
                logger.error("Error fetching details for project %s: %s", row.get("id"), exc)
                return Project.model_validate({**row, **details})

            grouped: dict[str, list[str]] = {}
            for tech in tech_rows:
                category, name = tech.get("category"), tech.get("technology")
                if not category or not name:
                    logger.warning(
                        "Skipping incomplete technology row for project %s: %r",
                        row.get("id"),
                        tech,
                    )
                    continue
                grouped.setdefault(category, []).append(name)
            details["technologies"] = grouped
            return Project.model_validate({**row, **details})

        try:
            return list(await asyncio.gather(*(_with_details(row) for row in rows)))
        except ValidationError as exc:
            logger.error("Malformed project row: %s", exc)
            return []

    async def get_experiences(self) -> list[Experience]:
        return await self._select_models("experiences", Experience)

    async def get_education(self) -> list[Education]:
        return await self._select_models("education", Education)

    async def get_contact_info(self) -> list[ContactInfo]:
        return await self._select_models("contact_info", ContactInfo)

    async def get_social_links(self) -> list[SocialLink]:
        return await self._select_models("social_media", SocialLink)

    async def get_faqs(self) -> list[FAQ]:
        return await self._select_models("faq", FAQ)

    async def get_personal_info(self) -> PersonalInfo | None:
        """Return the single personal-info row, or None when unavailable."""
        rows = await self._select_models("personal_info", PersonalInfo, {"limit": "1"})
        return rows[0] if rows else None

    async def submit_contact_form(self, submission: ContactSubmission) -> ContactResult:
        """Accept a contact-form submission.

        Nothing is stored; the submission is only logged.
        """
        logger.info(
            "Contact form submitted: name=%s email=%s subject=%s",
            submission.name,
            submission.email,
            submission.subject,
        )
        return ContactResult(
            success=True,
            message="Your message has been sent successfully!",
        )
