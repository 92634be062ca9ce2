"""tests/test_supabase.py

Unit tests for SupabaseClient and SupabaseConfig (portfolio_assistant/supabase.py).
The PostgREST endpoint is served by httpx.MockTransport.
"""

from __future__ import annotations

# Standard Library
from typing import Any, Callable

# Third-Party Libraries
import httpx
import pytest

# Local Modules
from portfolio_assistant.errors import ConfigurationError, KnowledgeFetchError
from portfolio_assistant.records import ContactSubmission
from portfolio_assistant.supabase import SupabaseClient, SupabaseConfig

KNOWLEDGE_ROWS = [
    {
        "id": 1,
        "category": "skills",
        "topic": "stack",
        "content": "React, Node.js",
        "priority": 5,
        "created_at": "2025-05-19T10:00:00+00:00",
    },
    {
        "id": 2,
        "category": "contact",
        "topic": "email",
        "content": "Use the contact form.",
        "priority": 1,
        "created_at": "2025-05-19T10:00:00+00:00",
    },
]


def _router(tables: dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    """Serve ``tables[name]`` for /rest/v1/<name>; callables get the request."""

    def handler(request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]
        if table not in tables:
            return httpx.Response(404, json={"message": f"relation {table} does not exist"})
        rows = tables[table]
        if callable(rows):
            rows = rows(request)
        if isinstance(rows, httpx.Response):
            return rows
        return httpx.Response(200, json=rows)

    return handler


class TestSupabaseConfig:
    """Test suite for SupabaseConfig."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co/")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

        config = SupabaseConfig.from_env()

        assert config.url == "https://project.supabase.co"
        assert config.anon_key == "anon"

    def test_from_env_requires_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
        with pytest.raises(ConfigurationError):
            SupabaseConfig.from_env()


class TestKnowledgeQueries:
    """Test suite for the knowledge-base reads."""

    @pytest.mark.asyncio
    async def test_fetch_knowledge_records(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        seen: list[httpx.Request] = []

        def rows(request: httpx.Request) -> list[dict[str, Any]]:
            seen.append(request)
            return KNOWLEDGE_ROWS

        client = SupabaseClient(
            supabase_config, mock_transport_client(_router({"ai_assistant_data": rows}))
        )
        records = await client.fetch_knowledge_records()

        assert [record.topic for record in records] == ["stack", "email"]
        assert records[0].category == "skills"
        assert records[0].created_at is not None

        request = seen[0]
        assert request.url.path == "/rest/v1/ai_assistant_data"
        assert request.url.params["order"] == "priority.desc"
        assert request.url.params["select"] == "*"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_fetch_knowledge_records_raises(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        client = SupabaseClient(
            supabase_config,
            mock_transport_client(_router({"ai_assistant_data": httpx.Response(500)})),
        )
        with pytest.raises(KnowledgeFetchError):
            await client.fetch_knowledge_records()

    @pytest.mark.asyncio
    async def test_malformed_row_raises(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        client = SupabaseClient(
            supabase_config,
            mock_transport_client(_router({"ai_assistant_data": [{"id": 1}]})),
        )
        with pytest.raises(KnowledgeFetchError):
            await client.fetch_knowledge_records()

    @pytest.mark.asyncio
    async def test_invalid_url_raises_fetch_error(
        self, mock_transport_client: Callable[..., httpx.AsyncClient]
    ) -> None:
        """A malformed project URL surfaces as KnowledgeFetchError."""
        config = SupabaseConfig(url="https://db.test:notaport", anon_key="anon-key")
        client = SupabaseClient(
            config, mock_transport_client(_router({"ai_assistant_data": KNOWLEDGE_ROWS}))
        )
        with pytest.raises(KnowledgeFetchError):
            await client.fetch_knowledge_records()

    @pytest.mark.asyncio
    async def test_list_knowledge_records_fails_soft(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        client = SupabaseClient(supabase_config, mock_transport_client(_router({})))
        assert await client.list_knowledge_records() == []


class TestPortfolioQueries:
    """Test suite for the fail-soft portfolio reads."""

    @pytest.mark.asyncio
    async def test_get_services_with_skills(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        def skills(request: httpx.Request) -> list[dict[str, str]]:
            if request.url.params["service_id"] == "eq.1":
                return [{"skill": "React"}, {"skill": "TypeScript"}]
            return [{"skill": "Figma"}]

        tables = {
            "services": [
                {"id": 1, "title": "Web Development"},
                {"id": 2, "title": "UI Design"},
            ],
            "service_skills": skills,
        }
        client = SupabaseClient(supabase_config, mock_transport_client(_router(tables)))

        services = await client.get_services()

        assert [service.title for service in services] == ["Web Development", "UI Design"]
        assert services[0].skills == ["React", "TypeScript"]
        assert services[1].skills == ["Figma"]

    @pytest.mark.asyncio
    async def test_get_projects_groups_technologies(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        tables = {
            "projects": [{"id": 7, "title": "Portfolio", "year": 2025}],
            "project_tags": [{"tag": "web"}],
            "project_features": [{"feature": "AI chat"}],
            "project_technologies": [
                {"category": "frontend", "technology": "React"},
                {"category": "backend", "technology": "Supabase"},
                {"category": "frontend", "technology": "Tailwind"},
            ],
        }
        client = SupabaseClient(supabase_config, mock_transport_client(_router(tables)))

        projects = await client.get_projects()

        assert len(projects) == 1
        project = projects[0]
        assert project.tags == ["web"]
        assert project.features == ["AI chat"]
        assert project.technologies == {
            "frontend": ["React", "Tailwind"],
            "backend": ["Supabase"],
        }

    @pytest.mark.asyncio
    async def test_incomplete_technology_rows_skipped(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        tables = {
            "projects": [{"id": 1, "title": "P"}],
            "project_tags": [],
            "project_features": [],
            "project_technologies": [
                {"technology": "React"},
                {"category": "backend"},
                {"category": "backend", "technology": "Supabase"},
            ],
        }
        client = SupabaseClient(supabase_config, mock_transport_client(_router(tables)))

        projects = await client.get_projects()

        assert [project.title for project in projects] == ["P"]
        assert projects[0].technologies == {"backend": ["Supabase"]}

    @pytest.mark.asyncio
    async def test_project_detail_failure_keeps_project(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        tables = {"projects": [{"id": 7, "title": "Portfolio"}]}
        client = SupabaseClient(supabase_config, mock_transport_client(_router(tables)))

        projects = await client.get_projects()

        assert projects[0].title == "Portfolio"
        assert projects[0].tags == []
        assert projects[0].technologies == {}

    @pytest.mark.asyncio
    async def test_reads_fail_soft(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        client = SupabaseClient(supabase_config, mock_transport_client(_router({})))

        assert await client.get_services() == []
        assert await client.get_projects() == []
        assert await client.get_technologies() == []
        assert await client.get_technology_categories() == []
        assert await client.get_experiences() == []
        assert await client.get_education() == []
        assert await client.get_contact_info() == []
        assert await client.get_social_links() == []
        assert await client.get_faqs() == []
        assert await client.get_personal_info() is None

    @pytest.mark.asyncio
    async def test_get_technologies_by_category(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        seen: list[httpx.Request] = []

        def rows(request: httpx.Request) -> list[dict[str, Any]]:
            seen.append(request)
            return [{"id": 1, "name": "React", "category": "frontend", "level": 90}]

        client = SupabaseClient(
            supabase_config, mock_transport_client(_router({"technologies": rows}))
        )
        technologies = await client.get_technologies("frontend")

        assert technologies[0].name == "React"
        assert seen[0].url.params["category"] == "eq.frontend"

    @pytest.mark.asyncio
    async def test_get_personal_info(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        tables = {
            "personal_info": [
                {"id": 1, "full_name": "Jacob Varghese", "availability_status": True}
            ]
        }
        client = SupabaseClient(supabase_config, mock_transport_client(_router(tables)))

        info = await client.get_personal_info()

        assert info is not None
        assert info.full_name == "Jacob Varghese"
        assert info.availability_status is True

    @pytest.mark.asyncio
    async def test_submit_contact_form_is_a_stub(
        self,
        supabase_config: SupabaseConfig,
        mock_transport_client: Callable[..., httpx.AsyncClient],
    ) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        client = SupabaseClient(supabase_config, mock_transport_client(handler))
        result = await client.submit_contact_form(
            ContactSubmission(name="Ada", email="ada@example.com", subject="Hi", message="Hello")
        )

        assert result.success
        assert "sent successfully" in result.message
        assert calls == []
