"""
pytest configuration for the repository finder tests.

Provides:
1. GitHub search payload builders and a mocked GitHub transport
2. An in-memory SQLite database with the searches table created
3. Services wired to both, and an HTTP client bound to the FastAPI app
"""

import os

# settings are read once, so point them at throwaway resources before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_CREATE_TABLES", "false")

import httpx
import pytest

from repo_finder.config import Settings
from repo_finder.datasources.github_adapter import GitHubAdapter
from repo_finder.main import app, get_history_service, get_search_service
from repo_finder.services.history_service import HistoryService
from repo_finder.services.search_service import SearchService
from repo_finder.storage.database import Database
from repo_finder.storage.search_store import SearchStore


def github_item(repo_id: int, name: str, owner: str = "octocat", **overrides) -> dict:
    """One item as GitHub's /search/repositories returns it."""
    item = {
        "id": repo_id,
        "node_id": f"R_{repo_id}",
        "name": name,
        "full_name": f"{owner}/{name}",
        "private": False,
        "description": f"The {name} project",
        "html_url": f"https://github.com/{owner}/{name}",
        "stargazers_count": 1000 + repo_id,
        "watchers_count": 1000 + repo_id,
        "forks_count": 100 + repo_id,
        "language": "Go",
        "updated_at": "2026-10-01T12:00:00Z",
        "pushed_at": "2026-10-02T12:00:00Z",
        "owner": {
            "login": owner,
            "id": 583231,
            "avatar_url": f"https://avatars.githubusercontent.com/u/{repo_id}?v=4",
            "type": "User",
        },
    }
    item.update(overrides)
    return item


def github_payload(total_count: int, count: int, prefix: str = "repo") -> dict:
    return {
        "total_count": total_count,
        "incomplete_results": False,
        "items": [github_item(i + 1, f"{prefix}-{i + 1}") for i in range(count)],
    }


class FakeGitHub:
    """Canned responses for the GitHub search endpoint; records every request."""

    def __init__(self):
        self.status = 200
        self.payload = github_payload(0, 0)
        self.requests = []

    def respond(self, payload: dict = None, status: int = 200):
        self.status = status
        if payload is not None:
            self.payload = payload

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.payload)


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
async def github_adapter(fake_github):
    adapter = GitHubAdapter(Settings(), transport=httpx.MockTransport(fake_github.handler))
    yield adapter
    await adapter.aclose()


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def search_store(database):
    return SearchStore(database)


@pytest.fixture
def search_service(github_adapter, search_store):
    return SearchService(github_adapter, search_store)


@pytest.fixture
def history_service(search_store):
    return HistoryService(search_store)


@pytest.fixture
async def api_client(search_service, history_service):
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_history_service] = lambda: history_service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
