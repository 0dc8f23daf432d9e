from typing import Any, Dict, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from .base import DataSource, SearchPage
from ..config import Settings, get_settings
from ..errors import ProviderError
from ..schemas import Owner, Repository


def normalize_repository(item: Dict[str, Any]) -> Repository:
    """Map one GitHub search item onto the stored repository snapshot."""
    owner = item.get("owner") or {}
    return Repository(
        id=item.get("id"),
        name=item.get("name"),
        full_name=item.get("full_name"),
        description=item.get("description"),
        html_url=item.get("html_url"),
        stars=item.get("stargazers_count", 0),
        forks=item.get("forks_count", 0),
        language=item.get("language"),
        updated_at=item.get("updated_at"),
        owner=Owner(login=owner.get("login"), avatar_url=owner.get("avatar_url")),
    )


class GitHubAdapter(DataSource):
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "GitHub-Repo-Finder",
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        self.headers = headers
        client_kwargs: Dict[str, Any] = {
            "base_url": str(self.settings.github_base_url),
            "timeout": self.settings.github_timeout,
        }
        # http(s):// and socks5:// proxies are both accepted by httpx as a plain URL
        if self.settings.github_proxy:
            client_kwargs["proxy"] = self.settings.github_proxy
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

    async def search_repositories(
        self, query: str, page: int = 1, per_page: int = 6, sort: str = "stars", order: str = "desc"
    ) -> SearchPage:
        params = {"q": query, "sort": sort, "order": order, "page": page, "per_page": per_page}
        try:
            resp = await self.client.get("/search/repositories", params=params, headers=self.headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(f"GitHub search failed for {query!r}: {status} {exc.response.text[:200]}")
            raise ProviderError(
                f"GitHub API error: {status} {exc.response.reason_phrase}".strip(), upstream_status=status
            ) from exc
        except httpx.RequestError as exc:
            logger.warning(f"GitHub request error for {query!r}: {type(exc).__name__} {exc!r}")
            raise ProviderError(f"GitHub request error: {type(exc).__name__}") from exc

        try:
            data = resp.json()
            items = [normalize_repository(item) for item in data.get("items") or []]
            total_count = int(data.get("total_count", 0))
        except (ValueError, TypeError, AttributeError, ValidationError) as exc:
            logger.warning(f"GitHub returned an unreadable payload for {query!r}: {exc}")
            raise ProviderError("GitHub API returned an invalid response") from exc

        return SearchPage(total_count=total_count, items=items[:per_page])

    async def aclose(self) -> None:
        await self.client.aclose()
