from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger
from pydantic import ValidationError

from ..schemas import Pagination, ResultsResponse, SearchRecord, SearchResponse

DEFAULT_API_URL = "http://localhost:5000/api"


class ClientError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FinderAPI:
    """Async client for the repository finder HTTP API."""

    def __init__(self, base_url: str = DEFAULT_API_URL, transport: Optional[httpx.AsyncBaseTransport] = None):
        client_kwargs: Dict[str, Any] = {"base_url": base_url.rstrip("/") + "/", "timeout": 30}
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

    async def _request(self, method: str, path: str, fallback: str, **kwargs) -> Dict[str, Any]:
        try:
            resp = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.warning(f"{method} {path} failed: {type(exc).__name__} {exc!r}")
            raise ClientError(f"{fallback}: could not reach the server") from exc
        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if not resp.is_success:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise ClientError(message or fallback)
        return payload

    async def search(self, keyword: str, per_page: int = 10, page: int = 1) -> SearchRecord:
        payload = await self._request(
            "POST", "search", "Search failed", json={"keyword": keyword, "page": page, "per_page": per_page}
        )
        try:
            data = SearchResponse.model_validate(payload).data
        except ValidationError as exc:
            raise ClientError("Search failed") from exc
        return SearchRecord(
            id=data.search_id,
            keyword=data.keyword,
            repository_data=data.repositories,
            total_count=data.total_count,
            created_at=data.created_at,
        )

    async def list_results(self, page: int = 1, limit: int = 20) -> Tuple[List[SearchRecord], Pagination]:
        payload = await self._request(
            "GET", "results", "Failed to load search history", params={"page": page, "limit": limit}
        )
        try:
            parsed = ResultsResponse.model_validate(payload)
        except ValidationError as exc:
            raise ClientError("Failed to load search history") from exc
        return parsed.data, parsed.pagination

    async def aclose(self) -> None:
        await self.client.aclose()
