from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..datasources.base import DataSource
from ..errors import KEYWORD_REQUIRED, InvalidInput
from ..schemas import SearchData, SearchRecord
from ..storage.search_store import SearchStore

MAX_PER_PAGE = 100  # GitHub caps per_page here; larger requests are clamped


@dataclass
class SearchOutcome:
    record: SearchRecord
    page: int
    per_page: int

    def to_data(self) -> SearchData:
        return SearchData(
            search_id=self.record.id,
            keyword=self.record.keyword,
            repositories=self.record.repository_data,
            total_count=self.record.total_count,
            current_page=self.page,
            per_page=self.per_page,
            created_at=self.record.created_at,
        )


class SearchService:
    def __init__(self, provider: DataSource, store: SearchStore):
        self.provider = provider
        self.store = store

    async def search(self, keyword: Optional[str], page: int = 1, per_page: int = 6) -> SearchOutcome:
        """Query the provider for `keyword` and store the page as a new search record.

        Either the whole search succeeds and is persisted, or an error is raised
        and nothing is stored. Neither the provider call nor the write is retried.
        """
        cleaned = keyword.strip() if isinstance(keyword, str) else ""
        if not cleaned:
            raise InvalidInput(KEYWORD_REQUIRED)
        if page < 1:
            raise InvalidInput("page must be at least 1")
        if per_page < 1:
            raise InvalidInput("per_page must be at least 1")
        provider_per_page = min(per_page, MAX_PER_PAGE)

        logger.info(f"Searching GitHub for {cleaned!r} (page={page}, per_page={provider_per_page})")
        result = await self.provider.search_repositories(
            cleaned, page=page, per_page=provider_per_page, sort="stars", order="desc"
        )
        repositories = result.items[:per_page]
        record = await self.store.insert_search(cleaned, repositories, result.total_count)
        logger.info(
            f"Stored search {record.id} for {cleaned!r}: {len(repositories)} of {result.total_count} repositories"
        )
        return SearchOutcome(record=record, page=page, per_page=per_page)
