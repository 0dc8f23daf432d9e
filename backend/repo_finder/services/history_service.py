from dataclasses import dataclass, field
from typing import List

from loguru import logger

from ..errors import FETCH_FAILED, KEYWORD_FETCH_FAILED
from ..schemas import Pagination, SearchRecord
from ..storage.search_store import SearchStore


@dataclass
class HistoryPage:
    page: int
    limit: int
    total_count: int
    records: List[SearchRecord] = field(default_factory=list)

    @property
    def pagination(self) -> Pagination:
        return Pagination.build(self.page, self.limit, self.total_count)


class HistoryService:
    def __init__(self, store: SearchStore):
        self.store = store

    async def list_all(self, page: int = 1, limit: int = 20) -> HistoryPage:
        records, total = await self.store.list_searches(
            offset=(page - 1) * limit, limit=limit, error_message=FETCH_FAILED
        )
        logger.debug(f"Listed {len(records)} of {total} searches (page={page}, limit={limit})")
        return HistoryPage(page=page, limit=limit, total_count=total, records=records)

    async def list_by_keyword(self, substring: str, page: int = 1, limit: int = 10) -> HistoryPage:
        records, total = await self.store.list_searches(
            offset=(page - 1) * limit, limit=limit, keyword=substring, error_message=KEYWORD_FETCH_FAILED
        )
        logger.debug(f"Listed {len(records)} of {total} searches matching {substring!r}")
        return HistoryPage(page=page, limit=limit, total_count=total, records=records)
