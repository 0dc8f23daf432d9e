from datetime import timezone
from typing import List, Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .database import Database
from .models import SearchRow
from ..errors import FETCH_FAILED, STORE_FAILED, PersistenceError
from ..schemas import Repository, SearchRecord


def to_record(row: SearchRow) -> SearchRecord:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite hands timestamps back naive; they were written as UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return SearchRecord(
        id=row.id,
        keyword=row.keyword,
        repository_data=[Repository.model_validate(item) for item in row.repository_data],
        total_count=row.total_count,
        created_at=created_at,
    )


class SearchStore:
    """Reads and writes of the `searches` table.

    Rows are append-only: ids and created_at are assigned on insert and nothing
    here updates or deletes a stored search.
    """

    def __init__(self, database: Database):
        self.database = database

    async def insert_search(
        self, keyword: str, repositories: Sequence[Repository], total_count: int
    ) -> SearchRecord:
        row = SearchRow(
            keyword=keyword,
            repository_data=[repo.model_dump(mode="json") for repo in repositories],
            total_count=total_count,
        )
        try:
            async with self.database.session() as session:
                async with session.begin():
                    session.add(row)
                    await session.flush()
                    # created_at comes from the server default, so load it back
                    await session.refresh(row)
        except SQLAlchemyError as exc:
            logger.exception(f"Database insertion error for keyword {keyword!r}")
            raise PersistenceError(STORE_FAILED) from exc
        return to_record(row)

    async def list_searches(
        self,
        offset: int = 0,
        limit: int = 20,
        keyword: Optional[str] = None,
        error_message: str = FETCH_FAILED,
    ) -> Tuple[List[SearchRecord], int]:
        """Newest-first slice of stored searches and the count of all matches.

        `keyword` filters case-insensitively by substring; LIKE wildcards in it
        are matched literally.
        """
        query = select(SearchRow)
        count_query = select(func.count()).select_from(SearchRow)
        if keyword is not None:
            condition = SearchRow.keyword.icontains(keyword, autoescape=True)
            query = query.where(condition)
            count_query = count_query.where(condition)
        query = query.order_by(SearchRow.created_at.desc(), SearchRow.id.desc()).offset(offset).limit(limit)

        try:
            async with self.database.session() as session:
                total = (await session.execute(count_query)).scalar_one()
                rows = (await session.execute(query)).scalars().all()
        except SQLAlchemyError as exc:
            logger.exception("Database fetch error")
            raise PersistenceError(error_message) from exc
        return [to_record(row) for row in rows], total
