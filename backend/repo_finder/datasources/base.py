from dataclasses import dataclass, field
from typing import List, Protocol

from ..schemas import Repository


@dataclass
class SearchPage:
    """One page of provider results plus the provider's overall match count."""

    total_count: int
    items: List[Repository] = field(default_factory=list)


class DataSource(Protocol):
    async def search_repositories(
        self, query: str, page: int = 1, per_page: int = 6, sort: str = "stars", order: str = "desc"
    ) -> SearchPage:
        ...
