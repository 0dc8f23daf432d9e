import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Owner(BaseModel):
    login: str
    avatar_url: str

    model_config = ConfigDict(frozen=True)


class Repository(BaseModel):
    """Snapshot of a repository as the provider reported it at search time."""

    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    html_url: str
    stars: int = Field(ge=0)
    forks: int = Field(ge=0)
    language: Optional[str] = None
    updated_at: str
    owner: Owner

    model_config = ConfigDict(frozen=True)


class SearchRequest(BaseModel):
    # left optional so a missing keyword surfaces as InvalidInput, not a schema error
    keyword: Optional[str] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=6, ge=1)


class SearchRecord(BaseModel):
    id: int
    keyword: str
    repository_data: List[Repository]
    total_count: int
    created_at: datetime


class SearchData(BaseModel):
    search_id: int
    keyword: str
    repositories: List[Repository]
    total_count: int
    current_page: int
    per_page: int
    created_at: datetime


class SearchResponse(BaseModel):
    success: bool = True
    data: SearchData


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "Pagination":
        return cls(
            current_page=page,
            per_page=limit,
            total_count=total_count,
            total_pages=math.ceil(total_count / limit) if limit else 0,
        )


class ResultsResponse(BaseModel):
    success: bool = True
    data: List[SearchRecord]
    pagination: Pagination


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
