from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_BASE_URL"
    )
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    github_timeout: float = Field(default=20, alias="GITHUB_TIMEOUT")
    database_url: str = Field(
        default="sqlite+aiosqlite:///./repo_finder.db", alias="DATABASE_URL"
    )
    database_key: Optional[str] = Field(
        default=None, alias="DATABASE_KEY"
    )  # used as the password when DATABASE_URL carries none
    database_create_tables: bool = Field(default=True, alias="DATABASE_CREATE_TABLES")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors


@lru_cache
def get_settings() -> Settings:
    return Settings()
