from typing import Optional

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .models import Base


def resolve_database_url(url: str, access_key: Optional[str] = None) -> URL:
    """Pick async drivers for bare postgres/sqlite URLs and apply the access key as password."""
    parsed = make_url(url)
    if parsed.drivername in ("postgres", "postgresql"):
        parsed = parsed.set(drivername="postgresql+asyncpg")
    elif parsed.drivername == "sqlite":
        parsed = parsed.set(drivername="sqlite+aiosqlite")
    if access_key and not parsed.password and not parsed.drivername.startswith("sqlite"):
        parsed = parsed.set(password=access_key)
    return parsed


class Database:
    def __init__(self, url: str, access_key: Optional[str] = None, echo: bool = False):
        self.url = resolve_database_url(url, access_key)
        engine_kwargs = {"echo": echo}
        if self.url.drivername.startswith("sqlite") and self.url.database in (None, "", ":memory:"):
            # every connection to :memory: is a fresh database, so share a single one
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_tables(self) -> None:
        logger.info(f"Ensuring tables exist on {self.url.render_as_string(hide_password=True)}")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
