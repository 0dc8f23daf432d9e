from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Integer, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SearchRow(Base):
    """One stored search: the keyword, the repository snapshots and the provider total."""

    __tablename__ = "searches"

    # SQLite only autoincrements a plain INTEGER primary key
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    keyword: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    repository_data: Mapped[list] = mapped_column(JSON, nullable=False)
    total_count: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # assigned by the database; rows sharing a timestamp are ordered by id
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True, server_default=func.now()
    )
