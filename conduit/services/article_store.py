"""Content store: read access to articles grouped by author."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conduit.models import Article


@dataclass(frozen=True)
class AuthorTotals:
    article_count: int
    favorite_count: int
    first_article_date: Optional[datetime]


class ContentStore(Protocol):
    async def find_by_author(self, user_id: int) -> list[Article]: ...

    async def count_by_author(self, user_id: int) -> int: ...

    async def find_earliest_by_author(self, user_id: int) -> Optional[Article]: ...

    async def totals_by_author(self) -> dict[int, AuthorTotals]: ...


class SqlArticleStore:
    """SQLAlchemy-backed content store. One session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, article: Article) -> Article:
        async with self._session_factory() as session:
            session.add(article)
            await session.commit()
            await session.refresh(article)
            return article

    async def find_by_author(self, user_id: int) -> list[Article]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Article)
                .where(Article.author_id == user_id)
                .order_by(Article.created_at, Article.id)
            )
            return list(result.scalars().all())

    async def count_by_author(self, user_id: int) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(Article).where(Article.author_id == user_id)
            )
            return result.scalar_one()

    async def find_earliest_by_author(self, user_id: int) -> Optional[Article]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Article)
                .where(Article.author_id == user_id)
                .order_by(Article.created_at, Article.id)
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def totals_by_author(self) -> dict[int, AuthorTotals]:
        """Article count, favorite sum and earliest date per author, in one grouped query.

        Authors without articles are absent from the result.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    Article.author_id,
                    func.count(Article.id),
                    func.coalesce(func.sum(Article.favorites_count), 0),
                    func.min(Article.created_at),
                ).group_by(Article.author_id)
            )
            return {
                author_id: AuthorTotals(count, int(favorites), first)
                for author_id, count, favorites, first in result.all()
            }
