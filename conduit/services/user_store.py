"""Credential store: user persistence behind a small repository contract."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conduit.errors import ValidationConflict
from conduit.models import Article, User

logger = logging.getLogger("conduit.store")

UNIQUE_VIOLATION = {"username": "Username and email must be unique."}

_LOOKUP_FIELDS = {"id", "username", "email", "password_hash"}


class CredentialStore(Protocol):
    async def find_one(self, **fields: Any) -> Optional[User]: ...

    async def find_all(self) -> list[User]: ...

    async def count_any(self, **fields: Any) -> int: ...

    async def insert(self, user: User) -> User: ...

    async def update_fields(self, user_id: int, fields: dict[str, Any]) -> Optional[User]: ...

    async def delete_matching(self, **fields: Any) -> int: ...


def _columns(fields: dict[str, Any]) -> list:
    unknown = set(fields) - _LOOKUP_FIELDS
    if unknown:
        raise ValueError(f"Unsupported user lookup field(s): {', '.join(sorted(unknown))}")
    if not fields:
        raise ValueError("At least one lookup field is required")
    return [getattr(User, name) == value for name, value in fields.items()]


class SqlUserStore:
    """SQLAlchemy-backed credential store. One session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_one(self, **fields: Any) -> Optional[User]:
        """Return the user matching every given field exactly, or None."""
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(*_columns(fields)))
            return result.scalar_one_or_none()

    async def find_all(self) -> list[User]:
        """All users in creation (id) order."""
        async with self._session_factory() as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())

    async def count_any(self, **fields: Any) -> int:
        """Count users matching any of the given fields."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(User).where(or_(*_columns(fields)))
            )
            return result.scalar_one()

    async def insert(self, user: User) -> User:
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning("User insert rejected by unique constraint: %s", user.username)
                raise ValidationConflict("Input data validation failed", UNIQUE_VIOLATION) from e
            await session.refresh(user)
            return user

    async def update_fields(self, user_id: int, fields: dict[str, Any]) -> Optional[User]:
        """Merge fields onto the stored user. Returns None if the id is unknown."""
        async with self._session_factory() as session:
            user = await session.get(User, user_id)
            if not user:
                return None
            for name, value in fields.items():
                setattr(user, name, value)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning("User %s update rejected by unique constraint", user_id)
                raise ValidationConflict("Input data validation failed", UNIQUE_VIOLATION) from e
            await session.refresh(user)
            return user

    async def delete_matching(self, **fields: Any) -> int:
        """Delete matching users and their articles in one transaction."""
        async with self._session_factory() as session:
            user_ids = select(User.id).where(*_columns(fields))
            await session.execute(delete(Article).where(Article.author_id.in_(user_ids)))
            result = await session.execute(delete(User).where(*_columns(fields)))
            await session.commit()
            return result.rowcount or 0
