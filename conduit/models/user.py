"""User model - identity record for signup, login and statistics."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conduit.models.base import Base


class User(Base):
    """Registered author. Password is stored only as an HMAC-SHA256 hex digest."""

    __tablename__ = "users"
    # Ids of deleted users are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Unique indexes back up the application-level existence check on signup
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    articles = relationship("Article", back_populates="author", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
