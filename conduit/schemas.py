"""Pydantic views for users and statistics."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from pydantic.alias_generators import to_camel

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _check_email(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise ValueError("must be a valid email address")
    return value


def isoformat_utc(value: datetime) -> str:
    """ISO-8601 string; naive datetimes from the database are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class NewUser(BaseModel):
    """Structural validation for a user record before it is persisted."""

    username: str
    email: str
    password_hash: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)


class UserUpdate(BaseModel):
    """Fields a user may change. Unset fields are left alone."""

    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    password: Optional[str] = None

    @field_validator("username", "email", "password", mode="before")
    @classmethod
    def not_null(cls, v):
        # Only bio and image may be cleared
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)


class UserView(BaseModel):
    """Public view of a user returned by signup, login and lookups."""

    username: str
    email: str
    bio: Optional[str] = None
    image: Optional[str] = None
    token: str


class UserStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str
    article_count: int = 0
    favorite_count: int = 0
    first_article_date: Optional[datetime] = None

    @field_serializer("first_article_date")
    def serialize_date(self, value: Optional[datetime]) -> Optional[str]:
        return isoformat_utc(value) if value else None


class RosterEntry(UserStats):
    profile_link: str

    @field_serializer("first_article_date")
    def serialize_date(self, value: Optional[datetime]) -> str:
        # The roster renders users without articles with an empty date
        return isoformat_utc(value) if value else ""
