"""Database models."""
from conduit.models.base import Base, init_db
from conduit.models.user import User
from conduit.models.article import Article

__all__ = [
    "Base",
    "User",
    "Article",
    "init_db",
]
