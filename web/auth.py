"""Authentication for web API: service wiring and current-user resolution."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

import config
from conduit.models import User
from conduit.models.base import async_session_factory
from conduit.services.article_store import SqlArticleStore
from conduit.services.auth_service import AuthService
from conduit.services.stats import StatsEngine
from conduit.services.user_store import SqlUserStore

user_store = SqlUserStore(async_session_factory)
article_store = SqlArticleStore(async_session_factory)

auth_service = AuthService(
    user_store,
    secret=config.JWT_SECRET,
    algorithm=config.JWT_ALGORITHM,
    token_days=config.JWT_EXPIRE_DAYS,
)
stats_engine = StatsEngine(user_store, article_store, profile_prefix=config.PROFILE_LINK_PREFIX)


def get_auth_service() -> AuthService:
    return auth_service


def get_stats_engine() -> StatsEngine:
    return stats_engine


def _token_from_header(value: Optional[str]) -> Optional[str]:
    """Accept 'Bearer <jwt>' and the realworld 'Token <jwt>' scheme."""
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if scheme.lower() not in ("bearer", "token") or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token"),
    service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """Return current user from JWT, or None if not authenticated. Accepts Authorization or X-Auth-Token (fallback for proxies that strip Authorization)."""
    token = _token_from_header(authorization) or x_auth_token
    if not token:
        return None
    payload = service.decode_token(token)
    if not payload:
        return None
    user_id = payload.get("id")
    if user_id is None:
        return None
    return await service.users.find_one(id=user_id)


async def require_user(
    user: Optional[User] = Depends(get_current_user),
) -> User:
    """Require authenticated user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
