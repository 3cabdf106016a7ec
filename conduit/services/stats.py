"""Per-user engagement statistics and the ranked author roster."""
from __future__ import annotations

import asyncio
import logging

from conduit.errors import NotFound
from conduit.models import User
from conduit.schemas import RosterEntry, UserStats
from conduit.services.article_store import AuthorTotals, ContentStore
from conduit.services.user_store import CredentialStore

logger = logging.getLogger("conduit.stats")

_NO_ARTICLES = AuthorTotals(article_count=0, favorite_count=0, first_article_date=None)


class StatsEngine:
    """Read-only metrics derived from the credential and content stores.

    Results are computed on demand and never cached. Concurrent writes while
    a result is being computed can yield values that were never true at the
    same instant.
    """

    def __init__(
        self,
        users: CredentialStore,
        articles: ContentStore,
        profile_prefix: str = "/profiles",
    ) -> None:
        self.users = users
        self.articles = articles
        self.profile_prefix = profile_prefix.rstrip("/")

    async def _totals_for(self, user: User) -> AuthorTotals:
        count, articles, earliest = await asyncio.gather(
            self.articles.count_by_author(user.id),
            self.articles.find_by_author(user.id),
            self.articles.find_earliest_by_author(user.id),
        )
        return AuthorTotals(
            article_count=count,
            favorite_count=sum(a.favorites_count for a in articles),
            first_article_date=earliest.created_at if earliest else None,
        )

    async def stats_for(self, user_id: int) -> UserStats:
        user = await self.users.find_one(id=user_id)
        if not user:
            raise NotFound("User not found", {"User": " not found"})
        totals = await self._totals_for(user)
        return UserStats(
            username=user.username,
            article_count=totals.article_count,
            favorite_count=totals.favorite_count,
            first_article_date=totals.first_article_date,
        )

    def profile_link(self, username: str) -> str:
        return f"{self.profile_prefix}/{username}"

    async def full_roster(self, fan_out: bool = False) -> list[RosterEntry]:
        """Every user with their statistics, most favorited first.

        By default totals come from one grouped query; fan_out=True runs the
        per-user queries concurrently instead. Ties keep user id order.
        """
        users = await self.users.find_all()
        if fan_out:
            per_user = await asyncio.gather(*(self._totals_for(u) for u in users))
        else:
            grouped = await self.articles.totals_by_author()
            per_user = [grouped.get(u.id, _NO_ARTICLES) for u in users]

        roster = [
            RosterEntry(
                username=user.username,
                profile_link=self.profile_link(user.username),
                article_count=totals.article_count,
                favorite_count=totals.favorite_count,
                first_article_date=totals.first_article_date,
            )
            for user, totals in zip(users, per_user)
        ]
        # list.sort is stable: equal favorite counts stay in enumeration order
        roster.sort(key=lambda e: -e.favorite_count)
        logger.info("Built roster for %d user(s)%s", len(roster), " (fan-out)" if fan_out else "")
        return roster
