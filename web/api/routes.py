"""API routes for user statistics and the author roster."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from conduit.services.stats import StatsEngine
from web.auth import get_stats_engine

router = APIRouter(prefix="/api/user", tags=["stats"])


@router.get("/roster")
async def get_roster(engine: StatsEngine = Depends(get_stats_engine)):
    """All authors ranked by favorites received: username, profileLink, articleCount, favoriteCount, firstArticleDate."""
    roster = await engine.full_roster()
    return [entry.model_dump(by_alias=True) for entry in roster]


@router.get("/{user_id}/stats")
async def get_user_stats(user_id: int, engine: StatsEngine = Depends(get_stats_engine)):
    """Article count, favorites received and first article date for one user."""
    stats = await engine.stats_for(user_id)
    return stats.model_dump(by_alias=True)
