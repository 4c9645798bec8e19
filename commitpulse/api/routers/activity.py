"""Activity router — recent commits with a type classification."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from commitpulse.api.deps import get_stats_service
from commitpulse.api.schemas.stats import ActivityItem, ActivityResponse
from commitpulse.services.stats_service import StatsService

router = APIRouter()


@router.get("", response_model=ActivityResponse)
async def get_activity(
    limit: int = Query(10, ge=1, le=100),
    svc: StatsService = Depends(get_stats_service),
) -> ActivityResponse:
    items = await svc.get_activity(limit)
    return ActivityResponse(activities=[ActivityItem(**item) for item in items])
