"""Stats router — commit counts and the history report."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from commitpulse.api.deps import get_stats_service
from commitpulse.api.schemas.execute import ReportSchema
from commitpulse.api.schemas.stats import CommitCounts, StatsResponse
from commitpulse.services.stats_service import StatsService

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(
    svc: StatsService = Depends(get_stats_service),
) -> StatsResponse:
    counts = await svc.get_counts()
    report = await svc.get_report()
    return StatsResponse(stats=CommitCounts(**counts), report=ReportSchema(**report.to_dict()))
