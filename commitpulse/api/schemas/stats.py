"""Status, stats and activity response schemas."""

from __future__ import annotations

from pydantic import BaseModel

from commitpulse.api.schemas.execute import ReportSchema


class StatusData(BaseModel):
    repository: str
    configured: bool
    last_push: str | None
    last_run_time: str | None
    total_runs: int
    next_run_due: bool
    next_run_at: str | None
    has_remote: bool


class StatusResponse(BaseModel):
    success: bool = True
    data: StatusData


class CommitCounts(BaseModel):
    today: int
    week: int
    month: int
    total: int
    streak: int


class StatsResponse(BaseModel):
    success: bool = True
    stats: CommitCounts
    report: ReportSchema


class ActivityItem(BaseModel):
    hash: str
    message: str
    timestamp: str
    type: str


class ActivityResponse(BaseModel):
    success: bool = True
    activities: list[ActivityItem]
