"""Command execution request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    args: list[str] = Field(default_factory=list)
    push: bool = False


class RepositoryConfigRequest(BaseModel):
    url: str


class PushSchema(BaseModel):
    status: str
    reason: str
    attempts: int
    upstream_set: bool


class OutcomeSchema(BaseModel):
    total: int
    processed: int
    successful: int
    skipped: int
    failed_fatal: int
    cancelled: bool
    push: PushSchema | None
    errors: list[str]


class ReportSchema(BaseModel):
    total: int
    active_days: int
    average_per_day: float
    max_per_day: int
    by_month: dict[str, int]
    by_weekday: dict[str, int]
    most_active_month: str | None
    most_active_weekday: str | None


class CommandResponse(BaseModel):
    success: bool
    command: str
    message: str
    outcome: OutcomeSchema | None = None
    report: ReportSchema | None = None
    push: PushSchema | None = None
    data: dict = Field(default_factory=dict)
