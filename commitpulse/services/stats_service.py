"""StatsService — commit counts, streaks and the activity feed from git history."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta

from commitpulse.core.context import RunContext
from commitpulse.engines.activity_pattern.models import ActivityEvent
from commitpulse.engines.commit_sink.git_sink import GitSink
from commitpulse.engines.commit_sink.models import CommitRecord
from commitpulse.engines.run_report.aggregator import RunReport, summarize


def classify_commit_type(message: str) -> str:
    """Bucket a commit subject into merge/bugfix/feature/docs/test/commit."""
    msg = message.lower()
    if "merge" in msg:
        return "merge"
    if "fix" in msg or "bug" in msg:
        return "bugfix"
    if "feat" in msg:
        return "feature"
    if "docs" in msg:
        return "docs"
    if "test" in msg:
        return "test"
    return "commit"


def current_streak(days: set[date], today: date) -> int:
    """Consecutive days with commits ending today (or yesterday if today is empty)."""
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


class StatsService:
    """Read-only statistics over the repository history."""

    def __init__(
        self,
        context: RunContext,
        *,
        sink_factory: Callable[[], GitSink] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._context = context
        self._sink_factory = sink_factory or context.build_sink
        self._clock = clock or datetime.now

    async def _history(self, limit: int | None = None) -> list[CommitRecord]:
        return await self._sink_factory().log(limit)

    async def get_counts(self) -> dict:
        """Return commits today / last 7 days / last 30 days / total, plus the streak."""
        records = await self._history()
        today = self._clock().date()
        week_start = today - timedelta(days=6)
        month_start = today - timedelta(days=29)

        days = [r.authored_at.date() for r in records]
        return {
            "today": sum(1 for d in days if d == today),
            "week": sum(1 for d in days if week_start <= d <= today),
            "month": sum(1 for d in days if month_start <= d <= today),
            "total": len(days),
            "streak": current_streak(set(days), today),
        }

    async def get_report(self) -> RunReport:
        """Summarize the whole history the same way a generated pattern is summarized."""
        records = await self._history()
        events = sorted(
            (ActivityEvent(r.authored_at.replace(tzinfo=None), r.subject) for r in records),
            key=lambda e: e.timestamp,
        )
        return summarize(events)

    async def get_activity(self, limit: int = 10) -> list[dict]:
        records = await self._history(limit)
        return [
            {
                "hash": r.sha,
                "message": r.subject,
                "timestamp": r.authored_at.isoformat(),
                "type": classify_commit_type(r.subject),
            }
            for r in records
        ]
