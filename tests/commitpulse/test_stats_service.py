"""Tests for StatsService."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from commitpulse.core.config import Settings
from commitpulse.core.context import RunContext
from commitpulse.engines.commit_sink.models import CommitRecord
from commitpulse.services.stats_service import (
    StatsService,
    classify_commit_type,
    current_streak,
)

NOW = datetime(2026, 1, 15, 18, 0, 0)
TZ = timezone(timedelta(hours=1))


def _record(days_ago: int, subject: str = "feat: thing", hour: int = 10) -> CommitRecord:
    day = NOW.date() - timedelta(days=days_ago)
    return CommitRecord(
        sha=f"{days_ago:07x}",
        subject=subject,
        authored_at=datetime(day.year, day.month, day.day, hour, tzinfo=TZ),
    )


@pytest.fixture
def make_service(tmp_path, fake_sink):
    def _make(history: list[CommitRecord]) -> StatsService:
        sink = fake_sink()
        sink.history = history
        context = RunContext.from_settings(Settings(repo_path=tmp_path))
        return StatsService(context, sink_factory=lambda: sink, clock=lambda: NOW)

    return _make


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


class TestClassifyCommitType:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Merge branch 'dev'", "merge"),
            ("fix: null deref", "bugfix"),
            ("Squash a bug", "bugfix"),
            ("feat: add export", "feature"),
            ("docs: update readme", "docs"),
            ("test: cover edge case", "test"),
            ("chore: bump deps", "commit"),
        ],
    )
    def test_classification(self, message, expected):
        assert classify_commit_type(message) == expected


class TestCurrentStreak:
    def test_counts_back_from_today(self):
        today = date(2026, 1, 15)
        days = {today, today - timedelta(days=1), today - timedelta(days=2)}
        assert current_streak(days, today) == 3

    def test_starts_yesterday_when_today_is_empty(self):
        today = date(2026, 1, 15)
        days = {today - timedelta(days=1), today - timedelta(days=2)}
        assert current_streak(days, today) == 2

    def test_gap_breaks_streak(self):
        today = date(2026, 1, 15)
        assert current_streak({today - timedelta(days=2)}, today) == 0


# ---------------------------------------------------------------------------
# service
# ---------------------------------------------------------------------------


class TestStatsService:
    async def test_counts(self, make_service):
        history = [
            _record(0),
            _record(0, hour=11),
            _record(1),
            _record(6),
            _record(7),
            _record(29),
            _record(45),
        ]
        counts = await make_service(history).get_counts()
        assert counts == {"today": 2, "week": 4, "month": 6, "total": 7, "streak": 2}

    async def test_empty_history(self, make_service):
        counts = await make_service([]).get_counts()
        assert counts == {"today": 0, "week": 0, "month": 0, "total": 0, "streak": 0}

    async def test_report_over_history(self, make_service):
        report = await make_service([_record(0), _record(0, hour=12), _record(3)]).get_report()
        assert report.total == 3
        assert report.active_days == 2
        assert report.max_per_day == 2

    async def test_activity_feed(self, make_service):
        history = [_record(0, "fix: crash"), _record(1, "docs: guide"), _record(2, "chore")]
        items = await make_service(history).get_activity(limit=2)
        assert [i["type"] for i in items] == ["bugfix", "docs"]
        assert items[0]["hash"] == _record(0).sha
        assert items[0]["timestamp"].endswith("+01:00")
