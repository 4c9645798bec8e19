"""Tests for the run report aggregator."""

from __future__ import annotations

from datetime import datetime

from commitpulse.engines.activity_pattern.models import ActivityEvent
from commitpulse.engines.run_report import summarize


def _at(*args: int) -> ActivityEvent:
    return ActivityEvent(datetime(*args), "chore: x")


class TestSummarize:
    def test_empty(self):
        report = summarize([])
        assert report.total == 0
        assert report.active_days == 0
        assert report.average_per_day == 0
        assert report.most_active_month is None
        assert report.most_active_weekday is None

    def test_groups_by_day_month_weekday(self):
        events = [
            _at(2024, 1, 29, 10),  # Monday
            _at(2024, 1, 29, 11),
            _at(2024, 1, 31, 9),  # Wednesday
            _at(2024, 2, 5, 9),  # Monday
        ]
        report = summarize(events)

        assert report.total == 4
        assert report.active_days == 3
        assert report.max_per_day == 2
        assert report.average_per_day == round(4 / 3, 2)
        assert report.by_month == {"2024-01": 3, "2024-02": 1}
        assert report.by_weekday == {"Monday": 3, "Wednesday": 1}
        assert report.most_active_month == "2024-01"
        assert report.most_active_weekday == "Monday"

    def test_ties_go_to_first_seen(self):
        events = [_at(2024, 3, 1, 9), _at(2024, 4, 2, 9)]  # Friday, Tuesday
        report = summarize(events)
        assert report.most_active_month == "2024-03"
        assert report.most_active_weekday == "Friday"

    def test_render_and_to_dict(self):
        report = summarize([_at(2024, 5, 6, 9), _at(2024, 5, 6, 10)])
        lines = report.render()
        assert lines[0] == "Statistics"
        assert "  Total commits: 2" in lines
        assert "  Most active month: 2024-05 (2)" in lines

        d = report.to_dict()
        assert d["total"] == 2
        assert d["by_weekday"] == {"Monday": 2}
        assert "by_day" not in d
