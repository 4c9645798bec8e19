"""Run report — pure statistics over a list of activity events."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from commitpulse.engines.activity_pattern.models import ActivityEvent

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass
class RunReport:
    """Grouped counts for a (possibly partial) pattern.

    ``most_active_*`` ties resolve to the key seen first while iterating the
    events, i.e. the earliest one for a sorted pattern.
    """

    total: int = 0
    active_days: int = 0
    average_per_day: float = 0.0  # per active day
    max_per_day: int = 0
    by_day: dict[date, int] = field(default_factory=dict)
    by_month: dict[str, int] = field(default_factory=dict)
    by_weekday: dict[str, int] = field(default_factory=dict)
    most_active_month: str | None = None
    most_active_weekday: str | None = None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "active_days": self.active_days,
            "average_per_day": self.average_per_day,
            "max_per_day": self.max_per_day,
            "by_month": dict(self.by_month),
            "by_weekday": dict(self.by_weekday),
            "most_active_month": self.most_active_month,
            "most_active_weekday": self.most_active_weekday,
        }

    def render(self) -> list[str]:
        lines = [
            "Statistics",
            f"  Total commits: {self.total}",
            f"  Days with commits: {self.active_days}",
            f"  Average per active day: {self.average_per_day:.1f}",
            f"  Max commits in a day: {self.max_per_day}",
        ]
        if self.most_active_month:
            lines.append(
                f"  Most active month: {self.most_active_month} "
                f"({self.by_month[self.most_active_month]})"
            )
        if self.most_active_weekday:
            lines.append(
                f"  Most active weekday: {self.most_active_weekday} "
                f"({self.by_weekday[self.most_active_weekday]})"
            )
        return lines


def _first_max(counts: dict[str, int]) -> str | None:
    best: str | None = None
    for key, value in counts.items():
        if best is None or value > counts[best]:
            best = key
    return best


def summarize(events: Iterable[ActivityEvent]) -> RunReport:
    """Group *events* by day, month and weekday."""
    report = RunReport()
    for event in events:
        day = event.timestamp.date()
        month = f"{day.year:04d}-{day.month:02d}"
        weekday = WEEKDAY_NAMES[day.weekday()]

        report.total += 1
        report.by_day[day] = report.by_day.get(day, 0) + 1
        report.by_month[month] = report.by_month.get(month, 0) + 1
        report.by_weekday[weekday] = report.by_weekday.get(weekday, 0) + 1

    report.active_days = len(report.by_day)
    if report.active_days:
        report.average_per_day = round(report.total / report.active_days, 2)
        report.max_per_day = max(report.by_day.values())
    report.most_active_month = _first_max(report.by_month)
    report.most_active_weekday = _first_max(report.by_weekday)
    return report
