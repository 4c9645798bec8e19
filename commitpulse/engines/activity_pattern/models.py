"""Data models for the activity pattern engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from commitpulse.exceptions import InvalidParametersError

# Ten years either side of today
MAX_WINDOW_DAYS = 3650


@dataclass(frozen=True)
class ActivityEvent:
    """A single synthetic commit: backdated timestamp plus message.

    Timestamps are naive local times; git interprets them in the local zone.
    """

    timestamp: datetime
    message: str


@dataclass(frozen=True)
class PatternParameters:
    """Density and window configuration for a generated pattern."""

    # Window, relative to today
    days_back: int = 365
    days_forward: int = 0

    # Density
    frequency: float = 80  # percent chance a candidate day gets commits
    min_commits_per_day: int = 1
    max_commits_per_day: int = 10
    burst_chance: float = 0.0  # probability of an extra 3..7 commits

    # Variation
    no_weekends: bool = False
    custom_messages: tuple[str, ...] = field(default_factory=tuple)

    # Working hours, [start_hour, end_hour)
    start_hour: int = 9
    end_hour: int = 21

    seed: int | None = None

    def validate(self) -> None:
        """Validate all parameters, reporting every violation at once."""
        errors = []

        if not 0 <= self.days_back <= MAX_WINDOW_DAYS:
            errors.append(f"days_back must be within [0, {MAX_WINDOW_DAYS}], got {self.days_back}")
        if not 0 <= self.days_forward <= MAX_WINDOW_DAYS:
            errors.append(
                f"days_forward must be within [0, {MAX_WINDOW_DAYS}], got {self.days_forward}"
            )
        if not 0 <= self.frequency <= 100:
            errors.append(f"frequency must be within [0, 100], got {self.frequency}")
        if self.min_commits_per_day < 1:
            errors.append("min_commits_per_day must be >= 1")
        if self.max_commits_per_day < self.min_commits_per_day:
            errors.append("max_commits_per_day must be >= min_commits_per_day")
        if not 0 <= self.burst_chance <= 1:
            errors.append(f"burst_chance must be within [0, 1], got {self.burst_chance}")
        if not 0 <= self.start_hour < self.end_hour <= 24:
            errors.append("working hours must satisfy 0 <= start_hour < end_hour <= 24")

        if errors:
            raise InvalidParametersError(errors)

    def to_dict(self) -> dict:
        return {
            "days_back": self.days_back,
            "days_forward": self.days_forward,
            "frequency": self.frequency,
            "min_commits_per_day": self.min_commits_per_day,
            "max_commits_per_day": self.max_commits_per_day,
            "burst_chance": self.burst_chance,
            "no_weekends": self.no_weekends,
            "custom_messages": list(self.custom_messages),
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "seed": self.seed,
        }
