"""Activity pattern generator — turns density parameters into commit events.

Pure engine: no git, no file I/O. All randomness flows through one
``random.Random`` so a fixed seed reproduces a pattern exactly.
"""

from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta

from commitpulse.engines.activity_pattern.messages import DEFAULT_MESSAGE_POOL
from commitpulse.engines.activity_pattern.models import ActivityEvent, PatternParameters

_BURST_MIN = 3
_BURST_MAX = 7


class ActivityPatternGenerator:
    """Generates backdated commit events for a calendar window."""

    def __init__(
        self,
        params: PatternParameters,
        rng: random.Random | None = None,
        today: date | None = None,
    ) -> None:
        params.validate()
        self.params = params
        self.rng = rng or random.Random(params.seed)
        self.today = today or date.today()

    def generate(self) -> list[ActivityEvent]:
        """Generate the full pattern, sorted ascending by timestamp."""
        start = self.today - timedelta(days=self.params.days_back)
        total_days = self.params.days_back + self.params.days_forward

        events: list[ActivityEvent] = []
        for offset in range(total_days):
            events.extend(self._generate_day(start + timedelta(days=offset)))

        return sorted(events, key=lambda e: e.timestamp)

    def _generate_day(self, day: date) -> list[ActivityEvent]:
        """Generate all events for a single calendar day."""
        # Weekend days are dropped before any roll so they don't consume randomness
        if self.params.no_weekends and day.weekday() >= 5:
            return []

        if self.rng.random() * 100 >= self.params.frequency:
            return []

        count = self.rng.randint(
            self.params.min_commits_per_day, self.params.max_commits_per_day
        )
        if self.params.burst_chance > 0 and self.rng.random() < self.params.burst_chance:
            count += self.rng.randint(_BURST_MIN, _BURST_MAX)

        return [
            ActivityEvent(timestamp=self._sample_time(day), message=self._message(day))
            for _ in range(count)
        ]

    def _sample_time(self, day: date) -> datetime:
        """Pick a uniform time of day inside the working-hours window."""
        hour = self.rng.randrange(self.params.start_hour, self.params.end_hour)
        minute = self.rng.randrange(60)
        second = self.rng.randrange(60)
        return datetime.combine(day, time(hour, minute, second))

    def _message(self, day: date) -> str:
        """Pick a message: custom list first, built-in category pool otherwise."""
        if self.params.custom_messages:
            return f"{self.rng.choice(self.params.custom_messages)} - {day.isoformat()}"

        category = self.rng.choice(list(DEFAULT_MESSAGE_POOL))
        phrase = self.rng.choice(DEFAULT_MESSAGE_POOL[category])
        return f"{category}: {phrase}"


def generate(
    params: PatternParameters,
    rng: random.Random | None = None,
    today: date | None = None,
) -> list[ActivityEvent]:
    """Convenience wrapper: ``ActivityPatternGenerator(params, rng, today).generate()``."""
    return ActivityPatternGenerator(params, rng=rng, today=today).generate()
