"""Tests for the activity pattern generator."""

from __future__ import annotations

import random
from collections import Counter
from datetime import date, timedelta

import pytest

from commitpulse.engines.activity_pattern import (
    ActivityPatternGenerator,
    PatternParameters,
    generate,
)
from commitpulse.engines.activity_pattern.messages import DEFAULT_MESSAGE_POOL
from commitpulse.engines.activity_pattern.models import MAX_WINDOW_DAYS
from commitpulse.exceptions import InvalidParametersError

TODAY = date(2024, 6, 12)  # a Wednesday


def _params(**overrides) -> PatternParameters:
    defaults = dict(days_back=30, days_forward=0, frequency=80, seed=7)
    defaults.update(overrides)
    return PatternParameters(**defaults)


# ── ordering and window ──


class TestOrderingAndWindow:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 42])
    def test_sorted_and_within_window(self, seed):
        params = _params(days_back=20, days_forward=5, max_commits_per_day=6, burst_chance=0.5)
        events = generate(params, rng=random.Random(seed), today=TODAY)

        assert events
        stamps = [e.timestamp for e in events]
        assert stamps == sorted(stamps)
        start = TODAY - timedelta(days=20)
        end = TODAY + timedelta(days=5)
        assert all(start <= e.timestamp.date() < end for e in events)

    def test_zero_day_window_is_empty(self):
        params = _params(days_back=0, days_forward=0)
        assert generate(params, today=TODAY) == []

    def test_days_forward_includes_today(self):
        params = _params(days_back=0, days_forward=1, frequency=100)
        events = generate(params, today=TODAY)
        assert events
        assert {e.timestamp.date() for e in events} == {TODAY}

    def test_hours_within_working_window(self):
        params = _params(days_back=60, frequency=100, start_hour=10, end_hour=12)
        events = generate(params, today=TODAY)
        assert all(10 <= e.timestamp.hour < 12 for e in events)


# ── density ──


class TestDensity:
    def test_frequency_zero_is_empty(self):
        assert generate(_params(frequency=0, days_back=100), today=TODAY) == []

    def test_exact_count_per_day(self):
        params = _params(
            days_back=14, frequency=100, min_commits_per_day=3, max_commits_per_day=3
        )
        events = generate(params, today=TODAY)
        per_day = Counter(e.timestamp.date() for e in events)
        assert len(per_day) == 14
        assert set(per_day.values()) == {3}

    def test_exact_count_skips_weekends(self):
        params = _params(
            days_back=14,
            frequency=100,
            min_commits_per_day=2,
            max_commits_per_day=2,
            no_weekends=True,
        )
        events = generate(params, today=TODAY)
        per_day = Counter(e.timestamp.date() for e in events)
        assert len(per_day) == 10
        assert set(per_day.values()) == {2}

    def test_no_weekend_events(self):
        params = _params(days_back=90, no_weekends=True, max_commits_per_day=5)
        events = generate(params, today=TODAY)
        assert events
        assert all(e.timestamp.weekday() < 5 for e in events)

    def test_seven_day_window_two_per_day(self):
        params = PatternParameters(
            days_back=7,
            frequency=100,
            min_commits_per_day=2,
            max_commits_per_day=2,
            no_weekends=False,
        )
        events = generate(params, today=TODAY)

        assert len(events) == 14
        per_day = Counter(e.timestamp.date() for e in events)
        assert len(per_day) == 7
        assert set(per_day.values()) == {2}

    def test_burst_adds_three_to_seven(self):
        params = _params(
            days_back=20,
            frequency=100,
            min_commits_per_day=1,
            max_commits_per_day=1,
            burst_chance=1.0,
        )
        per_day = Counter(e.timestamp.date() for e in generate(params, today=TODAY))
        assert all(4 <= n <= 8 for n in per_day.values())


# ── randomness ──


class TestRandomness:
    def test_same_seed_same_pattern(self):
        params = _params(seed=1234, burst_chance=0.2)
        assert generate(params, today=TODAY) == generate(params, today=TODAY)

    def test_injected_rng_wins_over_seed(self):
        params = _params(seed=1)
        a = generate(params, rng=random.Random(99), today=TODAY)
        b = generate(params, rng=random.Random(99), today=TODAY)
        c = generate(params, today=TODAY)
        assert a == b
        assert a != c


# ── messages ──


class TestMessages:
    def test_default_messages_use_category_pool(self):
        events = generate(_params(frequency=100), today=TODAY)
        for event in events:
            category, phrase = event.message.split(": ", 1)
            assert category in DEFAULT_MESSAGE_POOL
            assert phrase in DEFAULT_MESSAGE_POOL[category]

    def test_custom_messages_carry_date_suffix(self):
        params = _params(frequency=100, custom_messages=("Tweak build", "Polish docs"))
        events = generate(params, today=TODAY)
        for event in events:
            text, suffix = event.message.rsplit(" - ", 1)
            assert text in ("Tweak build", "Polish docs")
            assert suffix == event.timestamp.date().isoformat()


# ── validation ──


class TestValidation:
    def test_reports_every_violation(self):
        params = PatternParameters(
            days_back=-1,
            frequency=120,
            min_commits_per_day=0,
            burst_chance=2,
            start_hour=20,
            end_hour=8,
        )
        with pytest.raises(InvalidParametersError) as exc_info:
            params.validate()
        assert len(exc_info.value.errors) == 5

    def test_max_below_min(self):
        with pytest.raises(InvalidParametersError, match="max_commits_per_day"):
            ActivityPatternGenerator(_params(min_commits_per_day=5, max_commits_per_day=2))

    def test_defaults_are_valid(self):
        PatternParameters().validate()

    @pytest.mark.parametrize("field", ["days_back", "days_forward"])
    def test_window_is_bounded(self, field):
        params = _params(**{field: MAX_WINDOW_DAYS + 1})
        with pytest.raises(InvalidParametersError, match=field):
            generate(params, today=TODAY)

    def test_huge_window_is_rejected_before_date_math(self):
        with pytest.raises(InvalidParametersError):
            generate(_params(days_back=1_000_000), today=TODAY)

    def test_window_at_bound_is_valid(self):
        _params(days_back=MAX_WINDOW_DAYS, days_forward=MAX_WINDOW_DAYS).validate()
