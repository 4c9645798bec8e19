"""Named parameter presets and lenient positional-argument parsing.

The daily/micro/batch/high-volume commands differ only in their presets;
they all run through the same generator and batch runner.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from commitpulse.engines.activity_pattern.models import PatternParameters

PRESETS: dict[str, PatternParameters] = {
    # Today only: a progress-log style pair of commits
    "daily": PatternParameters(
        days_back=0,
        days_forward=1,
        frequency=100,
        min_commits_per_day=2,
        max_commits_per_day=2,
    ),
    # Today only: a handful of small commits
    "micro": PatternParameters(
        days_back=0,
        days_forward=1,
        frequency=100,
        min_commits_per_day=4,
        max_commits_per_day=4,
    ),
    "batch": PatternParameters(),
    "high-volume": PatternParameters(
        days_back=365,
        frequency=95,
        min_commits_per_day=3,
        max_commits_per_day=15,
        burst_chance=0.3,
        start_hour=6,
        end_hour=23,
    ),
}

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}


def get_preset(name: str) -> PatternParameters:
    """Return the preset called *name*; raises ``KeyError`` for unknown names."""
    return PRESETS[name]


def _int_or(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_or(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _bool_or(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return default


def params_from_args(args: Sequence[str], base: PatternParameters) -> PatternParameters:
    """Overlay positional arguments on *base*.

    Positional order::

        days_back days_forward frequency max_per_day no_weekends
        custom_messages(csv) min_per_day burst_chance

    Missing or unparsable values keep the preset's value. A ``max_per_day``
    below the preset's minimum pulls the minimum down with it.
    """

    def _arg(i: int) -> str | None:
        if i < len(args) and args[i] not in ("", "-"):
            return args[i]
        return None

    days_back = _int_or(_arg(0), base.days_back)
    days_forward = _int_or(_arg(1), base.days_forward)
    frequency = _float_or(_arg(2), base.frequency)
    max_per_day = _int_or(_arg(3), base.max_commits_per_day)
    no_weekends = _bool_or(_arg(4), base.no_weekends)

    custom_raw = _arg(5)
    if custom_raw is not None:
        custom_messages = tuple(m.strip() for m in custom_raw.split(",") if m.strip())
    else:
        custom_messages = base.custom_messages

    min_per_day = _int_or(_arg(6), base.min_commits_per_day)
    if max_per_day >= 1 and min_per_day > max_per_day:
        min_per_day = max_per_day
    burst_chance = _float_or(_arg(7), base.burst_chance)

    return replace(
        base,
        days_back=days_back,
        days_forward=days_forward,
        frequency=frequency,
        max_commits_per_day=max_per_day,
        min_commits_per_day=min_per_day,
        no_weekends=no_weekends,
        custom_messages=custom_messages,
        burst_chance=burst_chance,
    )
