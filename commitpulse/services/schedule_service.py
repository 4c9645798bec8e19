"""ScheduleService — persisted push/run bookkeeping gating automated runs."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import structlog

log = structlog.get_logger("commitpulse.service.schedule")

SCHEDULE_FILE = "last-push.json"
DUE_AFTER = timedelta(hours=23)
NEXT_RUN_AFTER = timedelta(hours=24)


def _parse_ts(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Older files stored a bare date or a naive timestamp; treat them as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class ScheduleState:
    last_push: datetime | None = None
    total_runs: int = 0
    last_run_time: datetime | None = None

    @classmethod
    def from_json(cls, data: dict) -> ScheduleState:
        total = data.get("totalRuns", 0)
        return cls(
            last_push=_parse_ts(data.get("lastPush")),
            total_runs=total if isinstance(total, int) and total >= 0 else 0,
            last_run_time=_parse_ts(data.get("lastRunTime")),
        )

    def to_json(self) -> dict:
        return {
            "lastPush": self.last_push.isoformat() if self.last_push else None,
            "totalRuns": self.total_runs,
            "lastRunTime": self.last_run_time.isoformat() if self.last_run_time else None,
        }


class ScheduleService:
    """Read/write ``last-push.json`` in the repository root."""

    def __init__(self, path: Path, clock: Callable[[], datetime] | None = None) -> None:
        self.path = Path(path)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def for_repo(cls, repo_path: Path) -> ScheduleService:
        return cls(Path(repo_path) / SCHEDULE_FILE)

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> ScheduleState:
        """Return the persisted state; a missing or corrupt file reads as empty."""
        if not self.path.exists():
            return ScheduleState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("schedule.unreadable", path=str(self.path), error=str(exc))
            return ScheduleState()
        if not isinstance(data, dict):
            log.warning("schedule.unreadable", path=str(self.path), error="not a JSON object")
            return ScheduleState()
        return ScheduleState.from_json(data)

    def save(self, state: ScheduleState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state.to_json(), indent=2) + "\n", encoding="utf-8")

    def should_run(self) -> bool:
        """True on first run or when 23+ hours have passed since the last push."""
        state = self.load()
        if state.last_push is None:
            return True
        return self._clock() - state.last_push >= DUE_AFTER

    def next_run_at(self) -> datetime | None:
        state = self.load()
        if state.last_push is None:
            return None
        return state.last_push + NEXT_RUN_AFTER

    def record_run(self) -> ScheduleState:
        """Stamp a push attempt: ``lastPush`` and ``lastRunTime`` = now, ``totalRuns`` + 1."""
        state = self.load()
        now = self._clock()
        state.last_push = now
        state.last_run_time = now
        state.total_runs += 1
        self.save(state)
        log.info("schedule.recorded", total_runs=state.total_runs)
        return state
