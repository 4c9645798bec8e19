"""Data models for the batch scheduler engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from commitpulse.engines.commit_sink.models import PushResult


class EventStatus(str, Enum):
    COMMITTED = "committed"
    SKIPPED = "skipped"
    FAILED = "failed"  # unrecoverable sink error; counted as skipped too


@dataclass
class RunOutcome:
    """Counters for one batch run.

    ``skipped`` counts every processed event that did not become a commit;
    ``failed_fatal`` is the subset of those caused by an unrecoverable sink
    error.
    """

    total: int = 0
    successful: int = 0
    skipped: int = 0
    failed_fatal: int = 0
    cancelled: bool = False
    push: PushResult | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.successful + self.skipped

    def record(self, status: EventStatus) -> None:
        if status == EventStatus.COMMITTED:
            self.successful += 1
        else:
            self.skipped += 1
            if status == EventStatus.FAILED:
                self.failed_fatal += 1

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "processed": self.processed,
            "successful": self.successful,
            "skipped": self.skipped,
            "failed_fatal": self.failed_fatal,
            "cancelled": self.cancelled,
            "push": self.push.to_dict() if self.push else None,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class BatchProgress:
    """Snapshot of running totals emitted during a batch."""

    processed: int
    total: int
    successful: int
    skipped: int
    failed_fatal: int

    @property
    def percent(self) -> int:
        if not self.total:
            return 100
        return self.processed * 100 // self.total


class CancellationToken:
    """Cooperative cancellation flag, checked by the runner between events."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
