"""Batch scheduler engine — ordered, failure-tolerant commit replay."""

from commitpulse.engines.batch_scheduler.models import (
    BatchProgress,
    CancellationToken,
    EventStatus,
    RunOutcome,
)
from commitpulse.engines.batch_scheduler.progress import ProgressReporter
from commitpulse.engines.batch_scheduler.runner import BatchCommitRunner

__all__ = [
    "BatchCommitRunner",
    "BatchProgress",
    "CancellationToken",
    "EventStatus",
    "ProgressReporter",
    "RunOutcome",
]
