"""Progress reporting for batch runs."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from commitpulse.engines.batch_scheduler.models import BatchProgress, RunOutcome

log = structlog.get_logger("commitpulse.engine.batch")


class ProgressReporter:
    """Emit running totals every *every* events and on the final event."""

    def __init__(self, every: int = 25) -> None:
        self.every = max(1, every)
        self.callbacks: list[Callable[[BatchProgress], None]] = []
        self.history: list[BatchProgress] = []

    def maybe_emit(self, outcome: RunOutcome) -> None:
        processed = outcome.processed
        if processed % self.every == 0 or processed == outcome.total:
            self.emit(outcome)

    def emit(self, outcome: RunOutcome) -> None:
        p = BatchProgress(
            processed=outcome.processed,
            total=outcome.total,
            successful=outcome.successful,
            skipped=outcome.skipped,
            failed_fatal=outcome.failed_fatal,
        )
        self.history.append(p)
        log.info(
            "batch.progress",
            processed=p.processed,
            total=p.total,
            percent=p.percent,
            successful=p.successful,
            skipped=p.skipped,
        )
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                log.debug("batch.progress_callback_error", exc_info=True)
