"""BatchCommitRunner — replays an activity pattern against a commit sink.

Events are applied strictly in the order given (ascending timestamp), one at
a time: git cannot safely mutate one working tree concurrently, and authored
dates should never go backwards. No single event failure aborts the batch;
only ``RepositoryUnavailableError`` from ``ensure_repository()`` does, and it
is raised before any event is touched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from commitpulse.core.config import Settings
from commitpulse.engines.activity_pattern.models import ActivityEvent
from commitpulse.engines.batch_scheduler.models import (
    BatchProgress,
    CancellationToken,
    EventStatus,
    RunOutcome,
)
from commitpulse.engines.batch_scheduler.progress import ProgressReporter
from commitpulse.engines.commit_sink.base import CommitSink
from commitpulse.engines.commit_sink.models import (
    CommitFailureKind,
    CommitResult,
    PushResult,
    PushStatus,
)
from commitpulse.engines.content_fabricator.fabricator import Fabricator, apply_mutations

log = structlog.get_logger("commitpulse.engine.batch")


@dataclass
class _RunState:
    identity_configured: bool = False


class BatchCommitRunner:
    """Drive fabricator + sink per event with skip/retry semantics."""

    def __init__(
        self,
        *,
        lock_stale_seconds: float = 60.0,
        progress_every: int = 25,
        chunk_size: int = 100,
        chunk_pause: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.lock_stale_seconds = lock_stale_seconds
        self.progress_every = progress_every
        self.chunk_size = max(1, chunk_size)
        self.chunk_pause = chunk_pause
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> BatchCommitRunner:
        return cls(
            lock_stale_seconds=settings.lock_stale_seconds,
            progress_every=settings.progress_every,
            chunk_size=settings.chunk_size,
            chunk_pause=settings.chunk_pause,
        )

    async def run_batch(
        self,
        events: Sequence[ActivityEvent],
        fabricator: Fabricator,
        sink: CommitSink,
        *,
        push: bool = False,
        cancel_token: CancellationToken | None = None,
        on_progress: Callable[[BatchProgress], None] | None = None,
    ) -> RunOutcome:
        """Apply *events* in order and return the run's counters.

        1. ``sink.ensure_repository()`` (the only error that propagates)
        2. Per event: fabricate → pending check → commit → recover
        3. Optional push of the current branch
        """
        await sink.ensure_repository()

        outcome = RunOutcome(total=len(events))
        reporter = ProgressReporter(self.progress_every)
        if on_progress is not None:
            reporter.callbacks.append(on_progress)
        state = _RunState()
        chunked = len(events) > self.chunk_size

        log.info("batch.started", total=outcome.total, push=push)

        for index, event in enumerate(events):
            if cancel_token is not None and cancel_token.cancelled:
                outcome.cancelled = True
                log.warning("batch.cancelled", processed=outcome.processed, total=outcome.total)
                break

            # Cooperative yield between chunks of a large batch
            if chunked and index and index % self.chunk_size == 0:
                await self._sleep(self.chunk_pause)

            try:
                status = await self._process_event(index, event, fabricator, sink, outcome, state)
            except OSError as exc:
                log.error("batch.event_error", index=index, error=str(exc))
                outcome.errors.append(f"event {index}: {exc}")
                status = EventStatus.FAILED
            outcome.record(status)
            reporter.maybe_emit(outcome)

        if push and not outcome.cancelled:
            outcome.push = await self._push(sink)

        log.info(
            "batch.finished",
            total=outcome.total,
            successful=outcome.successful,
            skipped=outcome.skipped,
            failed_fatal=outcome.failed_fatal,
            cancelled=outcome.cancelled,
        )
        return outcome

    async def _process_event(
        self,
        index: int,
        event: ActivityEvent,
        fabricator: Fabricator,
        sink: CommitSink,
        outcome: RunOutcome,
        state: _RunState,
    ) -> EventStatus:
        try:
            mutations = fabricator.produce(event.timestamp, index)
            apply_mutations(Path(sink.repo_path), mutations)
        except OSError as exc:
            log.warning("batch.fabricate_failed", index=index, error=str(exc))
            outcome.errors.append(f"event {index}: fabricate failed: {exc}")
            return EventStatus.SKIPPED

        if not await sink.has_pending_changes():
            log.debug("batch.no_changes", index=index)
            return EventStatus.SKIPPED

        # Whole tree, matching has_pending_changes()
        result = await sink.stage_and_commit([], event.message, event.timestamp)
        if result.ok:
            return EventStatus.COMMITTED
        return await self._recover(index, event, result, sink, outcome, state)

    async def _recover(
        self,
        index: int,
        event: ActivityEvent,
        result: CommitResult,
        sink: CommitSink,
        outcome: RunOutcome,
        state: _RunState,
    ) -> EventStatus:
        """Apply the per-kind recovery policy to a failed commit."""
        if result.kind == CommitFailureKind.NOTHING_TO_COMMIT:
            log.debug("batch.nothing_to_commit", index=index)
            return EventStatus.SKIPPED

        if result.kind == CommitFailureKind.MISSING_IDENTITY:
            if not state.identity_configured:
                await sink.configure_identity()
                state.identity_configured = True
            retry = await sink.stage_and_commit([], event.message, event.timestamp)
            return self._after_retry(index, retry, outcome)

        if result.kind == CommitFailureKind.LOCK_CONTENTION:
            age = sink.lock_age()
            if age is not None and age <= self.lock_stale_seconds:
                # Another process is legitimately active; leave its lock alone
                log.info("batch.lock_busy", index=index, lock_age=round(age, 1))
                return EventStatus.SKIPPED
            if age is not None:
                log.warning("batch.lock_stale", index=index, lock_age=round(age, 1))
                sink.remove_lock()
            retry = await sink.stage_and_commit([], event.message, event.timestamp)
            return self._after_retry(index, retry, outcome)

        return self._fail(index, result, outcome)

    def _after_retry(self, index: int, retry: CommitResult, outcome: RunOutcome) -> EventStatus:
        if retry.ok:
            return EventStatus.COMMITTED
        if retry.kind == CommitFailureKind.NOTHING_TO_COMMIT:
            return EventStatus.SKIPPED
        return self._fail(index, retry, outcome)

    @staticmethod
    def _fail(index: int, result: CommitResult, outcome: RunOutcome) -> EventStatus:
        kind = result.kind.value if result.kind else "unknown"
        log.error("batch.commit_failed", index=index, kind=kind, detail=result.detail[:500])
        outcome.errors.append(f"event {index}: {kind}: {result.detail[:200]}")
        return EventStatus.FAILED

    @staticmethod
    async def _push(sink: CommitSink) -> PushResult:
        try:
            branch = await sink.current_branch()
            return await sink.push(branch)
        except OSError as exc:
            log.error("batch.push_error", error=str(exc))
            return PushResult(status=PushStatus.FAILED, reason=str(exc))
