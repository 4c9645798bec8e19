"""Fakes shared by the engine and service tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pytest

from commitpulse.engines.commit_sink.models import (
    CommitRecord,
    CommitResult,
    PushResult,
    PushStatus,
)
from commitpulse.engines.content_fabricator.models import FileMutation


class FakeSink:
    """In-memory CommitSink with scripted commit results."""

    def __init__(
        self,
        repo_path: Path,
        *,
        results: Sequence[CommitResult] = (),
        pending: bool = True,
        lock_age: float | None = None,
        push_result: PushResult | None = None,
        has_remote: bool = True,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.results = list(results)
        self.pending = pending
        self._lock_age = lock_age
        self.push_result = push_result or PushResult(status=PushStatus.PUSHED, attempts=1)
        self.remote = "origin"
        self.remote_url: str | None = None
        self._has_remote = has_remote
        self.ensure_error: Exception | None = None
        self.push_error: Exception | None = None
        self.commit_error: Exception | None = None

        self.ensure_calls = 0
        self.commit_calls = 0
        self.identity_calls = 0
        self.removed_locks = 0
        self.commits: list[tuple[str, datetime]] = []
        self.staged: list[list[str]] = []
        self.pushed: list[str] = []
        self.history: list[CommitRecord] = []

    async def ensure_repository(self) -> None:
        self.ensure_calls += 1
        if self.ensure_error is not None:
            raise self.ensure_error

    async def configure_identity(self) -> bool:
        self.identity_calls += 1
        return True

    async def has_pending_changes(self) -> bool:
        return self.pending

    async def current_branch(self) -> str:
        return "main"

    async def stage_and_commit(self, paths, message: str, timestamp: datetime) -> CommitResult:
        self.commit_calls += 1
        self.staged.append([str(p) for p in paths])
        if self.commit_error is not None:
            raise self.commit_error
        result = self.results.pop(0) if self.results else CommitResult.success()
        if result.ok:
            self.commits.append((message, timestamp))
        return result

    async def push(self, branch: str) -> PushResult:
        if self.push_error is not None:
            raise self.push_error
        self.pushed.append(branch)
        return self.push_result

    def lock_age(self) -> float | None:
        return self._lock_age

    def remove_lock(self) -> bool:
        self.removed_locks += 1
        self._lock_age = None
        return True

    async def has_commits(self) -> bool:
        return bool(self.commits)

    async def has_remote(self) -> bool:
        return self._has_remote

    async def set_remote(self, url: str) -> None:
        self.remote_url = url
        self._has_remote = True

    async def log(self, limit: int | None = None) -> list[CommitRecord]:
        return self.history[:limit] if limit is not None else list(self.history)


class LineFabricator:
    """Appends one line per event to a single file."""

    def __init__(self, path: str = "activity.log") -> None:
        self.path = path

    def produce(self, when: datetime, index: int) -> list[FileMutation]:
        return [FileMutation(path=self.path, content=f"{index} {when.isoformat()}\n")]


@pytest.fixture
def fake_sink(tmp_path):
    def _make(**kwargs) -> FakeSink:
        return FakeSink(tmp_path, **kwargs)

    return _make


@pytest.fixture
def no_sleep():
    calls: list[float] = []

    async def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls  # type: ignore[attr-defined]
    return _sleep


@pytest.fixture
def line_fabricator():
    return LineFabricator()
