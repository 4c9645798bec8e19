"""Abstract interface the batch runner depends on."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Protocol

from commitpulse.engines.commit_sink.models import CommitResult, PushResult


class CommitSink(Protocol):
    """Anything that can persist backdated commits for a working tree."""

    repo_path: Path

    async def ensure_repository(self) -> None: ...

    async def configure_identity(self) -> bool: ...

    async def has_pending_changes(self) -> bool: ...

    async def current_branch(self) -> str: ...

    async def stage_and_commit(
        self, paths: Sequence[Path | str], message: str, timestamp: datetime
    ) -> CommitResult: ...

    async def push(self, branch: str) -> PushResult: ...

    def lock_age(self) -> float | None: ...

    def remove_lock(self) -> bool: ...
