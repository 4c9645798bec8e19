"""Data models for the commit sink engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class CommitFailureKind(str, Enum):
    NOTHING_TO_COMMIT = "nothing_to_commit"
    MISSING_IDENTITY = "missing_identity"
    LOCK_CONTENTION = "lock_contention"
    OTHER = "other"


class PushStatus(str, Enum):
    PUSHED = "pushed"
    SKIPPED = "skipped"  # no remote configured
    FAILED = "failed"


@dataclass
class GitResult:
    """Raw outcome of one git subprocess invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        return f"{self.stdout}\n{self.stderr}".strip()


@dataclass
class CommitResult:
    """Typed outcome of ``stage_and_commit``."""

    ok: bool
    kind: CommitFailureKind | None = None
    detail: str = ""

    @classmethod
    def success(cls) -> CommitResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: CommitFailureKind, detail: str = "") -> CommitResult:
        return cls(ok=False, kind=kind, detail=detail)


@dataclass
class PushResult:
    """Typed outcome of the push protocol."""

    status: PushStatus
    reason: str = ""
    attempts: int = 0
    upstream_set: bool = False

    @property
    def ok(self) -> bool:
        return self.status == PushStatus.PUSHED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "reason": self.reason,
            "attempts": self.attempts,
            "upstream_set": self.upstream_set,
        }


@dataclass
class CommitRecord:
    """A commit read back from history."""

    sha: str
    subject: str
    authored_at: datetime
