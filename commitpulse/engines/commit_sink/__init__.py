"""Commit sink engine — typed async wrapper over the git CLI."""

from commitpulse.engines.commit_sink.base import CommitSink
from commitpulse.engines.commit_sink.git_sink import GitSink, classify_failure, clean_message
from commitpulse.engines.commit_sink.models import (
    CommitFailureKind,
    CommitRecord,
    CommitResult,
    GitResult,
    PushResult,
    PushStatus,
)

__all__ = [
    "CommitFailureKind",
    "CommitRecord",
    "CommitResult",
    "CommitSink",
    "GitResult",
    "GitSink",
    "PushResult",
    "PushStatus",
    "classify_failure",
    "clean_message",
]
