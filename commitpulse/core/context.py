"""RunContext — everything a command needs about one working directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from commitpulse.core.config import Settings
from commitpulse.engines.batch_scheduler.runner import BatchCommitRunner
from commitpulse.engines.commit_sink.git_sink import GitSink
from commitpulse.services.schedule_service import ScheduleService


@dataclass
class RunContext:
    """Explicit per-repository state passed to services instead of module globals."""

    settings: Settings
    schedule: ScheduleService

    @property
    def repo_path(self) -> Path:
        return self.settings.repo_path

    @classmethod
    def from_settings(cls, settings: Settings) -> RunContext:
        return cls(settings=settings, schedule=ScheduleService.for_repo(settings.repo_path))

    def build_sink(self) -> GitSink:
        s = self.settings
        return GitSink(
            s.repo_path,
            default_branch=s.default_branch,
            remote=s.remote,
            author_name=s.author_name,
            author_email=s.author_email,
            commit_timeout=s.commit_timeout,
            push_timeout=s.push_timeout,
            push_retries=s.push_retries,
            push_backoff=s.push_backoff,
        )

    def build_runner(self) -> BatchCommitRunner:
        return BatchCommitRunner.from_settings(self.settings)
