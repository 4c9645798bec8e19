"""Runtime settings read from ``COMMITPULSE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


@dataclass(frozen=True)
class Settings:
    """Tunables for the sink, the batch runner and the API layer."""

    repo_path: Path = field(default_factory=Path.cwd)
    default_branch: str = "main"
    remote: str = "origin"
    author_name: str = "Commit Pulse"
    author_email: str = "commitpulse@example.com"

    # Subprocess timeouts (seconds)
    commit_timeout: float = 10.0
    push_timeout: float = 60.0
    command_timeout: float = 120.0

    # Push protocol
    push_retries: int = 3
    push_backoff: float = 5.0

    # Batch runner
    lock_stale_seconds: float = 60.0
    progress_every: int = 25
    chunk_size: int = 100
    chunk_pause: float = 1.0

    cors_origins: tuple[str, ...] = ("http://localhost:3000",)

    @classmethod
    def from_env(cls, repo_path: Path | str | None = None) -> Settings:
        """Build settings from the environment; *repo_path* overrides ``COMMITPULSE_REPO_PATH``."""
        if repo_path is None:
            repo_path = os.environ.get("COMMITPULSE_REPO_PATH") or Path.cwd()
        cors = os.environ.get("COMMITPULSE_CORS_ORIGINS", "http://localhost:3000")
        return cls(
            repo_path=Path(repo_path).expanduser().resolve(),
            default_branch=os.environ.get("COMMITPULSE_DEFAULT_BRANCH", "main"),
            remote=os.environ.get("COMMITPULSE_REMOTE", "origin"),
            author_name=os.environ.get("COMMITPULSE_AUTHOR_NAME", "Commit Pulse"),
            author_email=os.environ.get("COMMITPULSE_AUTHOR_EMAIL", "commitpulse@example.com"),
            commit_timeout=_env_float("COMMITPULSE_COMMIT_TIMEOUT", 10.0),
            push_timeout=_env_float("COMMITPULSE_PUSH_TIMEOUT", 60.0),
            command_timeout=_env_float("COMMITPULSE_COMMAND_TIMEOUT", 120.0),
            push_retries=_env_int("COMMITPULSE_PUSH_RETRIES", 3),
            push_backoff=_env_float("COMMITPULSE_PUSH_BACKOFF", 5.0),
            lock_stale_seconds=_env_float("COMMITPULSE_LOCK_STALE_SECONDS", 60.0),
            progress_every=_env_int("COMMITPULSE_PROGRESS_EVERY", 25),
            chunk_size=_env_int("COMMITPULSE_CHUNK_SIZE", 100),
            chunk_pause=_env_float("COMMITPULSE_CHUNK_PAUSE", 1.0),
            cors_origins=tuple(o.strip() for o in cors.split(",") if o.strip()),
        )
