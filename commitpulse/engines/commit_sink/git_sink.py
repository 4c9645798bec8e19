"""GitSink — async adapter over the ``git`` CLI.

Every operation is one or more ``git`` subprocesses started with an argument
list (never a shell), so commit messages travel as a single argv element and
need no quoting. Tool-specific error text is folded into typed results.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from pathlib import Path

import structlog

from commitpulse.engines.commit_sink.models import (
    CommitFailureKind,
    CommitRecord,
    CommitResult,
    GitResult,
    PushResult,
    PushStatus,
)
from commitpulse.exceptions import RemoteConfigError, RepositoryUnavailableError

log = structlog.get_logger("commitpulse.engine.sink")

# Files the tool writes into the working tree that must never be committed.
STATE_FILES = ("last-push.json",)

_LOCK_MARKERS = ("index.lock", "another git process seems to be running")
_IDENTITY_MARKERS = (
    "please tell me who you are",
    "unable to auto-detect email address",
    "empty ident name",
    "author identity unknown",
)
_NOTHING_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)
_NO_UPSTREAM_MARKERS = ("has no upstream branch", "no upstream branch", "no upstream configured")

_FIELD_SEP = "\x1f"


def clean_message(message: str) -> str:
    """Drop NUL bytes (git cannot store them) and surrounding whitespace."""
    return message.replace("\x00", "").strip()


def classify_failure(result: GitResult) -> CommitFailureKind:
    """Map git's human-readable failure text to a ``CommitFailureKind``."""
    if result.timed_out:
        return CommitFailureKind.OTHER
    text = result.output.lower()
    if any(marker in text for marker in _LOCK_MARKERS):
        return CommitFailureKind.LOCK_CONTENTION
    if any(marker in text for marker in _IDENTITY_MARKERS):
        return CommitFailureKind.MISSING_IDENTITY
    if any(marker in text for marker in _NOTHING_MARKERS):
        return CommitFailureKind.NOTHING_TO_COMMIT
    return CommitFailureKind.OTHER


class GitSink:
    """Commit sink backed by a local git working tree."""

    def __init__(
        self,
        repo_path: Path,
        *,
        default_branch: str = "main",
        remote: str = "origin",
        author_name: str = "Commit Pulse",
        author_email: str = "commitpulse@example.com",
        commit_timeout: float = 10.0,
        push_timeout: float = 60.0,
        push_retries: int = 3,
        push_backoff: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.default_branch = default_branch
        self.remote = remote
        self.author_name = author_name
        self.author_email = author_email
        self.commit_timeout = commit_timeout
        self.push_timeout = push_timeout
        self.push_retries = max(1, push_retries)
        self.push_backoff = push_backoff
        self._sleep = sleep or asyncio.sleep
        self._git_dir: Path | None = None
        # Stable, English error text for classification; never prompt for credentials
        self._env = {**os.environ, "LC_ALL": "C", "LANG": "C", "GIT_TERMINAL_PROMPT": "0"}

    # ── repository lifecycle ──────────────────────────────────────────────

    async def ensure_repository(self) -> None:
        """Create the repository and default identity if missing. Never destroys state.

        Raises ``RepositoryUnavailableError`` when git cannot run here or
        ``git init`` fails.
        """
        try:
            self.repo_path.mkdir(parents=True, exist_ok=True)
            inside = await self._git("rev-parse", "--is-inside-work-tree")
        except OSError as exc:
            raise RepositoryUnavailableError(
                f"cannot run git in {self.repo_path}: {exc}"
            ) from exc

        if not inside.ok:
            init = await self._git("init")
            if not init.ok:
                raise RepositoryUnavailableError(
                    f"git init failed in {self.repo_path}: {init.stderr.strip()}"
                )
            # Unborn HEAD: pick the default branch without needing git >= 2.28
            await self._git("symbolic-ref", "HEAD", f"refs/heads/{self.default_branch}")
            log.info("sink.repository_initialised", path=str(self.repo_path))

        git_dir = await self._git("rev-parse", "--absolute-git-dir")
        if git_dir.ok and git_dir.stdout.strip():
            self._git_dir = Path(git_dir.stdout.strip())

        if not await self._has_identity():
            await self.configure_identity()

        self._exclude_state_files()

    async def configure_identity(self) -> bool:
        """Set a repository-local default author name and email."""
        name = await self._git("config", "user.name", self.author_name)
        email = await self._git("config", "user.email", self.author_email)
        ok = name.ok and email.ok
        log.info(
            "sink.identity_configured",
            name=self.author_name,
            email=self.author_email,
            ok=ok,
        )
        return ok

    async def _has_identity(self) -> bool:
        name = await self._git("config", "user.name")
        email = await self._git("config", "user.email")
        return bool(name.ok and name.stdout.strip() and email.ok and email.stdout.strip())

    def _exclude_state_files(self) -> None:
        info_dir = self.git_dir / "info"
        exclude = info_dir / "exclude"
        try:
            info_dir.mkdir(parents=True, exist_ok=True)
            existing = exclude.read_text().splitlines() if exclude.exists() else []
            missing = [name for name in STATE_FILES if f"/{name}" not in existing]
            if missing:
                with exclude.open("a") as fh:
                    for name in missing:
                        fh.write(f"/{name}\n")
        except OSError:
            log.warning("sink.exclude_failed", path=str(exclude), exc_info=True)

    @property
    def git_dir(self) -> Path:
        return self._git_dir or self.repo_path / ".git"

    # ── working tree ──────────────────────────────────────────────────────

    async def has_pending_changes(self) -> bool:
        """Return True when ``git status`` reports anything to stage. Read-only."""
        result = await self._git("status", "--porcelain")
        if not result.ok:
            log.warning("sink.status_failed", error=result.stderr.strip())
            return False
        return bool(result.stdout.strip())

    async def current_branch(self) -> str:
        """Return the active branch, creating the default branch when detached."""
        result = await self._git("branch", "--show-current")
        branch = result.stdout.strip() if result.ok else ""
        if branch:
            return branch

        log.warning("sink.detached_head", branch=self.default_branch)
        created = await self._git("checkout", "-b", self.default_branch)
        if not created.ok:
            await self._git("checkout", self.default_branch)
        return self.default_branch

    async def stage_and_commit(
        self,
        paths: Sequence[Path | str],
        message: str,
        timestamp: datetime,
    ) -> CommitResult:
        """Stage *paths* (everything when empty) and commit with a backdated timestamp.

        Both author and committer dates are set to *timestamp*.
        """
        add_args = ["add", "-A", "--", *(str(p) for p in paths)] if paths else ["add", "-A"]
        added = await self._git(*add_args, timeout=self.commit_timeout)
        if not added.ok:
            return CommitResult.failure(classify_failure(added), added.output)

        stamp = timestamp.isoformat(timespec="seconds")
        env = {**self._env, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}
        result = await self._git(
            "commit",
            "-m",
            clean_message(message),
            timeout=self.commit_timeout,
            env=env,
        )
        if result.ok:
            return CommitResult.success()
        return CommitResult.failure(classify_failure(result), result.output)

    # ── lock handling ─────────────────────────────────────────────────────

    @property
    def lock_path(self) -> Path:
        return self.git_dir / "index.lock"

    def lock_age(self) -> float | None:
        """Seconds since the index lock was last modified, or None when absent."""
        try:
            return time.time() - self.lock_path.stat().st_mtime
        except FileNotFoundError:
            return None

    def remove_lock(self) -> bool:
        """Delete the index lock. Returns False when it was already gone."""
        try:
            self.lock_path.unlink()
        except FileNotFoundError:
            return False
        log.warning("sink.lock_removed", path=str(self.lock_path))
        return True

    # ── remotes ───────────────────────────────────────────────────────────

    async def has_remote(self) -> bool:
        result = await self._git("remote")
        return result.ok and bool(result.stdout.strip())

    async def set_remote(self, url: str) -> None:
        """Point ``self.remote`` at *url*, replacing any previous URL."""
        await self._git("remote", "remove", self.remote)
        added = await self._git("remote", "add", self.remote, url)
        if not added.ok:
            raise RemoteConfigError(f"failed to add remote {self.remote}: {added.stderr.strip()}")
        log.info("sink.remote_configured", remote=self.remote, url=url)

    async def push(self, branch: str) -> PushResult:
        """Push *branch* to the configured remote.

        1. No remote → ``SKIPPED``.
        2. A "no upstream" rejection is retried once with ``--set-upstream``.
        3. Other failures are retried up to ``push_retries`` attempts in
           total, sleeping ``push_backoff`` seconds between attempts.
        """
        if not await self.has_remote():
            log.info("sink.push_skipped", reason="no remote configured")
            return PushResult(status=PushStatus.SKIPPED, reason="no remote configured")

        args = ["push"]
        upstream_set = False
        last_error = ""
        for attempt in range(1, self.push_retries + 1):
            result = await self._git(*args, timeout=self.push_timeout)
            if not result.ok and not upstream_set and self._needs_upstream(result):
                upstream_set = True
                args = ["push", "--set-upstream", self.remote, branch]
                result = await self._git(*args, timeout=self.push_timeout)

            if result.ok:
                log.info("sink.pushed", branch=branch, attempts=attempt, upstream_set=upstream_set)
                return PushResult(
                    status=PushStatus.PUSHED, attempts=attempt, upstream_set=upstream_set
                )

            last_error = result.output
            log.warning(
                "sink.push_failed",
                branch=branch,
                attempt=attempt,
                max_retries=self.push_retries,
                error=last_error,
            )
            if attempt < self.push_retries:
                await self._sleep(self.push_backoff)

        return PushResult(
            status=PushStatus.FAILED,
            reason=last_error,
            attempts=self.push_retries,
            upstream_set=upstream_set,
        )

    @staticmethod
    def _needs_upstream(result: GitResult) -> bool:
        text = result.output.lower()
        return any(marker in text for marker in _NO_UPSTREAM_MARKERS)

    # ── history ───────────────────────────────────────────────────────────

    async def log(self, limit: int | None = None) -> list[CommitRecord]:
        """Return commits newest-first; empty for an unborn branch.

        Raises ``RepositoryUnavailableError`` when git cannot run in the
        repository path (e.g. the directory does not exist).
        """
        args = ["log", f"--pretty=format:%h{_FIELD_SEP}%s{_FIELD_SEP}%aI"]
        if limit is not None:
            args.insert(1, f"-n{limit}")
        try:
            result = await self._git(*args)
        except OSError as exc:
            raise RepositoryUnavailableError(
                f"cannot read history in {self.repo_path}: {exc}"
            ) from exc
        if not result.ok:
            return []

        records = []
        for line in result.stdout.splitlines():
            parts = line.split(_FIELD_SEP)
            if len(parts) != 3:
                continue
            sha, subject, authored = parts
            try:
                authored_at = datetime.fromisoformat(authored)
            except ValueError:
                continue
            records.append(CommitRecord(sha=sha, subject=subject, authored_at=authored_at))
        return records

    async def has_commits(self) -> bool:
        result = await self._git("rev-parse", "--verify", "--quiet", "HEAD")
        return result.ok

    # ── internal ──────────────────────────────────────────────────────────

    async def _git(
        self,
        *args: str,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> GitResult:
        """Run one git command in the repository; never raises on non-zero exit."""
        proc = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=str(self.repo_path),
            env=env or self._env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            log.warning("sink.git_timeout", command=args[0], timeout=timeout)
            return GitResult(
                returncode=-1,
                stderr=f"git {args[0]} timed out after {timeout}s",
                timed_out=True,
            )
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
            await asyncio.shield(proc.wait())
            raise
        return GitResult(
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
