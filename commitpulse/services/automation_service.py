"""AutomationService — the commands exposed by the CLI and the HTTP API.

Every command works on one ``RunContext``. ``execute()`` is the whitelisted,
serialized, time-boxed entry point used by the API; the CLI calls the
command methods directly.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

import structlog

from commitpulse.core.context import RunContext
from commitpulse.engines.activity_pattern import generate, get_preset, params_from_args
from commitpulse.engines.batch_scheduler.models import BatchProgress, CancellationToken, RunOutcome
from commitpulse.engines.batch_scheduler.runner import BatchCommitRunner
from commitpulse.engines.commit_sink.git_sink import GitSink
from commitpulse.engines.commit_sink.models import PushResult, PushStatus
from commitpulse.engines.content_fabricator import (
    Fabricator,
    FileMutation,
    RotatingFabricator,
    apply_mutations,
)
from commitpulse.engines.run_report.aggregator import RunReport, summarize
from commitpulse.exceptions import (
    CommandNotAllowedError,
    CommandTimeoutError,
    RemoteConfigError,
)

log = structlog.get_logger("commitpulse.service.automation")

ALLOWED_COMMANDS = (
    "init",
    "daily",
    "micro",
    "batch",
    "high-volume",
    "push",
    "auto",
    "setup-remote",
    "status",
)
PRESET_COMMANDS = ("daily", "micro", "batch", "high-volume")
REMOTE_PLACEHOLDERS = ("yourusername", "yourrepo")


@dataclass
class CommandResult:
    """What a command did, in a shape both the CLI and the API can render."""

    command: str
    success: bool
    message: str
    outcome: RunOutcome | None = None
    report: RunReport | None = None
    push: PushResult | None = None
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "success": self.success,
            "message": self.message,
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "report": self.report.to_dict() if self.report else None,
            "push": self.push.to_dict() if self.push else None,
            "data": dict(self.data),
        }


def _seed_files(today: str) -> list[FileMutation]:
    return [
        FileMutation(
            path="daily-progress.md",
            header="# Daily Progress Log\n",
            content=f"\n## {today}\n- Commit tracking initialized\n",
        ),
        FileMutation(
            path="todos.md",
            header="# TODO List\n",
            content="\n- [ ] Keep the daily progress log up to date\n",
        ),
        FileMutation(
            path="CHANGELOG.md",
            header="# Changelog\n",
            content=f"\n## [{today}]\n- Initial setup\n",
        ),
    ]


class AutomationService:
    """Run commitpulse commands against one repository."""

    def __init__(
        self,
        context: RunContext,
        *,
        runner: BatchCommitRunner | None = None,
        fabricator: Fabricator | None = None,
        sink_factory: Callable[[], GitSink] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._context = context
        self._runner = runner or context.build_runner()
        self._fabricator = fabricator or RotatingFabricator()
        self._sink_factory = sink_factory or context.build_sink
        self._clock = clock or datetime.now
        self._lock = asyncio.Lock()

    @property
    def context(self) -> RunContext:
        return self._context

    # ── whitelisted entry point ───────────────────────────────────────────

    async def execute(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        push: bool = False,
    ) -> CommandResult:
        """Run *command* under the service lock within ``command_timeout`` seconds.

        Raises ``CommandNotAllowedError`` for commands outside the whitelist and
        ``CommandTimeoutError`` when the time budget runs out.
        """
        if command not in ALLOWED_COMMANDS:
            raise CommandNotAllowedError(command, ALLOWED_COMMANDS)

        timeout = self._context.settings.command_timeout
        async with self._lock:
            log.info("automation.execute", command=command, args=list(args), push=push)
            try:
                return await asyncio.wait_for(self._dispatch(command, args, push), timeout)
            except asyncio.TimeoutError as exc:
                log.error("automation.timeout", command=command, timeout=timeout)
                raise CommandTimeoutError(
                    f"command '{command}' timed out after {timeout:g}s"
                ) from exc

    async def _dispatch(self, command: str, args: Sequence[str], push: bool) -> CommandResult:
        if command in PRESET_COMMANDS:
            return await self.run_preset(command, args, push=push)
        if command == "setup-remote":
            return await self.setup_remote(args[0] if args else "")
        handlers = {
            "init": self.init_repository,
            "auto": self.auto,
            "push": self.push,
            "status": self.status,
        }
        return await handlers[command]()

    # ── commands ──────────────────────────────────────────────────────────

    async def init_repository(self) -> CommandResult:
        """Create the repository, seed tracking files and make an initial commit."""
        sink = self._sink_factory()
        await sink.ensure_repository()

        now = self._clock().replace(microsecond=0)
        seeds = [
            m
            for m in _seed_files(now.date().isoformat())
            if not (sink.repo_path / m.path).exists()
        ]
        paths = apply_mutations(sink.repo_path, seeds)

        committed = False
        if not await sink.has_commits():
            result = await sink.stage_and_commit(paths, "chore: initialize commit tracking", now)
            committed = result.ok
            if not result.ok:
                log.warning("automation.init_commit_failed", kind=result.kind, detail=result.detail)

        log.info("automation.initialised", seeded=[p.name for p in paths], committed=committed)
        return CommandResult(
            command="init",
            success=True,
            message="Repository initialized",
            data={
                "repository": str(sink.repo_path),
                "seeded": [p.name for p in paths],
                "initial_commit": committed,
            },
        )

    async def run_preset(
        self,
        name: str,
        args: Sequence[str] = (),
        *,
        push: bool = False,
        dry_run: bool = False,
        seed: int | None = None,
        cancel_token: CancellationToken | None = None,
        on_progress: Callable[[BatchProgress], None] | None = None,
    ) -> CommandResult:
        """Generate a pattern from preset *name* plus *args* and commit it.

        Raises ``KeyError`` for unknown presets and ``InvalidParametersError``
        for parameters that fail validation.
        """
        params = params_from_args(args, get_preset(name))
        if seed is not None:
            params = replace(params, seed=seed)

        events = generate(params, today=self._clock().date())
        report = summarize(events)
        log.info("automation.pattern", command=name, events=len(events), dry_run=dry_run)

        if dry_run:
            return CommandResult(
                command=name,
                success=True,
                message=f"Dry run: {len(events)} commits planned",
                report=report,
                data={"parameters": params.to_dict()},
            )

        sink = self._sink_factory()
        outcome = await self._runner.run_batch(
            events,
            self._fabricator,
            sink,
            push=push,
            cancel_token=cancel_token,
            on_progress=on_progress,
        )
        if outcome.push is not None and outcome.push.status != PushStatus.SKIPPED:
            self._context.schedule.record_run()

        success = outcome.successful > 0 or outcome.failed_fatal == 0
        return CommandResult(
            command=name,
            success=success,
            message=(
                f"{outcome.successful} commits created, {outcome.skipped} skipped"
                + (" (cancelled)" if outcome.cancelled else "")
            ),
            outcome=outcome,
            report=report,
            push=outcome.push,
            data={"parameters": params.to_dict()},
        )

    async def auto(self) -> CommandResult:
        """Daily automation: run the ``daily`` preset and push, at most once per 23 hours."""
        schedule = self._context.schedule
        if not schedule.should_run():
            next_run = schedule.next_run_at()
            log.info("automation.not_due", next_run=next_run.isoformat() if next_run else None)
            return CommandResult(
                command="auto",
                success=True,
                message="Daily run already done",
                data={
                    "ran": False,
                    "next_run_at": next_run.isoformat() if next_run else None,
                },
            )

        result = await self.run_preset("daily", push=True)
        # Stamp every automated run so the 23-hour gate holds without a remote
        if result.push is None or result.push.status == PushStatus.SKIPPED:
            schedule.record_run()
        next_run = schedule.next_run_at()
        result.command = "auto"
        result.data.update(
            ran=True,
            next_run_at=next_run.isoformat() if next_run else None,
        )
        return result

    async def push(self) -> CommandResult:
        sink = self._sink_factory()
        await sink.ensure_repository()
        branch = await sink.current_branch()
        result = await sink.push(branch)
        if result.status != PushStatus.SKIPPED:
            self._context.schedule.record_run()
        return CommandResult(
            command="push",
            success=result.status != PushStatus.FAILED,
            message=self._push_message(result),
            push=result,
        )

    async def setup_remote(self, url: str) -> CommandResult:
        """Point the remote at *url* and push.

        Raises ``RemoteConfigError`` for empty or placeholder URLs.
        """
        url = url.strip()
        if not url:
            raise RemoteConfigError("repository URL is required")
        if any(placeholder in url for placeholder in REMOTE_PLACEHOLDERS):
            raise RemoteConfigError(
                "replace the placeholder URL with a real repository URL"
            )

        sink = self._sink_factory()
        await sink.ensure_repository()
        await sink.set_remote(url)
        branch = await sink.current_branch()
        result = await sink.push(branch)
        if result.status != PushStatus.SKIPPED:
            self._context.schedule.record_run()
        return CommandResult(
            command="setup-remote",
            success=result.ok,
            message=(
                "Remote configured and pushed"
                if result.ok
                else f"Remote configured; {self._push_message(result)}"
            ),
            push=result,
            data={"remote": sink.remote, "url": url},
        )

    async def status(self) -> CommandResult:
        schedule = self._context.schedule
        state = schedule.load()
        next_run = schedule.next_run_at()
        sink = self._sink_factory()
        try:
            has_remote = await sink.has_remote()
        except OSError as exc:
            log.warning("automation.remote_check_failed", error=str(exc))
            has_remote = False
        return CommandResult(
            command="status",
            success=True,
            message="Automation configured" if schedule.exists else "Automation not configured",
            data={
                "repository": str(self._context.repo_path),
                "configured": schedule.exists,
                "last_push": state.last_push.isoformat() if state.last_push else None,
                "last_run_time": state.last_run_time.isoformat() if state.last_run_time else None,
                "total_runs": state.total_runs,
                "next_run_due": schedule.should_run(),
                "next_run_at": next_run.isoformat() if next_run else None,
                "has_remote": has_remote,
            },
        )

    @staticmethod
    def _push_message(result: PushResult) -> str:
        if result.status == PushStatus.PUSHED:
            return "Pushed to remote"
        if result.status == PushStatus.SKIPPED:
            return f"Push skipped: {result.reason}"
        return f"Push failed after {result.attempts} attempts: {result.reason}"
