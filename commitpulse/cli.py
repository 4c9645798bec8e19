"""commitpulse CLI — generate, commit and push synthetic activity."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Coroutine
from typing import Any

import click

from commitpulse.core.config import Settings
from commitpulse.core.context import RunContext
from commitpulse.core.logging import setup_logging
from commitpulse.engines.batch_scheduler.models import BatchProgress
from commitpulse.exceptions import CommitPulseError
from commitpulse.services.automation_service import AutomationService, CommandResult
from commitpulse.services.stats_service import StatsService


def _context(ctx: click.Context) -> RunContext:
    return ctx.obj["context"]


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run *coro*; domain errors print a message and exit with status 1."""
    try:
        return asyncio.run(coro)
    except CommitPulseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Interrupted.", err=True)
        sys.exit(130)


def _print_progress(progress: BatchProgress) -> None:
    click.echo(
        f"  [{progress.processed}/{progress.total}] {progress.percent}% "
        f"({progress.successful} committed, {progress.skipped} skipped)"
    )


def _echo_result(result: CommandResult) -> None:
    icon = "OK" if result.success else "FAIL"
    click.echo(f"[{icon}] {result.command}: {result.message}")

    if result.outcome is not None:
        o = result.outcome
        click.echo(
            f"  Processed {o.processed}/{o.total}: {o.successful} committed, "
            f"{o.skipped} skipped, {o.failed_fatal} failed"
        )
        for err in o.errors[:10]:
            click.echo(f"    - {err}")
        if len(o.errors) > 10:
            click.echo(f"    ... and {len(o.errors) - 10} more")

    if result.push is not None:
        p = result.push
        line = f"  Push: {p.status.value}"
        if p.attempts:
            line += f" after {p.attempts} attempt(s)"
        if p.reason:
            line += f" ({p.reason.splitlines()[0]})"
        click.echo(line)

    if result.report is not None:
        click.echo("")
        for line in result.report.render():
            click.echo(line)

    if not result.success:
        sys.exit(1)


def _preset_command(
    ctx: click.Context,
    name: str,
    args: tuple[str, ...],
    push: bool,
    dry_run: bool,
    seed: int | None,
) -> None:
    svc = AutomationService(_context(ctx))
    result = _run(
        svc.run_preset(
            name,
            args,
            push=push,
            dry_run=dry_run,
            seed=seed,
            on_progress=None if dry_run else _print_progress,
        )
    )
    _echo_result(result)


_preset_options = [
    click.option("--push", is_flag=True, help="Push to the remote after committing"),
    click.option("--dry-run", is_flag=True, help="Generate and report without committing"),
    click.option("--seed", type=int, default=None, help="Seed for a reproducible pattern"),
]


def preset_options(func):
    for option in reversed(_preset_options):
        func = option(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--repo",
    type=click.Path(file_okay=False),
    default=None,
    envvar="COMMITPULSE_REPO_PATH",
    help="Target repository (default: current directory)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, repo: str | None) -> None:
    """Commit Pulse: keep a repository's contribution graph busy."""
    setup_logging("DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["context"] = RunContext.from_settings(Settings.from_env(repo))


@main.command("init")
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialise the repository and seed tracking files."""
    svc = AutomationService(_context(ctx))
    _echo_result(_run(svc.init_repository()))


@main.command("daily")
@preset_options
@click.pass_context
def daily(ctx: click.Context, push: bool, dry_run: bool, seed: int | None) -> None:
    """Create today's progress commits."""
    _preset_command(ctx, "daily", (), push, dry_run, seed)


@main.command("micro")
@preset_options
@click.pass_context
def micro(ctx: click.Context, push: bool, dry_run: bool, seed: int | None) -> None:
    """Create a handful of small commits for today."""
    _preset_command(ctx, "micro", (), push, dry_run, seed)


@main.command("batch")
@click.argument("args", nargs=-1)
@preset_options
@click.pass_context
def batch(
    ctx: click.Context,
    args: tuple[str, ...],
    push: bool,
    dry_run: bool,
    seed: int | None,
) -> None:
    """Backfill a pattern over a date window.

    \b
    ARGS (all optional, positional):
      DAYS_BACK DAYS_FORWARD FREQUENCY MAX_PER_DAY NO_WEEKENDS
      MESSAGES(csv) MIN_PER_DAY BURST_CHANCE
    """
    _preset_command(ctx, "batch", args, push, dry_run, seed)


@main.command("high-volume")
@click.argument("args", nargs=-1)
@preset_options
@click.pass_context
def high_volume(
    ctx: click.Context,
    args: tuple[str, ...],
    push: bool,
    dry_run: bool,
    seed: int | None,
) -> None:
    """Backfill a dense year of activity (same ARGS as ``batch``)."""
    _preset_command(ctx, "high-volume", args, push, dry_run, seed)


@main.command("auto")
@click.pass_context
def auto(ctx: click.Context) -> None:
    """Daily automation: commit and push at most once every 23 hours."""
    svc = AutomationService(_context(ctx))
    result = _run(svc.auto())
    _echo_result(result)
    if not result.data.get("ran") and result.data.get("next_run_at"):
        click.echo(f"  Next run due at {result.data['next_run_at']}")


@main.command("push")
@click.pass_context
def push(ctx: click.Context) -> None:
    """Push the current branch to the configured remote."""
    svc = AutomationService(_context(ctx))
    _echo_result(_run(svc.push()))


@main.command("setup-remote")
@click.argument("url")
@click.pass_context
def setup_remote(ctx: click.Context, url: str) -> None:
    """Point ``origin`` at URL and push."""
    svc = AutomationService(_context(ctx))
    _echo_result(_run(svc.setup_remote(url)))


@main.command("status")
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show automation schedule and remote state."""
    svc = AutomationService(_context(ctx))
    result = _run(svc.status())
    d = result.data
    click.echo(f"Repository:   {d['repository']}")
    click.echo(f"Configured:   {'yes' if d['configured'] else 'no'}")
    click.echo(f"Remote:       {'yes' if d['has_remote'] else 'no'}")
    click.echo(f"Last push:    {d['last_push'] or 'never'}")
    click.echo(f"Total runs:   {d['total_runs']}")
    click.echo(f"Next run due: {'yes' if d['next_run_due'] else 'no'}")
    if d["next_run_at"]:
        click.echo(f"Next run at:  {d['next_run_at']}")


@main.command("stats")
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show commit counts, streak and history statistics."""
    svc = StatsService(_context(ctx))

    async def _collect():
        return await svc.get_counts(), await svc.get_report()

    counts, report = _run(_collect())
    click.echo(f"Today:        {counts['today']}")
    click.echo(f"Last 7 days:  {counts['week']}")
    click.echo(f"Last 30 days: {counts['month']}")
    click.echo(f"Total:        {counts['total']}")
    click.echo(f"Streak:       {counts['streak']} day(s)")
    click.echo("")
    for line in report.render():
        click.echo(line)


@main.command("serve")
@click.option("--host", default="127.0.0.1", envvar="COMMITPULSE_HOST", help="Bind address")
@click.option("--port", default=3000, type=int, envvar="COMMITPULSE_PORT", help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from commitpulse.api import create_app
    from commitpulse.api.deps import init_services

    init_services(_context(ctx).settings)
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
