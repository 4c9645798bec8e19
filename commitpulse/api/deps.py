"""Dependency injection — per-process run context and service singletons."""

from __future__ import annotations

from commitpulse.core.config import Settings
from commitpulse.core.context import RunContext
from commitpulse.services.automation_service import AutomationService
from commitpulse.services.stats_service import StatsService

# ---------------------------------------------------------------------------
# Singletons (initialised lazily from the environment, or by init_services())
# ---------------------------------------------------------------------------
_context: RunContext | None = None
_automation_service: AutomationService | None = None
_stats_service: StatsService | None = None


def init_services(settings: Settings | None = None) -> RunContext:
    """Build the run context and services. Called once at startup."""
    global _context, _automation_service, _stats_service  # noqa: PLW0603
    _context = RunContext.from_settings(settings or Settings.from_env())
    _automation_service = AutomationService(_context)
    _stats_service = StatsService(_context)
    return _context


# ---------------------------------------------------------------------------
# Getters (for Depends())
# ---------------------------------------------------------------------------


def get_context() -> RunContext:
    if _context is None:
        return init_services()
    return _context


def get_automation_service() -> AutomationService:
    if _automation_service is None:
        init_services()
    assert _automation_service is not None
    return _automation_service


def get_stats_service() -> StatsService:
    if _stats_service is None:
        init_services()
    assert _stats_service is not None
    return _stats_service
