"""Run report engine — pattern and history statistics."""

from commitpulse.engines.run_report.aggregator import WEEKDAY_NAMES, RunReport, summarize

__all__ = ["WEEKDAY_NAMES", "RunReport", "summarize"]
