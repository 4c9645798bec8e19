"""Data models for the content fabricator engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileMutation:
    """One write to the working tree.

    ``path`` is relative to the repository root. ``header`` is written first
    when the file does not exist yet.
    """

    path: str
    content: str
    append: bool = True
    header: str | None = None
