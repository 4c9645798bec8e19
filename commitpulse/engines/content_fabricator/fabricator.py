"""Filler content for synthetic commits.

The batch runner only knows the ``Fabricator`` contract; which files change
is a strategy chosen by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Protocol

from commitpulse.engines.content_fabricator.models import FileMutation


class Fabricator(Protocol):
    def produce(self, when: datetime, index: int) -> list[FileMutation]: ...


_DOC_HEADERS = {
    "API.md": "# API Documentation\n",
    "CONTRIBUTING.md": "# Contributing Guidelines\n",
    "CHANGELOG.md": "# Changelog\n",
}


class RotatingFabricator:
    """Rotate between a progress log, documentation and configuration by event index."""

    progress_log = "daily-progress.md"
    config_file = "config/changes.yml"

    def produce(self, when: datetime, index: int) -> list[FileMutation]:
        kinds = (self._progress_log, self._documentation, self._configuration)
        return [kinds[index % len(kinds)](when, index)]

    def _progress_log(self, when: datetime, index: int) -> FileMutation:
        return FileMutation(
            path=self.progress_log,
            header="# Project Progress Log\n",
            content=(
                f"\n## {when.date().isoformat()}\n"
                "- Enhanced project functionality\n"
                "- Improved code quality\n"
            ),
        )

    def _documentation(self, when: datetime, index: int) -> FileMutation:
        docs = list(_DOC_HEADERS)
        name = docs[(index // 3) % len(docs)]
        return FileMutation(
            path=name,
            header=_DOC_HEADERS[name],
            content=(
                f"\n### Update {when.date().isoformat()}\n"
                "- Improved documentation clarity\n"
                "- Added examples and usage notes\n"
            ),
        )

    def _configuration(self, when: datetime, index: int) -> FileMutation:
        return FileMutation(
            path=self.config_file,
            header="# Configuration change log\n",
            content=f"- revision: {index}\n  updated: {when.isoformat(timespec='seconds')}\n",
        )


def apply_mutations(root: Path, mutations: Iterable[FileMutation]) -> list[Path]:
    """Write *mutations* under *root* and return the touched paths.

    ``OSError`` propagates to the caller.
    """
    touched = []
    for mutation in mutations:
        target = root / mutation.path
        target.parent.mkdir(parents=True, exist_ok=True)
        if mutation.append:
            is_new = not target.exists()
            with target.open("a", encoding="utf-8") as fh:
                if is_new and mutation.header:
                    fh.write(mutation.header)
                fh.write(mutation.content)
        else:
            target.write_text((mutation.header or "") + mutation.content, encoding="utf-8")
        touched.append(target)
    return touched
