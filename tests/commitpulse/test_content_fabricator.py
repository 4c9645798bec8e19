"""Tests for the rotating fabricator and mutation writer."""

from __future__ import annotations

from datetime import datetime

import pytest

from commitpulse.engines.content_fabricator import (
    FileMutation,
    RotatingFabricator,
    apply_mutations,
)

WHEN = datetime(2024, 7, 1, 14, 5, 9)


class TestRotatingFabricator:
    def test_rotates_by_index(self):
        fab = RotatingFabricator()
        paths = [fab.produce(WHEN, i)[0].path for i in range(6)]
        assert paths[0] == paths[3] == "daily-progress.md"
        assert paths[2] == paths[5] == "config/changes.yml"
        assert paths[1] == "API.md"
        assert paths[4] == "CONTRIBUTING.md"

    def test_documentation_cycles_through_files(self):
        fab = RotatingFabricator()
        docs = [fab.produce(WHEN, i)[0].path for i in (1, 4, 7, 10)]
        assert docs == ["API.md", "CONTRIBUTING.md", "CHANGELOG.md", "API.md"]

    def test_content_carries_date(self):
        mutation = RotatingFabricator().produce(WHEN, 0)[0]
        assert "## 2024-07-01" in mutation.content


class TestApplyMutations:
    def test_header_written_once(self, tmp_path):
        fab = RotatingFabricator()
        apply_mutations(tmp_path, fab.produce(WHEN, 0))
        apply_mutations(tmp_path, fab.produce(WHEN, 3))

        text = (tmp_path / "daily-progress.md").read_text()
        assert text.count("# Project Progress Log") == 1
        assert text.count("## 2024-07-01") == 2

    def test_creates_parent_directories(self, tmp_path):
        touched = apply_mutations(tmp_path, RotatingFabricator().produce(WHEN, 2))
        assert touched == [tmp_path / "config" / "changes.yml"]
        assert "revision: 2" in touched[0].read_text()

    def test_overwrite(self, tmp_path):
        apply_mutations(tmp_path, [FileMutation("state.txt", "one\n", append=False)])
        apply_mutations(tmp_path, [FileMutation("state.txt", "two\n", append=False)])
        assert (tmp_path / "state.txt").read_text() == "two\n"

    def test_oserror_propagates(self, tmp_path):
        (tmp_path / "config").write_text("not a directory")
        with pytest.raises(OSError):
            apply_mutations(tmp_path, RotatingFabricator().produce(WHEN, 2))
