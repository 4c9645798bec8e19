"""Shared pytest fixtures for commitpulse tests."""

import pytest


@pytest.fixture
def isolated_git_config(tmp_path, monkeypatch):
    """Keep the user's global/system git config out of git-backed tests."""
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("HOME", str(tmp_path))
    return gitconfig
