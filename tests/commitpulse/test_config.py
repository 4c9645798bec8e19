"""Tests for Settings and RunContext."""

from __future__ import annotations

from commitpulse.core.config import Settings
from commitpulse.core.context import RunContext
from commitpulse.engines.commit_sink import GitSink


class TestSettings:
    def test_defaults(self, tmp_path, monkeypatch):
        for key in (
            "COMMITPULSE_REPO_PATH",
            "COMMITPULSE_PUSH_RETRIES",
            "COMMITPULSE_CORS_ORIGINS",
        ):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.chdir(tmp_path)

        s = Settings.from_env()

        assert s.repo_path == tmp_path.resolve()
        assert s.push_retries == 3
        assert s.command_timeout == 120.0
        assert s.cors_origins == ("http://localhost:3000",)

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMMITPULSE_REPO_PATH", str(tmp_path))
        monkeypatch.setenv("COMMITPULSE_PUSH_RETRIES", "5")
        monkeypatch.setenv("COMMITPULSE_CHUNK_PAUSE", "0.25")
        monkeypatch.setenv("COMMITPULSE_CORS_ORIGINS", "http://a.test, http://b.test,")

        s = Settings.from_env()

        assert s.repo_path == tmp_path.resolve()
        assert s.push_retries == 5
        assert s.chunk_pause == 0.25
        assert s.cors_origins == ("http://a.test", "http://b.test")

    def test_explicit_repo_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMMITPULSE_REPO_PATH", "/somewhere/else")
        assert Settings.from_env(tmp_path).repo_path == tmp_path.resolve()


class TestRunContext:
    def test_builds_sink_and_schedule(self, tmp_path):
        settings = Settings(repo_path=tmp_path, remote="upstream", push_retries=2)
        context = RunContext.from_settings(settings)

        sink = context.build_sink()

        assert isinstance(sink, GitSink)
        assert sink.repo_path == tmp_path
        assert sink.remote == "upstream"
        assert sink.push_retries == 2
        assert context.schedule.path == tmp_path / "last-push.json"
        assert context.build_runner().chunk_size == settings.chunk_size
