from pathlib import Path

import pytest

from quotagraph.config import Config, default_log_path


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.delenv("QUOTAGRAPH_LOG_PATH", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", "/data")
        config = Config.from_env()
        assert config.log_path == Path("/data/claude-usage/history.jsonl")
        assert config.listen_address == ""
        assert config.budget_field == "5h"

    def test_reads_log_path(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.setenv("QUOTAGRAPH_LOG_PATH", "/tmp/usage.jsonl")
        config = Config.from_env()
        assert config.log_path == Path("/tmp/usage.jsonl")


class TestDefaultLogPath:
    def test_falls_back_to_local_share(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", "/home/someone")
        assert default_log_path() == Path(
            "/home/someone/.local/share/claude-usage/history.jsonl"
        )


class TestMetricsEnabled:
    def test_enabled_when_address_set(self) -> "None":
        assert Config(listen_address=":9186").metrics_enabled is True

    def test_disabled_when_address_empty(self) -> "None":
        assert Config(listen_address="").metrics_enabled is False
