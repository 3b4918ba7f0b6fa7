import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest
from prometheus_client import CollectorRegistry

# 2026-03-10 00:00:00 UTC, a Tuesday
T0 = 1773100800000
HOUR = 3_600_000


def iso(timestamp_ms: "int") -> "str":
    """
    formats unix milliseconds the way the usage logger writes them.
    """
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch: "pytest.MonkeyPatch") -> "Iterator[None]":
    """
    pins local time to UTC so midnight alignment is deterministic.
    """
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()


@pytest.fixture()
def log_path(tmp_path: "Path") -> "Path":
    return tmp_path / "claude-usage" / "history.jsonl"


@pytest.fixture()
def write_log(log_path: "Path") -> "Callable[..., Path]":
    """
    writes JSONL entries (dicts or raw strings) to the history log.
    """

    def _write(*entries: "dict | str") -> "Path":
        log_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        log_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return log_path

    return _write
