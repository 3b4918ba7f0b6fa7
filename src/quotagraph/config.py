import os
from dataclasses import dataclass, field
from pathlib import Path

LOG_DIR_NAME = "claude-usage"
LOG_FILE_NAME = "history.jsonl"


def default_log_path() -> "Path":
    """
    returns the history log location under the XDG data directory,
    e.g. ~/.local/share/claude-usage/history.jsonl.
    """
    data_home = os.environ.get("XDG_DATA_HOME") or str(
        Path.home() / ".local" / "share"
    )
    return Path(data_home) / LOG_DIR_NAME / LOG_FILE_NAME


@dataclass
class Config:
    log_path: "Path" = field(default_factory=default_log_path)
    log_level: "str" = "info"
    # console or json
    log_format: "str" = "console"
    # listen_address: format ":9186" or
    # "0.0.0.0:9186", empty disables the metrics server
    listen_address: "str" = ""

    # query defaults
    budget_field: "str" = "5h"
    window_hours: "int" = 24
    max_points: "int" = 100
    # 0 returns raw (or downsampled) deltas instead of bars
    bucket_minutes: "int" = 60
    rate_bucket_minutes: "int" = 60

    @classmethod
    def from_env(cls) -> "Config":
        log_path = os.environ.get("QUOTAGRAPH_LOG_PATH", "")
        return cls(
            log_path=Path(log_path) if log_path else default_log_path(),
        )

    @property
    def metrics_enabled(self) -> "bool":
        return bool(self.listen_address)
