import argparse
import signal
import threading
from datetime import datetime

import structlog
from prometheus_client import start_http_server

from quotagraph.cli import parse_args
from quotagraph.config import Config
from quotagraph.formatting import format_credits
from quotagraph.history import HistoryReader
from quotagraph.localtime import HOUR_MS
from quotagraph.logging import setup_logging
from quotagraph.metrics import HistoryMetricsCollector
from quotagraph.models import Field, HistoryResult, PeriodKind

logger = structlog.get_logger()

_MINUTE_MS = 60_000


def _parse_listen_address(addr: "str") -> "tuple[str, int]":
    """
    parses listen address in format ':9186' or '0.0.0.0:9186'.
    """
    if addr.startswith(":"):
        return ("0.0.0.0", int(addr[1:]))

    host, port = addr.rsplit(":", 1)
    return (host, int(port))


def _fmt_time(timestamp_ms: "int") -> "str":
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def render_report(result: "HistoryResult", label: "str", budget: "Field") -> "str":
    """
    renders a query result as a plain text report.
    """
    lines = [
        f"{label} ({budget.value}): "
        f"{_fmt_time(result.window_start_ms)} -> {_fmt_time(result.window_end_ms)}",
        f"  total {format_credits(result.total)}"
        f"  avg {format_credits(result.average_rate)}"
        f"  peak {format_credits(result.peak_rate)}",
    ]
    for point in result.points:
        when = _fmt_time(point.timestamp_ms)
        lines.append(f"  {when}  {format_credits(point.value)}")
    return "\n".join(lines)


def run_query(
    reader: "HistoryReader", config: "Config", args: "argparse.Namespace"
) -> "tuple[HistoryResult, str]":
    budget = Field(config.budget_field)
    bucket_ms = config.bucket_minutes * _MINUTE_MS
    rate_bucket_ms = config.rate_bucket_minutes * _MINUTE_MS

    if args.period is not None:
        return reader.read_period(
            PeriodKind(args.period),
            args.offset,
            budget,
            bucket_ms,
            rate_bucket_ms,
            config.max_points,
        )

    result = reader.read_history(
        config.window_hours * HOUR_MS,
        budget,
        config.max_points,
        bucket_ms,
        rate_bucket_ms,
    )
    return result, f"Last {config.window_hours} hours"


def serve(reader: "HistoryReader", config: "Config") -> "None":
    HistoryMetricsCollector(
        reader,
        window_ms=config.window_hours * HOUR_MS,
        rate_bucket_ms=config.rate_bucket_minutes * _MINUTE_MS,
    )

    host, port = _parse_listen_address(config.listen_address)
    start_http_server(port, addr=host)
    logger.info("metrics_server_started", host=host, port=port)

    stop = threading.Event()
    # for SIGINT and SIGTERM, stop serving gracefully
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda *_: stop.set())

    stop.wait()
    logger.info("shutdown_complete")


def main(argv: "list[str] | None" = None) -> "None":
    config, args = parse_args(argv)
    setup_logging(config.log_level, config.log_format)

    reader = HistoryReader(config.log_path)

    if config.metrics_enabled:
        serve(reader, config)
        return

    result, label = run_query(reader, config, args)
    if not result.ok:
        error = result.error.value if result.error else "unknown"
        logger.error("history_unavailable", path=str(config.log_path), error=error)
        raise SystemExit(1)

    print(render_report(result, label, Field(config.budget_field)))


if __name__ == "__main__":
    main()
