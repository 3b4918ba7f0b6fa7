import argparse
from pathlib import Path

from quotagraph.config import Config


def parse_args(argv: "list[str] | None" = None) -> "tuple[Config, argparse.Namespace]":
    """
    parses command line arguments on top of the environment config.
    Returns the config together with the query-only options.
    """
    defaults = Config.from_env()

    parser = argparse.ArgumentParser(
        prog="quotagraph",
        description="Usage history statistics for rolling API quota budgets",
    )
    parser.add_argument(
        "--log.path",
        dest="log_path",
        type=Path,
        default=defaults.log_path,
        help=f"History log to read (default: {defaults.log_path})",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default=defaults.log_level,
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--log.format",
        dest="log_format",
        default=defaults.log_format,
        choices=["console", "json"],
        help="Log output format (default: console)",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=defaults.listen_address,
        help="Serve Prometheus metrics on this address instead of printing a report",
    )
    parser.add_argument(
        "--field",
        default=defaults.budget_field,
        choices=["5h", "7d"],
        help="Budget window to report on (default: 5h)",
    )
    parser.add_argument(
        "--window",
        dest="window_hours",
        type=int,
        default=defaults.window_hours,
        help="Rolling window in hours (default: 24)",
    )
    parser.add_argument(
        "--period",
        choices=["day", "week"],
        default=None,
        help="Report on a calendar day or week instead of the rolling window",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=1,
        help="Periods ago for --period, 0 for the rolling day/week (default: 1)",
    )
    parser.add_argument(
        "--bucket",
        dest="bucket_minutes",
        type=int,
        default=defaults.bucket_minutes,
        help="Bar width in minutes, 0 for raw points (default: 60)",
    )
    parser.add_argument(
        "--rate-bucket",
        dest="rate_bucket_minutes",
        type=int,
        default=defaults.rate_bucket_minutes,
        help="Width in minutes of the average/peak rate slices (default: 60)",
    )
    parser.add_argument(
        "--max-points",
        dest="max_points",
        type=int,
        default=defaults.max_points,
        help="Maximum raw points before downsampling (default: 100)",
    )

    args = parser.parse_args(argv)
    if args.offset < 0:
        parser.error("--offset must not be negative")
    if args.rate_bucket_minutes <= 0:
        parser.error("--rate-bucket must be positive")
    if args.max_points < 3:
        parser.error("--max-points must be at least 3")

    config = defaults
    config.log_path = args.log_path
    config.log_level = args.log_level
    config.log_format = args.log_format
    config.listen_address = args.listen_address
    config.budget_field = args.field
    config.window_hours = args.window_hours
    config.bucket_minutes = args.bucket_minutes
    config.rate_bucket_minutes = args.rate_bucket_minutes
    config.max_points = args.max_points
    return config, args
