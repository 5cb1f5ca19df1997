from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from algae_series.config.loader import ConfigError, SeriesConfig, load_config
from algae_series.errors import DatasetLoadError
from algae_series.logging.init import log_summary, set_level, setup_logging
from algae_series.logging.issue_log import IssueLogBuffer
from algae_series.models.dataset import Dataset
from algae_series.models.issue_record import IssueRecord
from algae_series.models.role_map import Role
from algae_series.services.loader import load_dataset
from algae_series.services.summary import format_number, render_series_line, render_summary_line
from algae_series.services.table import records_to_frame

"""CLI entrypoint.

Flow:
- Load .env and the optional YAML config
- Load the workbook (path or URL) into a Dataset
- Either print an inspection of the dataset, or aggregate one series for the
  requested site/metric/genus and print it (optionally writing CSV)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_USAGE = 2

SOURCE_ENV = "ALGAE_SERIES_SOURCE"

METRIC_CHOICES = {
    "primary": Role.PRIMARY_METRIC,
    "secondary": Role.SECONDARY_METRIC,
    "tertiary": Role.TERTIARY_METRIC,
}


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv.

    override=False keeps variables already set in the process environment.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="algae-series", description="Algae workbook time-series loader")
    p.add_argument("--source", help=f"Workbook path or http(s) URL (fallback: config 'source', ${SOURCE_ENV})")
    p.add_argument("--config", help="Optional YAML config file")
    p.add_argument("--site", help="Site value to aggregate (exact match)")
    p.add_argument("--metric", choices=sorted(METRIC_CHOICES), default="primary", help="Metric to sum per date")
    p.add_argument("--genus", help="Case-insensitive genus substring filter")
    p.add_argument("--output", help="Write the series as CSV to this path")
    p.add_argument("--inspect-data", action="store_true", help="Print header, roles and first rows then exit")
    p.add_argument("--issues-log", action="store_true", help="Write recovered data issues to logs/issues-*.log")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(dataset: Dataset) -> int:
    print(f"SOURCE: {dataset.source}")
    print(f"  header_row={dataset.header_row_index + 1} cols={list(dataset.columns)}")
    print("  roles=", {role: label for role, label in dataset.roles.as_dict().items() if label})
    print(f"  sites={dataset.sites()}")
    frame = records_to_frame(dataset)
    print(frame.head(3).to_string(index=False))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no list was given (an empty list is a valid argv)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_level("DEBUG")
        logger.debug("debug mode enabled")

    cfg = SeriesConfig()
    if args.config:
        try:
            cfg = load_config(Path(args.config))
        except ConfigError as e:
            logger.error(f"config: {e}")
            return EXIT_FATAL

    source = args.source or cfg.source or os.getenv(SOURCE_ENV)
    if not source:
        logger.error(f"no source given (use --source, config 'source' or {SOURCE_ENV})")
        return EXIT_USAGE

    try:
        dataset = load_dataset(source, cfg)
    except DatasetLoadError as e:
        logger.error(f"load: {e}")
        return EXIT_FATAL
    log_summary(render_summary_line(dataset).removeprefix("SUMMARY "))

    if args.inspect_data:
        return _inspect_data(dataset)

    if not args.site:
        logger.error(f"--site is required; available sites: {', '.join(dataset.sites()) or '(none)'}")
        return EXIT_USAGE

    issues: list[IssueRecord] = []
    try:
        series = dataset.series(args.site, METRIC_CHOICES[args.metric], args.genus, issues=issues)
    except DatasetLoadError as e:
        logger.error(f"series: {e}")
        return EXIT_FATAL

    if not series.points:
        logger.warning(f"no data points for site={args.site!r}")
    for point in series:
        print(f"{point.date}\t{format_number(point.value)}")

    if args.output:
        series.to_frame().to_csv(args.output, index=False)
        logger.info(f"series written to {args.output}")

    if issues:
        if args.issues_log:
            buffer = IssueLogBuffer()
            buffer.extend(issues)
            path = buffer.flush()
            logger.warning(f"{len(issues)} data issue(s) recovered, logged to {path}")
        else:
            logger.warning(f"{len(issues)} data issue(s) recovered (use --issues-log for details)")

    log_summary(render_series_line(series).removeprefix("SUMMARY "))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
