#!/usr/bin/env python3
"""
Group experiment runs for tabular display.

Loads a run list, groups it by tag, param or dataset, aggregates metrics
and params per group, prints a preview and optionally writes Markdown +
CSV tables.

Usage:
    run-grouping --runs runs.yaml --group-by tag.average.model
    python -m run_grouping_suite.cli group --runs runs.json --group-by dataset.max.dataset --expand dataset.dataset.train.abc123
"""

from __future__ import annotations

import argparse
import logging
import sys

from run_grouping_suite.grouping import engine, group_key, loader, report
from run_grouping_suite.grouping.constants import DEFAULT_CONFIG_PATH, DEFAULT_REPORT_NAME
from run_grouping_suite.utils.config import load_config


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run-grouping",
        description="Group experiment runs and aggregate their metrics."
    )
    ap.add_argument(
        "--runs",
        required=True,
        help="JSON or YAML file with the run list."
    )
    ap.add_argument(
        "--group-by",
        help="Grouping token 'mode.aggregate.field', e.g. 'tag.average.model'. Overrides the config file."
    )
    ap.add_argument(
        "--config",
        help=f"YAML settings applied on top of {DEFAULT_CONFIG_PATH}."
    )
    ap.add_argument(
        "--expand",
        nargs="*",
        default=[],
        metavar="GROUP_ID",
        help="Group ids to show expanded."
    )
    ap.add_argument(
        "--collapse",
        nargs="*",
        default=[],
        metavar="GROUP_ID",
        help="Group ids to show collapsed."
    )
    ap.add_argument(
        "--out-dir",
        help="Write <name>.md and <name>.csv here."
    )
    ap.add_argument(
        "--name",
        help="Report file name (without extension)."
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    return ap


def main(argv=None):
    """Main entry point for the run grouping CLI."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_config(DEFAULT_CONFIG_PATH, args.config)
    groups_expanded = dict(settings.get("groups_expanded") or {})
    groups_expanded.update({group_id: True for group_id in args.expand})
    groups_expanded.update({group_id: False for group_id in args.collapse})

    try:
        runs = loader.load_runs(args.runs)
    except FileNotFoundError:
        print(f"No runs found at {args.runs}; aborting.")
        sys.exit(1)
    print(f"Loaded {len(runs)} runs from {args.runs}")

    token = args.group_by if args.group_by is not None else settings.get("group_by")
    config = group_key.parse_runs_group_by_key(token)

    records = engine.get_grouped_row_render_metadata(runs, config, groups_expanded) if config else None
    if records is None:
        print("No grouping configured; showing flat run list.")
        table = report.runs_to_frame(runs)
    else:
        groups = sum(1 for r in records if r.is_group)
        print(f"Grouped by {config.mode.value} '{config.group_by_data}' "
              f"({config.aggregate_function.value}): {groups} groups, {len(records)} rows")
        table = report.records_to_frame(records)

    if not table.empty:
        print(table.to_string(index=False))

    report_settings = settings.get("report") or {}
    out_dir = args.out_dir or report_settings.get("out_dir")
    if out_dir:
        report.save_reports(
            table,
            out_dir=out_dir,
            name=args.name or report_settings.get("name") or DEFAULT_REPORT_NAME,
            title=report_settings.get("title"),
        )


if __name__ == "__main__":
    main()
