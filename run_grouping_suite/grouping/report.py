#!/usr/bin/env python3
"""
report.py

Flattens grouped render records into a table and exports it.

Supports:
  - a DataFrame with one row per record (group headers and run rows)
  - Markdown tables (for GitHub/Confluence)
  - CSV exports (for spreadsheets)
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from run_grouping_suite.grouping.constants import METRIC_COLUMN_PREFIX, PARAM_COLUMN_PREFIX
from run_grouping_suite.grouping.render import get_run_group_display_name, is_remaining_runs_group
from run_grouping_suite.grouping.schema import GroupHeaderRecord, RenderRecord, RunData

REMAINING_RUNS_LABEL = "(remaining runs)"


# ------------------------- Table Building ------------------------- #

def _group_label(record: GroupHeaderRecord) -> str:
    if is_remaining_runs_group(record):
        return REMAINING_RUNS_LABEL
    return get_run_group_display_name(record)


def records_to_frame(records: Sequence[RenderRecord]) -> pd.DataFrame:
    """
    One row per render record. Group rows carry aggregated values, run
    rows their own; metric/param columns appear in first-seen order.
    """
    rows = []
    current_group = ""
    for record in records:
        if record.is_group:
            current_group = _group_label(record)
            row = {
                "row_id": record.group_id,
                "is_group": True,
                "group": current_group,
                "run_uuid": "",
                "runs": len(record.run_uuids),
                "expanded": record.expanded,
            }
            metrics = record.aggregated_metric_entities
            params = record.aggregated_param_entities
        else:
            row = {
                "row_id": record.row_uuid,
                "is_group": False,
                "group": current_group,
                "run_uuid": record.run_uuid,
                "runs": 1,
                "expanded": False,
            }
            metrics = record.metrics
            params = record.params
        for metric in metrics:
            row[f"{METRIC_COLUMN_PREFIX}{metric.key}"] = metric.value
        for param in params:
            row[f"{PARAM_COLUMN_PREFIX}{param.key}"] = param.value
        rows.append(row)

    return pd.DataFrame(rows)


def runs_to_frame(runs: Sequence[RunData]) -> pd.DataFrame:
    """Flat, ungrouped table for when no grouping is configured."""
    rows = []
    for run in runs:
        row = {"run_uuid": run.run_uuid}
        row.update({f"{METRIC_COLUMN_PREFIX}{m.key}": m.value for m in run.metrics})
        row.update({f"{PARAM_COLUMN_PREFIX}{p.key}": p.value for p in run.params})
        rows.append(row)
    return pd.DataFrame(rows)


# ------------------------- Markdown Export ------------------------- #

def save_markdown(df: pd.DataFrame, out_path: str | Path, title: str = None):
    """Save a table as Markdown."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    md = []
    if title:
        md.append(f"# {title}\n")
    md.append(df.to_markdown(index=False, tablefmt="github"))
    out.write_text("\n".join(md), encoding="utf-8")

    print(f"Markdown report saved to {out.resolve()}")


# ------------------------- CSV Export ------------------------- #

def save_csv(df: pd.DataFrame, out_path: str | Path):
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    print(f"CSV report saved to {out.resolve()}")


# ------------------------- Combined Convenience ------------------------- #

def save_reports(df: pd.DataFrame, out_dir: str | Path, name: str, title: str = None):
    """Write both `<name>.md` and `<name>.csv` into `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    save_markdown(df, out_dir / f"{name}.md", title=title)
    save_csv(df, out_dir / f"{name}.csv")
