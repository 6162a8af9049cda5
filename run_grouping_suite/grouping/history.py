#!/usr/bin/env python3
"""
history.py

Builds "synthetic" metric histories for charting a whole group as a single
line: for every requested step, the min, max and average of the values all
runs in the group logged at that step.

Steps with no logged values come back as NaN (value and timestamp) and
must be treated as missing points, never as zero.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np
import pandas as pd

from run_grouping_suite.grouping.schema import MetricEntity, RunGroupingAggregateFunction

SyntheticMetricHistory = Dict[RunGroupingAggregateFunction, List[MetricEntity]]

_SERIES = {
    RunGroupingAggregateFunction.MIN: "min",
    RunGroupingAggregateFunction.MAX: "max",
    RunGroupingAggregateFunction.AVERAGE: "mean",
}


def _round_half_up(value: float) -> float:
    if pd.isna(value):
        return math.nan
    return int(np.floor(value + 0.5))


def create_aggregated_metric_history(
    step_numbers: Sequence[int],
    metric_key: str,
    history: Iterable[MetricEntity],
) -> SyntheticMetricHistory:
    """
    Aggregate a flat metric history (entries from many runs) per step.

    Returns one series per aggregate function, each with exactly one point
    per entry of `step_numbers`, in that order. A point's timestamp is the
    rounded mean timestamp of the raw entries at its step.
    """
    frame = pd.DataFrame(
        [(entry.step, entry.value, entry.timestamp) for entry in history],
        columns=["step", "value", "timestamp"],
    )
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce").astype("float64")
    frame["timestamp"] = pd.to_numeric(frame["timestamp"], errors="coerce").astype("float64")

    by_step = frame.groupby("step")
    stats = by_step["value"].agg(["min", "max", "mean"])
    stats["timestamp"] = by_step["timestamp"].mean()
    stats = stats.reindex(list(step_numbers))

    timestamps = [_round_half_up(ts) for ts in stats["timestamp"]]

    return {
        aggregate_function: [
            MetricEntity(key=metric_key, step=step, value=float(value), timestamp=timestamp)
            for step, value, timestamp in zip(step_numbers, stats[column], timestamps)
        ]
        for aggregate_function, column in _SERIES.items()
    }


def flatten_metric_histories(
    histories_by_run: Mapping[str, Mapping[str, Sequence[MetricEntity]]],
    metric_key: str,
) -> List[MetricEntity]:
    """Collect one metric's history entries from every run into a single list."""
    return [entry for history in histories_by_run.values() for entry in history.get(metric_key, [])]


def collect_step_numbers(history: Iterable[MetricEntity]) -> List[int]:
    """Sorted distinct steps present in a history, the default step range for charts."""
    return sorted({entry.step for entry in history})
