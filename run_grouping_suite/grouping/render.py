#!/usr/bin/env python3
"""
render.py

Turns one group of runs into the records the runs table displays: a header
with aggregated metrics/params, then the member rows when expanded.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from run_grouping_suite.grouping.aggregate import aggregate_values
from run_grouping_suite.grouping.constants import KEY_SEPARATOR
from run_grouping_suite.grouping.schema import (
    DatasetIdentity,
    GroupHeaderRecord,
    GroupValue,
    RemainingRuns,
    RenderRecord,
    RunData,
    RunGroupingAggregateFunction,
    RunRowRecord,
)


def create_group_render_metadata(
    group_id: str,
    expanded: bool,
    runs_in_group: Sequence[RunData],
    aggregate_function: RunGroupingAggregateFunction,
    group_value: GroupValue,
    is_remaining_rows_group: bool,
) -> List[RenderRecord]:
    """
    Header first, always with aggregates (visible even when collapsed);
    member rows only for expanded groups.
    """
    header = GroupHeaderRecord(
        group_id=group_id,
        expanded=expanded,
        run_uuids=[run.run_uuid for run in runs_in_group],
        aggregated_metric_entities=aggregate_values([run.metrics for run in runs_in_group], aggregate_function),
        aggregated_param_entities=aggregate_values([run.params for run in runs_in_group], aggregate_function),
        value=group_value,
    )

    result: List[RenderRecord] = [header]
    if not expanded:
        return result

    for run in runs_in_group:
        result.append(
            RunRowRecord(
                row_uuid=KEY_SEPARATOR.join([group_id, run.run_uuid]),
                run_uuid=run.run_uuid,
                belongs_to_group=not is_remaining_rows_group,
                is_pinnable=not run.is_child,
                metrics=run.metrics,
                params=run.params,
                tags=run.tags,
                datasets=run.datasets,
            )
        )
    return result


def is_remaining_runs_group(group: GroupHeaderRecord) -> bool:
    """True for the catch-all group of runs without a group value."""
    return isinstance(group.value, RemainingRuns)


def get_run_group_display_name(group: Optional[GroupHeaderRecord] = None) -> str:
    if group is None or isinstance(group.value, RemainingRuns):
        return ""
    if isinstance(group.value, DatasetIdentity):
        return group.value.name
    return group.value
