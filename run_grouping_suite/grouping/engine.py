#!/usr/bin/env python3
"""
engine.py

Partitions a flat run list into display groups and expands them into the
ordered render records of the runs table.

Grouping modes:
  - tag / param: each run lands in exactly one group, keyed by its value
    of the selected tag or param; runs without a value go to the
    "remaining runs" group.
  - dataset: a run lands in the group of every dataset it references, so
    one run can show up in several groups; runs without datasets go to
    the "remaining runs" group.

Concrete groups are expanded unless the caller's state marks them
collapsed. The remaining runs group is collapsed unless marked expanded.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from run_grouping_suite.grouping.group_key import create_group_id
from run_grouping_suite.grouping.render import create_group_render_metadata
from run_grouping_suite.grouping.schema import (
    REMAINING_RUNS,
    DatasetIdentity,
    GroupByConfig,
    RenderRecord,
    RunData,
    RunGroupingAggregateFunction,
    RunGroupingMode,
)

logger = logging.getLogger(__name__)

ValueGetter = Callable[[RunData], Optional[str]]


def _is_group_expanded(groups_expanded: Mapping[str, bool], group_id: str) -> bool:
    return groups_expanded.get(group_id) is None or groups_expanded[group_id] is True


def _is_remaining_group_expanded(groups_expanded: Mapping[str, bool], group_id: str) -> bool:
    return groups_expanded.get(group_id) is True


def _remaining_runs_records(
    ungrouped_runs: List[RunData],
    groups_expanded: Mapping[str, bool],
    aggregate_function: RunGroupingAggregateFunction,
    mode: RunGroupingMode,
    group_by_key: str,
) -> List[RenderRecord]:
    if not ungrouped_runs:
        return []
    group_id = create_group_id(mode, group_by_key)
    return create_group_render_metadata(
        group_id,
        _is_remaining_group_expanded(groups_expanded, group_id),
        ungrouped_runs,
        aggregate_function,
        REMAINING_RUNS,
        True,
    )


# ------------------------- Tag / Param ------------------------- #

def create_runs_grouped_by_value(
    value_getter: ValueGetter,
    runs: Sequence[RunData],
    groups_expanded: Mapping[str, bool],
    aggregate_function: RunGroupingAggregateFunction,
    mode: RunGroupingMode,
    group_by_key: str,
) -> List[RenderRecord]:
    groups: Dict[str, List[RunData]] = {}
    ungrouped_runs: List[RunData] = []

    for run in runs:
        value = value_getter(run)
        if value is None or value == "":
            ungrouped_runs.append(run)
            continue
        groups.setdefault(str(value), []).append(run)

    result: List[RenderRecord] = []
    for value, runs_in_group in groups.items():
        group_id = create_group_id(mode, group_by_key, value)
        result.extend(
            create_group_render_metadata(
                group_id,
                _is_group_expanded(groups_expanded, group_id),
                runs_in_group,
                aggregate_function,
                value,
                False,
            )
        )

    result.extend(_remaining_runs_records(ungrouped_runs, groups_expanded, aggregate_function, mode, group_by_key))
    logger.debug(f"Grouped {len(runs)} runs by {mode.value} '{group_by_key}' into {len(groups)} groups "
                 f"({len(ungrouped_runs)} ungrouped)")
    return result


# ------------------------- Dataset ------------------------- #

def get_unique_datasets(runs: Sequence[RunData]) -> List[DatasetIdentity]:
    """Distinct datasets referenced by any run, in order of first reference."""
    unique: Dict[str, DatasetIdentity] = {}
    for run in runs:
        for dataset in run.datasets:
            unique.setdefault(dataset.identifier, dataset)
    return list(unique.values())


def create_runs_grouped_by_dataset(
    runs: Sequence[RunData],
    groups_expanded: Mapping[str, bool],
    aggregate_function: RunGroupingAggregateFunction,
    group_by_key: str,
) -> List[RenderRecord]:
    datasets = {dataset.identifier: dataset for dataset in get_unique_datasets(runs)}
    groups: Dict[str, List[RunData]] = {identifier: [] for identifier in datasets}
    ungrouped_runs: List[RunData] = []

    for run in runs:
        if not run.datasets:
            ungrouped_runs.append(run)
            continue
        for dataset in run.datasets:
            members = groups[dataset.identifier]
            if not any(member is run for member in members):
                members.append(run)

    result: List[RenderRecord] = []
    for identifier, runs_in_group in groups.items():
        group_id = create_group_id(RunGroupingMode.DATASET, group_by_key, identifier)
        result.extend(
            create_group_render_metadata(
                group_id,
                _is_group_expanded(groups_expanded, group_id),
                runs_in_group,
                aggregate_function,
                datasets[identifier],
                False,
            )
        )

    result.extend(
        _remaining_runs_records(ungrouped_runs, groups_expanded, aggregate_function, RunGroupingMode.DATASET, group_by_key)
    )
    logger.debug(f"Grouped {len(runs)} runs into {len(groups)} dataset groups ({len(ungrouped_runs)} ungrouped)")
    return result


# ------------------------- Entry point ------------------------- #

def get_grouped_row_render_metadata(
    runs: Sequence[RunData],
    group_by_config: GroupByConfig,
    groups_expanded: Optional[Mapping[str, bool]] = None,
) -> Optional[List[RenderRecord]]:
    """
    Group `runs` per `group_by_config` and return the records to render.

    `groups_expanded` maps group ids to the user's expand/collapse choice;
    it is only read. Returns None for an unknown mode so the caller can
    fall back to the flat run list.
    """
    groups_expanded = groups_expanded or {}
    try:
        mode = RunGroupingMode(group_by_config.mode)
    except ValueError:
        logger.debug(f"Unknown grouping mode {group_by_config.mode!r}, not grouping")
        return None

    if mode in (RunGroupingMode.TAG, RunGroupingMode.PARAM):
        field_name = group_by_config.group_by_data
        if mode == RunGroupingMode.TAG:
            value_getter: ValueGetter = lambda run: run.tags.get(field_name)
        else:
            value_getter = lambda run: run.get_param(field_name)
        return create_runs_grouped_by_value(
            value_getter,
            runs,
            groups_expanded,
            group_by_config.aggregate_function,
            mode,
            field_name,
        )

    return create_runs_grouped_by_dataset(
        runs,
        groups_expanded,
        group_by_config.aggregate_function,
        group_by_config.group_by_data,
    )
