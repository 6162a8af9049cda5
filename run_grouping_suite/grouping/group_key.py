#!/usr/bin/env python3
"""
group_key.py

Serializes a grouping configuration into a single persistable token and
builds the identifiers of the groups it produces.

    GroupByConfig(TAG, MIN, "some_tag")  <->  "tag.min.some_tag"
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from run_grouping_suite.grouping.constants import GROUP_BY_KEY_PATTERN, KEY_SEPARATOR
from run_grouping_suite.grouping.schema import (
    GroupByConfig,
    RunGroupingAggregateFunction,
    RunGroupingMode,
)

logger = logging.getLogger(__name__)

_GROUP_BY_KEY_RE = re.compile(GROUP_BY_KEY_PATTERN)


def _enum_value(member: Union[str, RunGroupingMode, RunGroupingAggregateFunction]) -> str:
    return member.value if isinstance(member, (RunGroupingMode, RunGroupingAggregateFunction)) else str(member)


def create_runs_group_by_key(
    mode: Optional[RunGroupingMode],
    group_by_data: str,
    aggregate_function: RunGroupingAggregateFunction,
) -> str:
    """Join mode, aggregate function and group-by field into one token ('' without a mode)."""
    if not mode:
        return ""
    return KEY_SEPARATOR.join([_enum_value(mode), _enum_value(aggregate_function), group_by_data])


def parse_runs_group_by_key(group_by_key: Optional[str]) -> Optional[GroupByConfig]:
    """
    Parse a group-by token back into a GroupByConfig.

    Everything after the second separator is the group-by field, so field
    names containing dots survive the round trip. Unknown modes or
    aggregate functions yield None.
    """
    if not group_by_key:
        return None

    match = _GROUP_BY_KEY_RE.match(group_by_key)
    if not match:
        logger.warning(f"Ignoring malformed group-by key: {group_by_key!r}")
        return None

    mode, aggregate_function, group_by_data = match.groups()
    try:
        return GroupByConfig(
            mode=RunGroupingMode(mode),
            aggregate_function=RunGroupingAggregateFunction(aggregate_function),
            group_by_data=group_by_data,
        )
    except ValueError:
        logger.warning(f"Ignoring group-by key with unknown mode or aggregate function: {group_by_key!r}")
        return None


def create_group_id(mode: RunGroupingMode, group_by_name: str, group_by_value: Optional[str] = None) -> str:
    """`{mode}.{name}.{value}` for concrete groups, `{mode}.{name}` for the remaining runs."""
    if group_by_value:
        return KEY_SEPARATOR.join([_enum_value(mode), group_by_name, group_by_value])
    return KEY_SEPARATOR.join([_enum_value(mode), group_by_name])
