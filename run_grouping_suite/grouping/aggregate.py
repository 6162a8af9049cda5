#!/usr/bin/env python3
"""
aggregate.py

Combines same-key values (metrics or params) of all runs in a group into
one value per key.

Values are coerced to numbers first; a key holding any non-numeric value
has no meaningful aggregate and is dropped from the result. Keys keep the
order in which they were first seen so table columns stay stable.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import pandas as pd

from run_grouping_suite.grouping.schema import AggregatedEntity, RunGroupingAggregateFunction

# pandas reducer per aggregate function
_REDUCERS = {
    RunGroupingAggregateFunction.MIN: "min",
    RunGroupingAggregateFunction.MAX: "max",
    RunGroupingAggregateFunction.AVERAGE: "mean",
}


def _reducer_for(aggregate_function: RunGroupingAggregateFunction) -> str:
    try:
        return _REDUCERS[RunGroupingAggregateFunction(aggregate_function)]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported aggregate function: {aggregate_function}") from None


def aggregate_values(
    values_by_run: Sequence[Iterable],
    aggregate_function: RunGroupingAggregateFunction,
) -> List[AggregatedEntity]:
    """
    Aggregate per-run lists of entities (anything with `key` and `value`).

    Example:
        aggregate_values([[m(a, 2)], [m(a, 4)]], AVERAGE) -> [AggregatedEntity("a", 3.0)]
    """
    reducer = _reducer_for(aggregate_function)

    rows = [(entity.key, entity.value) for entities in values_by_run for entity in entities]
    if not rows:
        return []

    frame = pd.DataFrame(rows, columns=["key", "value"])
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce")

    # pandas skips NaN when reducing; a single non-numeric value must poison its key instead
    poisoned = frame["value"].isna().groupby(frame["key"], sort=False).any()
    reduced = frame.groupby("key", sort=False)["value"].agg(reducer)
    reduced = reduced[~poisoned.reindex(reduced.index)].dropna()

    return [AggregatedEntity(key=str(key), value=float(value)) for key, value in reduced.items()]
