#!/usr/bin/env python3
"""
schema.py

Data model shared by the grouping engine, the aggregators and the report
writers.

Runs arrive as `RunData` records (metrics, params, tags, dataset inputs).
A grouping pass turns them into an ordered list of render records: one
`GroupHeaderRecord` per group followed, when the group is expanded, by one
`RunRowRecord` per member run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from run_grouping_suite.grouping.constants import EXPERIMENT_PARENT_ID_TAG


# ------------------------- Enums ------------------------- #

class RunGroupingMode(str, Enum):
    """What runs are grouped by."""

    TAG = "tag"
    PARAM = "param"
    DATASET = "dataset"


class RunGroupingAggregateFunction(str, Enum):
    """How same-key values are combined within a group."""

    MIN = "min"
    MAX = "max"
    AVERAGE = "average"


class RemainingRuns(Enum):
    """Value of the catch-all group holding runs without a group value.

    Kept out of the string/dataset value space so no tag or param value
    can ever be mistaken for it.
    """

    REMAINING = "remaining"


REMAINING_RUNS = RemainingRuns.REMAINING


# ------------------------- Run entities ------------------------- #

@dataclass(frozen=True)
class DatasetIdentity:
    """A dataset referenced by a run. Same dataset iff name and digest match."""

    name: str
    digest: str

    @property
    def identifier(self) -> str:
        return f"{self.name}.{self.digest}"


@dataclass
class ParamEntity:
    key: str
    value: str


@dataclass
class MetricEntity:
    key: str
    value: float
    step: int = 0
    timestamp: float = 0


@dataclass
class RunData:
    """One experiment execution as seen by the runs table."""

    run_uuid: str
    metrics: List[MetricEntity] = field(default_factory=list)
    params: List[ParamEntity] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    datasets: List[DatasetIdentity] = field(default_factory=list)

    @property
    def parent_run_id(self) -> Optional[str]:
        return self.tags.get(EXPERIMENT_PARENT_ID_TAG) or None

    @property
    def is_child(self) -> bool:
        return self.parent_run_id is not None

    def get_param(self, key: str) -> Optional[str]:
        """Value of the first param named `key`, if any."""
        for param in self.params:
            if param.key == key:
                return param.value
        return None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "RunData":
        """
        Build a run from a plain mapping.

        Accepts the nested tracking-server shape
            {"info": {"run_uuid"}, "data": {"metrics", "params", "tags"},
             "inputs": {"dataset_inputs": [{"dataset": {"name", "digest"}}]}}
        and the flat shape
            {"run_uuid", "metrics", "params", "tags", "datasets"}.
        Tags may be a list of {key, value} pairs or a plain mapping.
        """
        info = raw.get("info", {})
        data = raw.get("data", raw)
        run_uuid = info.get("run_uuid") or info.get("run_id") or raw.get("run_uuid") or raw.get("run_id")
        if not run_uuid:
            raise KeyError("Run is missing 'run_uuid'")

        metrics = [
            MetricEntity(
                key=m["key"],
                value=m.get("value"),
                step=int(m.get("step", 0) or 0),
                timestamp=m.get("timestamp", 0) or 0,
            )
            for m in data.get("metrics") or []
        ]
        params = [ParamEntity(key=p["key"], value=p.get("value")) for p in data.get("params") or []]

        raw_tags = data.get("tags") or {}
        if isinstance(raw_tags, dict):
            tags = {str(k): v for k, v in raw_tags.items()}
        else:
            tags = {t["key"]: t.get("value") for t in raw_tags}

        if "inputs" in raw:
            raw_datasets = [d.get("dataset", {}) for d in raw["inputs"].get("dataset_inputs") or []]
        else:
            raw_datasets = [d.get("dataset", d) for d in raw.get("datasets") or []]
        datasets = [DatasetIdentity(name=d["name"], digest=d["digest"]) for d in raw_datasets if d]

        return cls(run_uuid=str(run_uuid), metrics=metrics, params=params, tags=tags, datasets=datasets)


# ------------------------- Grouping config ------------------------- #

@dataclass(frozen=True)
class GroupByConfig:
    mode: RunGroupingMode
    aggregate_function: RunGroupingAggregateFunction
    group_by_data: str = ""


# ------------------------- Render records ------------------------- #

GroupValue = Union[str, DatasetIdentity, RemainingRuns]


@dataclass
class AggregatedEntity:
    key: str
    value: float


@dataclass
class GroupHeaderRecord:
    """Header row of a group, carrying aggregates over all member runs."""

    group_id: str
    expanded: bool
    run_uuids: List[str]
    aggregated_metric_entities: List[AggregatedEntity]
    aggregated_param_entities: List[AggregatedEntity]
    value: GroupValue
    is_group: bool = field(default=True, init=False)


@dataclass
class RunRowRecord:
    """A run rendered inside a group."""

    row_uuid: str
    run_uuid: str
    belongs_to_group: bool
    is_pinnable: bool
    metrics: List[MetricEntity] = field(default_factory=list)
    params: List[ParamEntity] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    datasets: List[DatasetIdentity] = field(default_factory=list)
    index: int = 0
    level: int = 0
    is_group: bool = field(default=False, init=False)


RenderRecord = Union[GroupHeaderRecord, RunRowRecord]
