# Expose primary entry points to keep imports short.
from .schema import (
    REMAINING_RUNS,
    AggregatedEntity,
    DatasetIdentity,
    GroupByConfig,
    GroupHeaderRecord,
    MetricEntity,
    ParamEntity,
    RemainingRuns,
    RunData,
    RunGroupingAggregateFunction,
    RunGroupingMode,
    RunRowRecord,
)
from .group_key import create_group_id, create_runs_group_by_key, parse_runs_group_by_key
from .aggregate import aggregate_values
from .history import collect_step_numbers, create_aggregated_metric_history, flatten_metric_histories
from .render import create_group_render_metadata, get_run_group_display_name, is_remaining_runs_group
from .engine import get_grouped_row_render_metadata
from .loader import load_runs
