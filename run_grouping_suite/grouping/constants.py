"""
constants.py
Shared names and defaults for run grouping.
"""

# Tag holding the parent run id; runs carrying it are child runs and cannot be pinned
EXPERIMENT_PARENT_ID_TAG = "mlflow.parentRunId"

# Separator used in group-by tokens, group ids and row ids
KEY_SEPARATOR = "."

# Group-by token layout: mode.aggregate_function.group_by_data
GROUP_BY_KEY_PATTERN = r"([a-z]+)\.([a-z]+)\.(.+)"

# Column prefixes used when flattening render records into a table
METRIC_COLUMN_PREFIX = "metrics."
PARAM_COLUMN_PREFIX = "params."

# CLI defaults
DEFAULT_REPORT_NAME = "grouped_runs"
DEFAULT_CONFIG_PATH = "configs/grouping.yaml"
