# utils/config.py
# Loads the grouping defaults (configs/grouping.yaml by default)
# Optionally loads a user config on top
# Merges the two (user config wins)
# Hands a single settings dict to the CLI

import yaml
from pathlib import Path
from copy import deepcopy

from run_grouping_suite.grouping.constants import DEFAULT_REPORT_NAME

DEFAULT_SETTINGS = {
    "group_by": "",
    "groups_expanded": {},
    "report": {
        "out_dir": None,
        "name": DEFAULT_REPORT_NAME,
        "title": None,
    },
}


def read_yaml(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(base_path: str = None, override_path: str = None) -> dict:
    """
    Load grouping settings: built-in defaults, then the base YAML if it
    exists, then the override YAML, which must exist when given.
    Returns a merged dict.
    """
    settings = deepcopy(DEFAULT_SETTINGS)

    if base_path:
        base_file = Path(base_path)
        if base_file.exists():
            settings = merge_dicts(settings, read_yaml(base_file))

    if override_path:
        override_file = Path(override_path)
        if not override_file.exists():
            raise FileNotFoundError(f"Config file not found: {override_file}")
        settings = merge_dicts(settings, read_yaml(override_file))

    return settings


def merge_dicts(base: dict, override: dict) -> dict:
    """Recursively merge two dicts (override wins)."""
    result = deepcopy(base)
    for k, v in override.items():
        if (
            k in result
            and isinstance(result[k], dict)
            and isinstance(v, dict)
        ):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = deepcopy(v)
    return result
