#!/usr/bin/env python3
"""
loader.py

Loads run lists exported from a tracking server (JSON or YAML) into
`RunData` records.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import yaml

from run_grouping_suite.grouping.schema import RunData

logger = logging.getLogger(__name__)


def load_runs(path: str | Path) -> List[RunData]:
    """
    Load runs from a file holding either a list of runs or {"runs": [...]}.
    Files ending in .json are read as JSON, everything else as YAML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Runs file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            raw = json.load(f)
        else:
            raw = yaml.safe_load(f)

    if isinstance(raw, dict):
        raw = raw.get("runs")
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of runs in {path}")

    runs = [RunData.from_dict(entry) for entry in raw]
    logger.info(f"Loaded {len(runs)} runs from {path}")
    return runs
