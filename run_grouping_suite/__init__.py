"""Grouping and aggregation of experiment runs for tabular display."""

__version__ = "0.1.0"
