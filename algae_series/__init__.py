"""Spreadsheet ingestion and time-series aggregation for algae sample workbooks."""

__version__ = "0.1.0"
