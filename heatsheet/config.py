from __future__ import annotations

import os

LOG_LEVEL = os.environ.get("HEATSHEET_LOG_LEVEL", "INFO").upper()

# Host payloads key every table and field list by name.
DEFAULT_TABLE = os.environ.get("HEATSHEET_TABLE", "DEFAULT")

COLUMN_HEADERS = ("Lane", "Swimmer", "Age Group", "Academy")

EMPTY_MESSAGE = "No data available. Please ensure dimensions are added to the visualization."
ERROR_PREFIX = "Error rendering visualization: "

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm"}
HEADER_SCAN_ROWS = 10
