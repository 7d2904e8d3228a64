# -*- coding: utf-8 -*-
"""Runtime configuration, read from the environment with local defaults."""
from __future__ import annotations

import os
from pathlib import Path

# === Base project path ===
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# === Storage ===
DATA_DIR = PROJECT_ROOT / "data"
DATA_PATH = Path(os.getenv("SCHEDULE_DATA_PATH", str(DATA_DIR / "schedule.json")))

# === Logging ===
LOG_PATH = Path(os.getenv("SCHEDULE_LOG_PATH", str(PROJECT_ROOT / "schedule_planner.log")))
LOG_LEVEL = os.getenv("SCHEDULE_LOG_LEVEL", "INFO").upper()

# === Service ===
SCHEDULE_SERVICE_URL = os.getenv("SCHEDULE_SERVICE_URL", "http://localhost:8004")
SCHEDULE_SERVICE_PORT = int(os.getenv("SCHEDULE_SERVICE_PORT", "8004"))

# Timeout for REST calls from the MCP wrapper (in seconds)
STANDARD_TIMEOUT = 30.0

# Number of validation errors shown before collapsing into a count
IMPORT_ERROR_PREVIEW = 10
