"""
Configuration constants for daytracker.
Centralized configuration for the daily budget, display rules, storage and logging.
"""

import os
from pathlib import Path

# Database
DB_PATH = Path(os.environ.get(
    "DAYTRACKER_DB_PATH",
    Path(__file__).parent.parent / "data" / "daytracker.db",
))

# Daily budget
MAX_MINUTES_PER_DAY = 1440  # 24 hours

# Timeline rendering
TIMELINE_LABEL_MIN_PERCENT = 5.0  # Segments at or below this width get no label
TIMELINE_LABEL_LENGTH = 8

# Bar chart labels
BAR_LABEL_LENGTH = 15

# Chart Defaults
DEFAULT_CHART_HEIGHT = 350
TIMELINE_CHART_HEIGHT = 160
CHART_BORDER_COLOR = '#1e1e35'

# REST API
API_VERSION = "v1"
USER_HEADER = "X-User-Id"

# Logging
LOG_LEVEL = os.environ.get("DAYTRACKER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DIR = Path(os.environ.get(
    "DAYTRACKER_LOG_DIR",
    Path(__file__).parent.parent / "logs",
))
