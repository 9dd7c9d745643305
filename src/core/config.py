"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("ATTENDANCE_DB_PATH", PROJECT_ROOT / "data" / "db" / "attendance.db")
)

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_USER_ID = os.environ.get("CALENDAR_USER_ID", "")  # mailbox that owns the calendar
CALENDAR_ID = os.environ.get("CALENDAR_ID", "")
CALENDAR_NAME = os.environ.get("CALENDAR_NAME", "CI-休暇管理カレンダー")
CALENDAR_TIMEZONE = os.environ.get("CALENDAR_TIMEZONE", "Asia/Tokyo")

SEARCH_DAYS_FORWARD = 30
DEFAULT_SEARCH_DAYS_BACK = 1

# =============================================================================
# NOTIFICATION CONFIGURATION
# =============================================================================

DEPARTMENT_NAME = os.environ.get("DEPARTMENT_NAME", "CI部")
SUBJECT_PREFIX = "【勤怠連絡】"

REPORT_TO_EMAIL = os.environ.get("REPORT_TO_EMAIL", "")
ERROR_EMAIL = os.environ.get("ERROR_EMAIL", "")
FROM_EMAIL = os.environ.get("FROM_EMAIL", "")
FROM_NAME = os.environ.get("FROM_NAME", f"{DEPARTMENT_NAME}-勤怠連絡")

# =============================================================================
# REQUEST LIMITS
# =============================================================================

MAX_NAME_LENGTH = 50
MAX_REMARKS_LENGTH = 200
MAX_DATES_COUNT = 31

# =============================================================================
# PERSISTENCE KEYS
# =============================================================================

LAST_EXECUTION_KEY = "last_execution_time"
EVENT_STATE_KEY = "previous_event_state"
SNAPSHOT_VERSION = 1

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

CHAT_API_KEY = os.environ.get("CHAT_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
