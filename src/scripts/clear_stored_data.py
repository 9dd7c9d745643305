#!/usr/bin/env python3
"""
Forget the saved snapshot and last run time.

The next report run starts over with the default lookback and reports
every attendance event in its window as new.

Usage:
    uv run python src/scripts/clear_stored_data.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.database import SqliteKeyValueStore
from services.state import clear_stored_data

if __name__ == "__main__":
    clear_stored_data(SqliteKeyValueStore(DB_PATH))
    print(f"Cleared stored report state in {DB_PATH}")
