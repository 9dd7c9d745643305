"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Keep request logs out of the real database
os.environ.setdefault(
    "ATTENDANCE_DB_PATH", str(Path(tempfile.mkdtemp(prefix="attendance-tests-")) / "test.db")
)

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import SqliteKeyValueStore  # noqa: E402
from fakes import InMemoryCalendarStore, RecordingTransport  # noqa: E402


@pytest.fixture
def calendar_store():
    return InMemoryCalendarStore()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def kv_store(tmp_path):
    return SqliteKeyValueStore(tmp_path / "state.db")


@pytest.fixture
def sample_message():
    """Full-day request from the documented example."""
    return "【勤怠連絡】\n氏名：山田太郎\n種別：全休\n日付：20250115\n備考：私用のため"
