"""SQLite request logging for the chat endpoint."""

import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH


@dataclass
class RequestLog:
    """Captured chat request/outcome data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    client_ip: str | None = None
    sender_name: str | None = None
    event_type: str | None = None
    command_type: str | None = None
    outcome: str = ""
    succeeded_count: int = 0
    failed_count: int = 0
    status_code: int = 0
    error_message: str | None = None
    processing_time_ms: int = 0


def create_request_log_table(conn: sqlite3.Connection):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS chat_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            client_ip TEXT,
            sender_name TEXT,
            event_type TEXT,
            command_type TEXT,
            outcome TEXT NOT NULL,
            succeeded_count INTEGER NOT NULL DEFAULT 0,
            failed_count INTEGER NOT NULL DEFAULT 0,
            status_code INTEGER NOT NULL,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL
        )
    """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_chat_requests_timestamp ON chat_requests(timestamp)"
    )
    conn.commit()


def log_request(log: RequestLog, db_path: Path = DB_PATH) -> None:
    """Write request log to SQLite database."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        create_request_log_table(conn)
        conn.execute(
            """
            INSERT INTO chat_requests (
                request_id, timestamp, endpoint, client_ip, sender_name,
                event_type, command_type, outcome, succeeded_count,
                failed_count, status_code, error_message, processing_time_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.client_ip,
                log.sender_name,
                log.event_type,
                log.command_type,
                log.outcome,
                log.succeeded_count,
                log.failed_count,
                log.status_code,
                log.error_message,
                log.processing_time_ms,
            ),
        )
        conn.commit()
    finally:
        conn.close()
