"""SQLite persistence for monitoring sessions, AI usage and security alerts.

Only derived data is written: content hashes, classifications and already
sanitized alert content. Raw screen text never reaches this module.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from dam_agent.errors import StorageError
from dam_agent.model.models import MonitoringSession, SecurityAlert, UsageEvent

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS monitoring_sessions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        start_time TEXT NOT NULL,
        end_time TEXT,
        total_usage INTEGER DEFAULT 0,
        total_cost REAL DEFAULT 0,
        metadata TEXT DEFAULT '{}'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ai_usage (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        session_id INTEGER,
        ai_tool TEXT NOT NULL,
        usage_type TEXT NOT NULL,
        content_hash TEXT,
        risk_level TEXT NOT NULL,
        content_type TEXT,
        category TEXT,
        prompt_length INTEGER DEFAULT 0,
        sensitive_data_detected INTEGER DEFAULT 0,
        api_key_exposed INTEGER DEFAULT 0,
        compliance_flags TEXT DEFAULT '[]',
        timestamp TEXT NOT NULL,
        metadata TEXT DEFAULT '{}',
        FOREIGN KEY (session_id) REFERENCES monitoring_sessions (id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS alerts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        session_id INTEGER,
        type TEXT NOT NULL,
        severity TEXT NOT NULL,
        message TEXT NOT NULL,
        data TEXT DEFAULT '{}',
        resolved INTEGER DEFAULT 0,
        created_at TEXT NOT NULL,
        resolved_at TEXT,
        FOREIGN KEY (session_id) REFERENCES monitoring_sessions (id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_ai_usage_timestamp ON ai_usage (timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_alerts_created_at ON alerts (created_at)",
)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


class AgentDatabase:
    """Thread-safe wrapper around one SQLite connection.

    The scheduler thread writes while the API thread reads, so every
    statement runs under one lock.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            with self.conn:
                for statement in SCHEMA:
                    self.conn.execute(statement)
        except sqlite3.Error as e:
            msg = f"Cannot open database {self.db_path}: {e}"
            raise StorageError(msg) from e
        logger.info("Database ready at %s", self.db_path)

    @contextmanager
    def _tx(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self.conn:
                    yield self.conn
            except sqlite3.Error as e:
                msg = f"Database operation failed: {e}"
                raise StorageError(msg) from e

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    # sessions

    def start_session(self) -> MonitoringSession:
        start = utc_now()
        with self._tx() as conn:
            cursor = conn.execute(
                "INSERT INTO monitoring_sessions (start_time) VALUES (?)", (start,)
            )
            session_id = int(cursor.lastrowid or 0)
        logger.info("Started monitoring session %d", session_id)
        return MonitoringSession(id=session_id, start_time=start)

    def end_session(self, session_id: int) -> None:
        with self._tx() as conn:
            conn.execute(
                "UPDATE monitoring_sessions SET end_time = ? WHERE id = ?",
                (utc_now(), session_id),
            )
        logger.info("Ended monitoring session %d", session_id)

    def get_session(self, session_id: int) -> MonitoringSession | None:
        with self._tx() as conn:
            row = conn.execute(
                "SELECT * FROM monitoring_sessions WHERE id = ?", (session_id,)
            ).fetchone()
        return _session(row) if row else None

    def open_sessions(self) -> list[MonitoringSession]:
        with self._tx() as conn:
            rows = conn.execute(
                "SELECT * FROM monitoring_sessions WHERE end_time IS NULL ORDER BY id"
            ).fetchall()
        return [_session(row) for row in rows]

    # usage and alerts

    def record_usage(self, event: UsageEvent, session_id: int | None = None) -> int:
        with self._tx() as conn:
            cursor = conn.execute(
                """
                INSERT INTO ai_usage (
                    session_id, ai_tool, usage_type, content_hash, risk_level,
                    content_type, category, prompt_length,
                    sensitive_data_detected, api_key_exposed, compliance_flags,
                    timestamp, metadata
                ) VALUES (?, ?, 'prompt', ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    event["tool"],
                    event["content_hash"],
                    event["risk_level"],
                    event["content_type"],
                    event["category"],
                    event["prompt_length"],
                    int(event["sensitive_data_detected"]),
                    int(event["api_key_exposed"]),
                    json.dumps(event["compliance_flags"]),
                    to_iso(event["timestamp"]),
                    json.dumps(event["metadata"]),
                ),
            )
            if session_id is not None:
                conn.execute(
                    "UPDATE monitoring_sessions SET total_usage = total_usage + 1 "
                    "WHERE id = ?",
                    (session_id,),
                )
            return int(cursor.lastrowid or 0)

    def record_alert(self, alert: SecurityAlert, session_id: int | None = None) -> int:
        data = {
            "tool": alert["tool"],
            "sanitized_content": alert["sanitized_content"],
            "action_taken": alert["action_taken"],
        }
        with self._tx() as conn:
            cursor = conn.execute(
                """
                INSERT INTO alerts (
                    session_id, type, severity, message, data, resolved, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    alert["alert_type"],
                    alert["severity"],
                    alert["description"],
                    json.dumps(data),
                    int(alert["resolved"]),
                    to_iso(alert["timestamp"]),
                ),
            )
            return int(cursor.lastrowid or 0)

    def resolve_alert(self, alert_id: int) -> bool:
        with self._tx() as conn:
            cursor = conn.execute(
                "UPDATE alerts SET resolved = 1, resolved_at = ? "
                "WHERE id = ? AND resolved = 0",
                (utc_now(), alert_id),
            )
            return cursor.rowcount > 0

    def recent_usage(self, limit: int = 50) -> list[dict[str, Any]]:
        with self._tx() as conn:
            rows = conn.execute(
                "SELECT * FROM ai_usage ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()
        usage = []
        for row in rows:
            item = dict(row)
            item["sensitive_data_detected"] = bool(item["sensitive_data_detected"])
            item["api_key_exposed"] = bool(item["api_key_exposed"])
            item["compliance_flags"] = json.loads(item["compliance_flags"] or "[]")
            item["metadata"] = json.loads(item["metadata"] or "{}")
            usage.append(item)
        return usage

    def recent_alerts(
        self, limit: int = 50, *, unresolved_only: bool = False
    ) -> list[dict[str, Any]]:
        query = "SELECT * FROM alerts"
        if unresolved_only:
            query += " WHERE resolved = 0"
        query += " ORDER BY id DESC LIMIT ?"
        with self._tx() as conn:
            rows = conn.execute(query, (limit,)).fetchall()
        alerts = []
        for row in rows:
            item = dict(row)
            item["resolved"] = bool(item["resolved"])
            item["data"] = json.loads(item["data"] or "{}")
            alerts.append(item)
        return alerts

    def purge_older_than(self, days: int, now: datetime | None = None) -> int:
        """Delete usage rows, alerts and closed sessions older than ``days``."""
        cutoff = ((now or datetime.now(timezone.utc)) - timedelta(days=days)).isoformat()
        with self._tx() as conn:
            deleted = conn.execute(
                "DELETE FROM ai_usage WHERE timestamp < ?", (cutoff,)
            ).rowcount
            deleted += conn.execute(
                "DELETE FROM alerts WHERE created_at < ?", (cutoff,)
            ).rowcount
            deleted += conn.execute(
                "DELETE FROM monitoring_sessions "
                "WHERE end_time IS NOT NULL AND end_time < ?",
                (cutoff,),
            ).rowcount
        logger.info("Purged %d rows older than %d days", deleted, days)
        return deleted


def _session(row: sqlite3.Row) -> MonitoringSession:
    return MonitoringSession(
        id=row["id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        total_usage=row["total_usage"],
        total_cost=row["total_cost"],
    )


__all__ = ["AgentDatabase"]
