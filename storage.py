from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from models import ActiveSession, Config, DailyEntry, NoSession, WeekLedger, WorkSession

logger = logging.getLogger(__name__)

STORAGE_KEY = "weeklyWorkHours"


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("WEEKLY_TRACKER_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "weekly_tracker.db"


DB_PATH = _get_db_path()


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()


# --- Key-value slot ---


def read_value(key: str) -> str | None:
    """Get the raw stored value for a key."""
    conn = get_connection()
    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else None


def write_value(key: str, value: str) -> None:
    """Insert or replace the value for a key."""
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)", (key, value))
    conn.commit()
    conn.close()


# --- Ledger snapshot codec ---


def _encode_session(session: WorkSession) -> dict[str, Any]:
    return {
        "startTime": session.start_time.isoformat(),
        "endTime": session.end_time.isoformat(),
        "duration": session.duration_minutes,
    }


def _decode_session(data: dict[str, Any]) -> WorkSession:
    duration = int(data["duration"])
    if duration < 0:
        raise ValueError(f"Negative session duration: {duration}")
    return WorkSession(
        start_time=datetime.fromisoformat(data["startTime"]),
        end_time=datetime.fromisoformat(data["endTime"]),
        duration_minutes=duration,
    )


def encode_ledger(ledger: WeekLedger) -> dict[str, Any]:
    """Convert a ledger to the JSON-serialisable snapshot layout."""
    data: dict[str, Any] = {
        "totalMinutes": ledger.total_minutes,
        "entries": [
            {
                "date": entry.date_key,
                "displayDate": entry.display_label,
                "sessions": [_encode_session(s) for s in entry.sessions],
                "totalMinutes": entry.total_minutes,
            }
            for entry in ledger.entries
        ],
        "lastResetDate": ledger.last_reset.isoformat(),
    }
    if isinstance(ledger.session, ActiveSession):
        data["activeSession"] = {"startTime": ledger.session.start_time.isoformat()}
    return data


def decode_ledger(data: dict[str, Any]) -> WeekLedger:
    """Rebuild a ledger from a snapshot.

    Totals are recomputed from the sessions; the stored totals are only
    informational. Raises KeyError/TypeError/ValueError on malformed data.
    """
    entries = []
    for raw_entry in data.get("entries", []):
        sessions = [_decode_session(s) for s in raw_entry.get("sessions", [])]
        if not sessions:
            continue
        entries.append(DailyEntry(
            date_key=str(raw_entry["date"]),
            display_label=str(raw_entry.get("displayDate", raw_entry["date"])),
            sessions=sessions,
        ))

    active = data.get("activeSession")
    session = ActiveSession(datetime.fromisoformat(active["startTime"])) if active else NoSession()

    ledger = WeekLedger(
        last_reset=datetime.fromisoformat(data["lastResetDate"]),
        entries=entries,
        session=session,
    )
    stored_total = data.get("totalMinutes")
    if stored_total is not None and stored_total != ledger.total_minutes:
        logger.warning(
            "Stored total %s does not match sessions (%s); using sessions",
            stored_total, ledger.total_minutes,
        )
    return ledger


# --- Repositories ---


class LedgerRepository(Protocol):
    def load(self) -> WeekLedger | None: ...

    def save(self, ledger: WeekLedger) -> None: ...


def _parse_snapshot(raw: str | None) -> WeekLedger | None:
    """Decode a stored snapshot, treating anything unreadable as no prior state."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        return decode_ledger(data)
    except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Ignoring unreadable stored state: %s", exc)
        return None


class SqliteLedgerRepository:
    """Keeps the whole ledger as one JSON value in the key-value table."""

    def __init__(self, key: str = STORAGE_KEY):
        self.key = key
        init_db()

    def load(self) -> WeekLedger | None:
        return _parse_snapshot(read_value(self.key))

    def save(self, ledger: WeekLedger) -> None:
        write_value(self.key, json.dumps(encode_ledger(ledger)))


class InMemoryLedgerRepository:
    """Stores the encoded snapshot in memory, used in tests."""

    def __init__(self, raw: str | None = None):
        self.raw = raw
        self.saves = 0

    def load(self) -> WeekLedger | None:
        return _parse_snapshot(self.raw)

    def save(self, ledger: WeekLedger) -> None:
        self.raw = json.dumps(encode_ledger(ledger))
        self.saves += 1


# --- Config ---


def get_config() -> Config:
    """Load config from database."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    config = Config()
    for row in rows:
        try:
            if row["key"] == "weekly_target_minutes":
                config.weekly_target_minutes = int(row["value"])
            elif row["key"] == "daily_minimum_minutes":
                config.daily_minimum_minutes = int(row["value"])
            elif row["key"] == "reset_check_seconds":
                config.reset_check_seconds = float(row["value"])
            elif row["key"] == "refresh_seconds":
                config.refresh_seconds = float(row["value"])
        except ValueError:
            logger.warning("Ignoring bad config value for %s: %r", row["key"], row["value"])

    return config


def save_config(config: Config):
    """Save config to database."""
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("weekly_target_minutes", str(config.weekly_target_minutes)))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("daily_minimum_minutes", str(config.daily_minimum_minutes)))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("reset_check_seconds", str(config.reset_check_seconds)))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("refresh_seconds", str(config.refresh_seconds)))
    conn.commit()
    conn.close()
