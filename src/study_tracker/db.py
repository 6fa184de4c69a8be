"""Database initialization, connection management and storage slots."""
import os
import sqlite3
from datetime import datetime
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "STUDY_TRACKER_DB", str(Path.home() / ".study_tracker" / "tracker.db")
)

STUDY_DATA_KEY = "btech-study-tracker"
FOCUS_SESSIONS_KEY = "focusSessions"

SCHEMA = """
CREATE TABLE IF NOT EXISTS storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);

CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def read_slot(db_path: str, key: str) -> str | None:
    """Return the raw text stored under key, or None if the slot is empty."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else None


def write_slot(db_path: str, key: str, value: str) -> None:
    """Replace the whole slot in a single statement."""
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO storage (key, value, updated_at) VALUES (?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
        (key, value, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def delete_slot(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM storage WHERE key = ?", (key,))
    conn.commit()
    conn.close()
