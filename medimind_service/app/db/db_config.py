# app/db/db_config.py

import sqlite3

from app.core.config import DB_PATH

TAKEN_EVENTS_DDL = (
    """
    CREATE TABLE IF NOT EXISTS taken_events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        prescription_id TEXT NOT NULL,
        medicine TEXT NOT NULL,
        scheduled_time TEXT NOT NULL,
        taken_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_taken_events_rx ON taken_events (prescription_id)",
)


def get_sqlite_connection() -> sqlite3.Connection:
    """
    One connection per caller (graph checkpointer, taken-event log), all on
    the same database file. WAL lets readers proceed during appends.
    """
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH), check_same_thread=False)

    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")

    return conn


def ensure_taken_events_table(conn: sqlite3.Connection) -> None:
    for stmt in TAKEN_EVENTS_DDL:
        conn.execute(stmt)
    conn.commit()
