import logging
import sqlite3
from contextlib import contextmanager

from config import DB_PATH

logger = logging.getLogger(__name__)


def _add_missing_columns(conn, table: str, columns: dict):
    existing = {row[1] for row in conn.execute(f"PRAGMA table_info({table})")}
    for name, ddl in columns.items():
        if name not in existing:
            logger.info("Adding column %s.%s", table, name)
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")


def init_db():
    with sqlite3.connect(DB_PATH) as conn:
        # seq is the insertion order; id is the opaque public identity.
        conn.execute("""
            CREATE TABLE IF NOT EXISTS conditions (
                seq        INTEGER PRIMARY KEY AUTOINCREMENT,
                id         TEXT    NOT NULL UNIQUE,
                label      TEXT    NOT NULL,
                location   TEXT    NOT NULL DEFAULT '',
                onset_date TEXT    NOT NULL DEFAULT ''
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS logs (
                seq          INTEGER PRIMARY KEY AUTOINCREMENT,
                id           TEXT    NOT NULL UNIQUE,
                condition_id TEXT    NOT NULL,
                intensity    INTEGER NOT NULL CHECK (intensity BETWEEN 1 AND 10),
                medication   TEXT    NOT NULL DEFAULT '',
                notes        TEXT    NOT NULL DEFAULT '',
                timestamp    TEXT    NOT NULL
            )
        """)
        # Migrate: columns added after the first release
        _add_missing_columns(conn, "conditions", {
            "region": "TEXT NOT NULL DEFAULT ''",
            "is_archived": "INTEGER NOT NULL DEFAULT 0",
        })
        conn.execute("CREATE INDEX IF NOT EXISTS idx_logs_condition_id ON logs(condition_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp)")
        conn.commit()


@contextmanager
def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
