"""Record store: conditions and logs persisted in SQLite.

Rows are returned in insertion order. Timestamps are kept in UTC and come
back as request-local naive datetimes, like every other timestamp the API
hands out.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from config import EXPORT_FILENAME_PREFIX, _from_utc_storage, _now_local, _to_utc_storage
from db import get_db
from errors import ConditionNotFound, UnknownConditionReference
from models import Condition, ConditionCreate, ConditionPatch, Log, LogCreate

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _row_to_condition(row) -> Condition:
    return Condition(
        id=row["id"],
        label=row["label"],
        location=row["location"],
        region=row["region"] or None,
        onset_date=row["onset_date"] or None,
        is_archived=bool(row["is_archived"]),
        seq=row["seq"],
    )


def _row_to_log(row) -> Log:
    return Log(
        id=row["id"],
        condition_id=row["condition_id"],
        timestamp=_from_utc_storage(row["timestamp"]),
        intensity=row["intensity"],
        medication=row["medication"],
        notes=row["notes"],
        seq=row["seq"],
    )


def _fetch_condition(conn, condition_id: str) -> Optional[Condition]:
    row = conn.execute("SELECT * FROM conditions WHERE id = ?", (condition_id,)).fetchone()
    return _row_to_condition(row) if row else None


def _insert_condition(conn, data: ConditionCreate) -> str:
    condition_id = _new_id()
    onset = data.onset_date or _now_local().date()
    conn.execute(
        "INSERT INTO conditions (id, label, location, region, onset_date, is_archived)"
        " VALUES (?, ?, ?, ?, ?, 0)",
        (condition_id, data.label, data.location, data.region.value if data.region else "", onset.isoformat()),
    )
    return condition_id


def list_conditions() -> list[Condition]:
    with get_db() as conn:
        rows = conn.execute("SELECT * FROM conditions ORDER BY seq ASC").fetchall()
    return [_row_to_condition(r) for r in rows]


def list_logs() -> list[Log]:
    with get_db() as conn:
        rows = conn.execute("SELECT * FROM logs ORDER BY seq ASC").fetchall()
    return [_row_to_log(r) for r in rows]


def get_condition(condition_id: str) -> Optional[Condition]:
    with get_db() as conn:
        return _fetch_condition(conn, condition_id)


def create_condition(data: ConditionCreate) -> Condition:
    with get_db() as conn:
        condition_id = _insert_condition(conn, data)
        conn.commit()
        condition = _fetch_condition(conn, condition_id)
    logger.info("Created condition %s (%s)", condition.id, condition.label)
    return condition


def create_log(data: LogCreate) -> Log:
    """Insert a log, creating its condition first for a new diagnosis.

    Raises UnknownConditionReference when a follow-up names a missing condition.
    """
    timestamp = data.timestamp or _now_local()
    log_id = _new_id()
    with get_db() as conn:
        if data.new_condition is not None:
            condition_id = _insert_condition(conn, data.new_condition)
        else:
            condition_id = data.condition_id
            if _fetch_condition(conn, condition_id) is None:
                raise UnknownConditionReference(condition_id)
        conn.execute(
            "INSERT INTO logs (id, condition_id, intensity, medication, notes, timestamp)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (log_id, condition_id, data.intensity, data.medication, data.notes, _to_utc_storage(timestamp)),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM logs WHERE id = ?", (log_id,)).fetchone()
    logger.info("Logged intensity %s for condition %s", data.intensity, condition_id)
    return _row_to_log(row)


def update_condition(condition_id: str, patch: ConditionPatch) -> Condition:
    updates = {}
    for name in patch.model_fields_set & {"label", "location", "region"}:
        value = getattr(patch, name)
        if name == "region":
            updates["region"] = value.value if value else ""
        elif value is not None:
            updates[name] = value
    with get_db() as conn:
        if _fetch_condition(conn, condition_id) is None:
            raise ConditionNotFound(condition_id)
        if updates:
            set_clause = ", ".join(f"{col} = ?" for col in updates)
            conn.execute(
                f"UPDATE conditions SET {set_clause} WHERE id = ?",
                (*updates.values(), condition_id),
            )
            conn.commit()
        condition = _fetch_condition(conn, condition_id)
    logger.info("Updated condition %s: %s", condition_id, ", ".join(sorted(updates)) or "no changes")
    return condition


def set_condition_archived(condition_id: str, archived: bool = True) -> Condition:
    with get_db() as conn:
        cur = conn.execute(
            "UPDATE conditions SET is_archived = ? WHERE id = ?",
            (1 if archived else 0, condition_id),
        )
        if cur.rowcount == 0:
            raise ConditionNotFound(condition_id)
        conn.commit()
        condition = _fetch_condition(conn, condition_id)
    logger.info("Condition %s archived=%s", condition_id, archived)
    return condition


def export_filename(now: datetime) -> str:
    return f"{EXPORT_FILENAME_PREFIX}-{now.date().isoformat()}.json"


def export_document(now: datetime) -> tuple[str, dict]:
    """Full conditions and logs collections as one JSON-ready document."""
    conditions = list_conditions()
    logs = list_logs()
    document = {
        "exported_at": now.isoformat(timespec="seconds"),
        "conditions": [c.model_dump(mode="json", exclude={"seq"}) for c in conditions],
        "logs": [l.model_dump(mode="json", exclude={"seq"}) for l in logs],
    }
    logger.info("Exported %d conditions and %d logs", len(conditions), len(logs))
    return export_filename(now), document


def reset():
    with get_db() as conn:
        conn.execute("DELETE FROM logs")
        conn.execute("DELETE FROM conditions")
        conn.commit()
    logger.info("Cleared all conditions and logs")
