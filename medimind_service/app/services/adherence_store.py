import logging
import threading
from datetime import datetime
from typing import List

from app.db.db_config import ensure_taken_events_table, get_sqlite_connection
from app.schemas.models import TakenEvent

logger = logging.getLogger(__name__)

_conn = get_sqlite_connection()
_lock = threading.Lock()

ensure_taken_events_table(_conn)

def append_event(ev: TakenEvent) -> None:
    # append-only: events are never updated or deleted
    with _lock:
        _conn.execute(
            "INSERT INTO taken_events (prescription_id, medicine, scheduled_time, taken_at) VALUES (?, ?, ?, ?)",
            (ev.prescription_id, ev.medicine, ev.scheduled_time, ev.taken_at.isoformat()),
        )
        _conn.commit()
    logger.debug("Recorded dose of %s at %s for %s", ev.medicine, ev.scheduled_time, ev.prescription_id)

def list_events(prescription_id: str) -> List[TakenEvent]:
    """Taken events for one prescription, in arrival order."""
    with _lock:
        rows = _conn.execute(
            "SELECT prescription_id, medicine, scheduled_time, taken_at FROM taken_events "
            "WHERE prescription_id = ? ORDER BY id",
            (prescription_id,),
        ).fetchall()
    return [
        TakenEvent(
            prescription_id=r[0],
            medicine=r[1],
            scheduled_time=r[2],
            taken_at=datetime.fromisoformat(r[3]),
        )
        for r in rows
    ]
