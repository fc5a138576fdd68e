# app/utils/clock.py
from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional, Union

DEFAULT_TIME = "08:00"

SLOT_TIMES = {
    "morning": "08:00",
    "afternoon": "14:00",
    "evening": "18:00",
    "night": "20:00",
}

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[date, datetime]


def is_hhmm(value: str) -> bool:
    m = _HHMM_RE.match((value or "").strip())
    if not m:
        return False
    return 0 <= int(m.group(1)) <= 23 and 0 <= int(m.group(2)) <= 59


def to_clock_time(value: Optional[str]) -> str:
    """
    Named slot -> "HH:MM". Anything already containing ':' and unknown slot
    names are returned unchanged; empty -> DEFAULT_TIME.
    """
    v = (value or "").strip()
    if not v:
        return DEFAULT_TIME
    if ":" in v:
        return v
    return SLOT_TIMES.get(v.lower(), v)


def hhmm_to_minutes(hhmm: str) -> int:
    h, m = map(int, hhmm.strip().split(":"))
    return h * 60 + m


def minutes_to_hhmm(total_minutes: int) -> str:
    total_minutes = max(0, min(23 * 60 + 59, total_minutes))
    h = total_minutes // 60
    m = total_minutes % 60
    return f"{h:02d}:{m:02d}"


def canonical_hhmm(value: str) -> str:
    # "8:05" -> "08:05"
    return minutes_to_hhmm(hhmm_to_minutes(value))


def at_time(day: date, hhmm: str) -> datetime:
    minutes = hhmm_to_minutes(hhmm)
    return datetime.combine(day, time(minutes // 60, minutes % 60))


def format_12h(value: Optional[str]) -> str:
    hhmm = to_clock_time(value)
    if not is_hhmm(hhmm):
        return "8:00 AM"
    h, m = divmod(hhmm_to_minutes(hhmm), 60)
    suffix = "PM" if h >= 12 else "AM"
    return f"{h % 12 or 12}:{m:02d} {suffix}"


def local_date(value: DateLike) -> date:
    """Truncate to the calendar day on the host clock."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value
