# app/services/calendar_export.py
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from app.core.config import APP_NAME, CALENDAR_UID_DOMAIN
from app.schemas.models import CalendarEvent, Occurrence

EVENT_MINUTES = 15
ALARM_MINUTES = 15
CRLF = "\r\n"

PRODID = f"-//{APP_NAME.capitalize()}//Medication Reminders//EN"


def event_uid(prescription_id: str, occ: Occurrence) -> str:
    return f"{prescription_id}-{occ.reminder_index}-{occ.time_index}-{occ.day_index}@{CALENDAR_UID_DOMAIN}"


def event_title(occ: Occurrence) -> str:
    return f"Take {occ.medicine}"


def event_description(occ: Occurrence) -> str:
    return (
        f"Medication: {occ.medicine}\n"
        f"With food: {'Yes' if occ.with_food else 'No'}\n"
        f"Day {occ.day_index + 1} of {occ.duration_days}"
    )


def _ics_local(dt: datetime) -> str:
    # floating time: read on the consumer's local clock
    return dt.strftime("%Y%m%dT%H%M%S")


def _ics_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _fold(line: str, limit: int = 75) -> str:
    """RFC 5545 folding: at most 75 octets per line, continuation lines start with a space."""
    raw = line.encode("utf-8")
    if len(raw) <= limit:
        return line

    parts: List[str] = []
    chunk = ""
    size = 0
    budget = limit
    for ch in line:
        n = len(ch.encode("utf-8"))
        if size + n > budget:
            parts.append(chunk)
            chunk, size = "", 0
            budget = limit - 1  # leading space
        chunk += ch
        size += n
    parts.append(chunk)
    return (CRLF + " ").join(parts)


def to_calendar_document(
    occurrences: Iterable[Occurrence],
    prescription_id: str,
    stamp: Optional[datetime] = None,
) -> str:
    stamp = stamp or datetime.now(timezone.utc)
    dtstamp = _ics_utc(stamp)

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    for occ in occurrences:
        end = occ.scheduled_at + timedelta(minutes=EVENT_MINUTES)
        lines += [
            "BEGIN:VEVENT",
            f"UID:{event_uid(prescription_id, occ)}",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{_ics_local(occ.scheduled_at)}",
            f"DTEND:{_ics_local(end)}",
            f"SUMMARY:{_escape(event_title(occ))}",
            f"DESCRIPTION:{_escape(event_description(occ))}",
            "STATUS:CONFIRMED",
            "TRANSP:OPAQUE",
            "BEGIN:VALARM",
            f"TRIGGER:-PT{ALARM_MINUTES}M",
            "ACTION:DISPLAY",
            f"DESCRIPTION:{_escape(f'Time to take {occ.medicine}')}",
            "END:VALARM",
            "END:VEVENT",
        ]
    lines.append("END:VCALENDAR")
    return CRLF.join(_fold(ln) for ln in lines) + CRLF


def to_event_list(occurrences: Iterable[Occurrence], prescription_id: str) -> List[CalendarEvent]:
    return [
        CalendarEvent(
            uid=event_uid(prescription_id, occ),
            title=event_title(occ),
            start=occ.scheduled_at,
            end=occ.scheduled_at + timedelta(minutes=EVENT_MINUTES),
            description=event_description(occ),
        )
        for occ in occurrences
    ]
