import re
from typing import Any, Dict, Iterable, List, Optional

from app.schemas.models import MedicationRecord, Reminder
from app.services.frequency import normalize, normalize_times

DEFAULT_DURATION_DAYS = 7
DEFAULT_MEDICINE = "Medication"

_DIGITS_RE = re.compile(r"\d+")


def parse_duration_days(duration_text: Any) -> int:
    """First run of digits in the text; 7 when there is none (or it is 0)."""
    m = _DIGITS_RE.search(str(duration_text) if duration_text is not None else "")
    if not m:
        return DEFAULT_DURATION_DAYS
    return int(m.group(0)) or DEFAULT_DURATION_DAYS


def _medicine_name(name: Optional[str]) -> str:
    return (name or "").strip() or DEFAULT_MEDICINE


def build_reminder(record: MedicationRecord) -> Reminder:
    freq = normalize(record.frequency, record.instructions)
    return Reminder(
        medicine=_medicine_name(record.name),
        times=freq.times,
        with_food=freq.with_food,
        duration_days=parse_duration_days(record.duration),
    )


def build_reminders(records: Iterable[MedicationRecord]) -> List[Reminder]:
    return [build_reminder(r) for r in records]


def coerce_reminder(raw: Dict[str, Any]) -> Reminder:
    """
    Provider-suggested reminder ({medicine, times, withFood, duration}) ->
    Reminder, with the same fallbacks as build_reminder.
    """
    times = raw.get("times")
    if isinstance(times, str):
        times = [t for t in re.split(r"[,;/]", times) if t.strip()]
    elif not isinstance(times, list):
        times = []

    with_food = raw.get("withFood", raw.get("with_food"))
    freq = normalize_times(times, with_food=with_food if isinstance(with_food, bool) else False)

    duration = raw.get("duration", raw.get("durationDays", raw.get("duration_days")))
    medicine = raw.get("medicine")
    return Reminder(
        medicine=_medicine_name(medicine if isinstance(medicine, str) else None),
        times=freq.times,
        with_food=freq.with_food,
        duration_days=parse_duration_days(duration),
    )


def usable_suggestions(suggested: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    return [s for s in (suggested or []) if isinstance(s, dict)]


def reminders_for_prescription(
    meds: Iterable[MedicationRecord],
    suggested: Optional[Iterable[Dict[str, Any]]] = None,
) -> List[Reminder]:
    # provider-suggested reminders win; otherwise derive one per medication
    suggested = usable_suggestions(suggested)
    if suggested:
        return [coerce_reminder(s) for s in suggested]
    return build_reminders(meds)
