from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from app.schemas.models import Occurrence, Reminder
from app.services.reminders import DEFAULT_DURATION_DAYS
from app.utils.clock import DateLike, at_time, local_date

# export range cap; a misread duration ("until 20250115") must not
# expand into millions of events
MAX_EXPORT_DAYS = 366

# last day a dose may fall on, so dose time + event length stays a valid datetime
LAST_SCHEDULABLE_DAY = date.max - timedelta(days=1)


def course_length(reminders: Sequence[Reminder]) -> int:
    """Longest course among the reminders (export range), capped at MAX_EXPORT_DAYS."""
    longest = max((r.duration_days for r in reminders), default=DEFAULT_DURATION_DAYS)
    return min(longest, MAX_EXPORT_DAYS)


def materialize_range(
    reminders: Iterable[Reminder],
    start_date: DateLike,
    range_days: int,
    range_start: Optional[DateLike] = None,
) -> List[Occurrence]:
    """
    Expand reminders into dated doses.

    Course day i of each reminder falls on start_date + i days, for i in
    [0, duration_days). Only days inside [range_start, range_start + range_days)
    are emitted; range_start defaults to start_date. Days past
    LAST_SCHEDULABLE_DAY are dropped.

    Order is reminder input order, then day offset, then time of day
    (Reminder.times is already ascending).
    """
    course_start = local_date(start_date)
    first = local_date(range_start) if range_start is not None else course_start
    if range_days <= 0:
        return []

    lo = (first - course_start).days
    hi = min(lo + range_days, (LAST_SCHEDULABLE_DAY - course_start).days + 1)

    out: List[Occurrence] = []
    for r_idx, reminder in enumerate(reminders):
        for day_index in range(max(lo, 0), min(hi, reminder.duration_days)):
            day = course_start + timedelta(days=day_index)
            for t_idx, hhmm in enumerate(reminder.times):
                out.append(Occurrence(
                    medicine=reminder.medicine,
                    scheduled_at=at_time(day, hhmm),
                    day_index=day_index,
                    reminder_index=r_idx,
                    time_index=t_idx,
                    with_food=reminder.with_food,
                    duration_days=reminder.duration_days,
                ))
    return out


def todays_occurrences(reminders: Iterable[Reminder], start_date: DateLike, today: DateLike) -> List[Occurrence]:
    return materialize_range(reminders, start_date, 1, range_start=today)


def full_course(reminders: Sequence[Reminder], start_date: DateLike) -> List[Occurrence]:
    return materialize_range(reminders, start_date, course_length(reminders))
