import math
from collections import Counter
from datetime import timedelta
from typing import Iterable, List, Optional, Sequence

from app.schemas.models import AdherenceSummary, DayAdherence, Reminder, TakenEvent
from app.utils.clock import DateLike, local_date

WINDOW_DAYS = 7


def daily_expected_doses(reminders: Sequence[Reminder]) -> int:
    # floor of 1 keeps an empty prescription from reading as 100%
    return max(sum(len(r.times) for r in reminders), 1)


def adherence_rate(total_taken: int, total_expected: int) -> int:
    if total_expected <= 0:
        return 0
    rate = math.floor(100 * total_taken / total_expected + 0.5)
    return max(0, min(100, rate))


def compute_adherence(
    reminders: Sequence[Reminder],
    prescription_start: DateLike,
    taken_events: Iterable[TakenEvent],
    today: DateLike,
    prescription_id: Optional[str] = None,
) -> AdherenceSummary:
    """
    Expected-vs-taken over the 7 days ending at `today` (inclusive), oldest
    first. A day counts only when start <= day <= today. Every taken event on
    a valid day counts, whichever medicine or slot it was for.
    """
    start = local_date(prescription_start)
    end = local_date(today)
    per_dose_day = daily_expected_doses(reminders)
    taken_by_day = Counter(local_date(e.taken_at) for e in taken_events)

    per_day: List[DayAdherence] = []
    total_expected = total_taken = valid_days = 0

    for offset in range(WINDOW_DAYS - 1, -1, -1):
        day = end - timedelta(days=offset)
        taken = taken_by_day.get(day, 0)
        is_valid = start <= day <= end

        if not is_valid:
            per_day.append(DayAdherence(day=day, taken=taken, expected=0, is_valid=False, state="BEFORE_START"))
            continue

        valid_days += 1
        total_expected += per_dose_day
        total_taken += taken
        per_day.append(DayAdherence(
            day=day,
            taken=taken,
            expected=per_dose_day,
            is_valid=True,
            state="TAKEN" if taken > 0 else "NOT_TAKEN",
        ))

    return AdherenceSummary(
        prescription_id=prescription_id,
        per_day=per_day,
        daily_expected=per_dose_day,
        valid_days=valid_days,
        total_expected=total_expected,
        total_taken=total_taken,
        rate=adherence_rate(total_taken, total_expected),
    )
