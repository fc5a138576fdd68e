import logging
from typing import Iterable, List, Optional

from app.schemas.models import FrequencyKind, NormalizedFrequency
from app.utils.clock import DEFAULT_TIME, canonical_hhmm, hhmm_to_minutes, is_hhmm, to_clock_time

logger = logging.getLogger(__name__)

KIND_TIMES = {
    FrequencyKind.ONCE: [DEFAULT_TIME],
    FrequencyKind.TWICE: ["08:00", "20:00"],
    FrequencyKind.THRICE: ["08:00", "14:00", "20:00"],
}

# ordered: first match wins
_FREQUENCY_RULES = (
    ("twice", FrequencyKind.TWICE),
    ("three", FrequencyKind.THRICE),
)


def classify_frequency(frequency_text: Optional[str]) -> FrequencyKind:
    f = (frequency_text or "").lower()
    for needle, kind in _FREQUENCY_RULES:
        if needle in f:
            return kind
    return FrequencyKind.ONCE


def takes_with_food(instructions_text: Optional[str]) -> bool:
    return "food" in (instructions_text or "").lower()


def normalize(frequency_text: Optional[str], instructions_text: Optional[str] = None) -> NormalizedFrequency:
    """
    Free-text frequency + instructions -> concrete clock times and food flag.
    Anything unrecognized degrades to once daily.
    """
    kind = classify_frequency(frequency_text)
    return NormalizedFrequency(
        kind=kind,
        times=list(KIND_TIMES[kind]),
        with_food=takes_with_food(instructions_text),
    )


def normalize_times(values: Optional[Iterable[str]], instructions_text: Optional[str] = None,
                    with_food: Optional[bool] = None) -> NormalizedFrequency:
    """
    Explicit time list (slot names or HH:MM) -> CUSTOM frequency.
    Invalid entries are dropped; an empty result falls back to once daily.
    """
    times: List[str] = []
    for raw in values or []:
        if raw is None or not str(raw).strip():
            continue
        hhmm = to_clock_time(str(raw))
        if not is_hhmm(hhmm):
            logger.warning("Dropping unusable reminder time %r", raw)
            continue
        hhmm = canonical_hhmm(hhmm)
        if hhmm not in times:
            times.append(hhmm)

    food = takes_with_food(instructions_text) if with_food is None else bool(with_food)
    if not times:
        return NormalizedFrequency(kind=FrequencyKind.ONCE, times=list(KIND_TIMES[FrequencyKind.ONCE]), with_food=food)

    times.sort(key=hhmm_to_minutes)
    return NormalizedFrequency(kind=FrequencyKind.CUSTOM, times=times, with_food=food)
