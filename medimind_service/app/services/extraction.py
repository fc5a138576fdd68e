import re
from typing import List
from app.schemas.models import MedicationRecord

class ExtractionError(RuntimeError):
    pass

_FREQ_PHRASES = (
    "three times daily", "three times a day", "twice daily", "twice a day",
    "once daily", "once a day", "at night", "at bedtime", "every morning",
    "thrice daily", "twice", "once", "daily", "weekly",
    "tds", "tid", "bd", "bid", "od", "qid", "prn", "as needed",
)

_MED_HINT_RE = re.compile(r"\b(tab|tabs|tablet|cap|caps|capsule|syrup|sachet|mg|mcg|ml|od|bd|bid|tid|daily|weekly|prn)\b", re.I)
_DOSAGE_RE = re.compile(r"(\d+(?:\.\d+)?\s?(mg|mcg|g|ml|iu|units?|sachets?|tablets?|tabs?))\b", re.IGNORECASE)
_DURATION_RE = re.compile(r"\b(?:for|x)\s*(\d+\s*(?:days?|weeks?|d))\b", re.IGNORECASE)
_FOOD_RE = re.compile(r"((?:take\s+)?(?:with|after|before)\s+(?:food|meals?)|empty stomach)", re.IGNORECASE)
_FREQ_RE = re.compile(r"\b(" + "|".join(re.escape(p) for p in _FREQ_PHRASES) + r")\b", re.IGNORECASE)

def simple_extract_meds(text: str) -> List[MedicationRecord]:
    """
    Line-based fallback when LLM extraction is off or unavailable.
    Only lines that look like a medication instruction are kept; fields
    stay as free text for the normalizer.
    """
    meds: List[MedicationRecord] = []
    if not text:
        return meds

    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    for ln in lines:
        # must look like a medicine line (dosage/frequency/keywords)
        if not (_MED_HINT_RE.search(ln) or _DOSAGE_RE.search(ln)):
            continue

        name_match = re.match(r"^(?:\d+[.)]\s*)?(?:(?:tablet|tab|capsule|cap|syrup|syp)\b\.?\s*)?([A-Za-z][A-Za-z0-9\-]*(?: [A-Za-z][A-Za-z\-]*)*)", ln, re.I)
        if not name_match:
            continue
        name = name_match.group(1).strip()
        # trim trailing instruction words captured with the name
        name = re.split(_FREQ_RE.pattern + r"|\b(?:for|take|with|after|before)\b", name, flags=re.I)[0].strip()
        if not name:
            continue

        dosage_match = _DOSAGE_RE.search(ln)
        freq_match = _FREQ_RE.search(ln)

        # if no frequency AND no dosage, skip (avoid false positives)
        if not freq_match and not dosage_match:
            continue

        duration_match = _DURATION_RE.search(ln)
        food_match = _FOOD_RE.search(ln)

        meds.append(MedicationRecord(
            name=name,
            dosage=dosage_match.group(1) if dosage_match else None,
            frequency=freq_match.group(1) if freq_match else None,
            duration=duration_match.group(1) if duration_match else None,
            instructions=food_match.group(1) if food_match else None,
        ))

    return meds
