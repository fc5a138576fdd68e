# app/services/llm/extraction_sanitize.py
from typing import Any, Dict, List, Optional

from app.schemas.models import DoctorInfo, Explanation, MedicationExplanation, MedicationRecord

def _text(v: Any) -> str:
    if v is None or isinstance(v, (dict, list)):
        return ""
    return str(v).strip()

def _pick(d: Dict[str, Any], *keys: str) -> Any:
    # models mix snake_case and camelCase keys
    for k in keys:
        if d.get(k) is not None:
            return d[k]
    return None

def _dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}

def sanitize_medications(raw_meds: Any) -> List[MedicationRecord]:
    if not isinstance(raw_meds, list):
        return []

    out: List[MedicationRecord] = []
    seen = set()
    for m in raw_meds:
        if not isinstance(m, dict):
            continue
        rec = MedicationRecord(**{k: m.get(k) for k in ("name", "dosage", "frequency", "duration", "instructions")})
        if not rec.name:
            continue

        # de-duplicate by (name, dosage, frequency)
        key = (rec.name.lower(), (rec.dosage or "").lower(), (rec.frequency or "").lower())
        if key in seen:
            continue
        seen.add(key)
        out.append(rec)
    return out

def sanitize_doctor_info(raw: Any) -> Optional[DoctorInfo]:
    raw = _dict(raw)
    fields = {k: _text(raw.get(k)) or None for k in ("name", "clinic", "specialization")}
    if not any(fields.values()):
        return None
    return DoctorInfo(**fields)

def sanitize_explanation(raw: Any) -> Optional[Explanation]:
    raw = _dict(raw)

    raw_notes = _pick(raw, "medication_explanations", "medicationExplanations")
    med_notes: List[MedicationExplanation] = []
    for m in raw_notes if isinstance(raw_notes, list) else []:
        m = _dict(m)
        name = _text(m.get("name"))
        if not name:
            continue
        med_notes.append(MedicationExplanation(
            name=name,
            purpose=_text(m.get("purpose")) or None,
            important_notes=_text(_pick(m, "important_notes", "importantNotes")) or None,
        ))

    advice = _pick(raw, "important_advice", "importantAdvice")
    advice = [a for a in (_text(x) for x in advice) if a] if isinstance(advice, list) else []

    explanation = Explanation(
        summary=_text(raw.get("summary")) or None,
        condition_explanation=_text(_pick(raw, "condition_explanation", "conditionExplanation")) or None,
        medication_explanations=med_notes,
        important_advice=advice,
    )
    if not any(explanation.model_dump().values()):
        return None
    return explanation

def sanitize_extraction(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Provider output -> {patient_name, diagnosis, doctor_info, meds, reminders,
    explanation, additional_notes}.
    Missing or malformed fields are treated as absent.
    """
    raw = _dict(raw)
    # some models echo the nested shape {"extractedData": {...}, "explanation": {...}}
    data = raw.get("extractedData") if isinstance(raw.get("extractedData"), dict) else raw
    explanation = _dict(raw.get("explanation"))

    patient = data.get("patient_name")
    if not patient and isinstance(data.get("patientInfo"), dict):
        patient = data["patientInfo"].get("name")
    reminders = explanation.get("reminders") or raw.get("reminders")

    return {
        "patient_name": _text(patient) or "Unknown",
        "diagnosis": _text(data.get("diagnosis")) or None,
        "doctor_info": sanitize_doctor_info(_pick(data, "doctor_info", "doctorInfo")),
        "meds": sanitize_medications(data.get("medications") or data.get("meds")),
        "reminders": [r for r in reminders if isinstance(r, dict)] if isinstance(reminders, list) else [],
        "explanation": sanitize_explanation(explanation),
        "additional_notes": _text(_pick(data, "additional_notes", "additionalNotes")) or None,
    }
