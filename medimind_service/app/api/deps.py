# app/api/deps.py
from datetime import date, datetime
from typing import List

from fastapi import HTTPException

from app.agent.graph import memory, prescription_graph
from app.schemas.models import (
    DoctorInfo,
    Explanation,
    MedicationRecord,
    PrescriptionResponse,
    PrescriptionSummary,
    Reminder,
)

def graph_config(prescription_id: str):
    return {"configurable": {"thread_id": prescription_id}}

def prescription_from_state(state) -> PrescriptionResponse:
    return PrescriptionResponse(
        prescription_id=state["prescription_id"],
        patient_name=state.get("patient_name") or "Unknown",
        diagnosis=state.get("diagnosis") or None,
        doctor_info=DoctorInfo(**state["doctor_info"]) if state.get("doctor_info") else None,
        medications=[MedicationRecord(**m) for m in (state.get("meds") or [])],
        reminders=[Reminder(**r) for r in (state.get("reminders") or [])],
        explanation=Explanation(**state["explanation"]) if state.get("explanation") else None,
        additional_notes=state.get("additional_notes") or None,
        created_at=datetime.fromisoformat(state["created_at"]),
        start_date=date.fromisoformat(state["start_date"]),
    )

def load_prescription(prescription_id: str) -> PrescriptionResponse:
    snap = prescription_graph.get_state(graph_config(prescription_id))
    state = snap.values or {}
    if not state.get("prescription_id"):
        raise HTTPException(status_code=404, detail="Prescription not found")
    return prescription_from_state(state)

def thread_ids_newest_first() -> List[str]:
    """
    Every stored thread id, most recent first.

    Checkpoints come back newest first across all threads, and a prescription's
    thread is never written again after analysis, so first sight of a thread id
    orders prescriptions by creation.
    """
    ids: List[str] = []
    seen = set()
    checkpoints = memory.list(None)
    try:
        for cp in checkpoints:
            thread_id = cp.config["configurable"]["thread_id"]
            if thread_id not in seen:
                seen.add(thread_id)
                ids.append(thread_id)
    finally:
        # release the saver's cursor (and its lock) before any get_state call
        checkpoints.close()
    return ids

def list_prescriptions(limit: int) -> List[PrescriptionSummary]:
    out: List[PrescriptionSummary] = []
    for thread_id in thread_ids_newest_first():
        if len(out) >= limit:
            break
        state = prescription_graph.get_state(graph_config(thread_id)).values or {}
        # analyses that failed before the remind step are not prescriptions
        if not state.get("prescription_id") or "reminders" not in state:
            continue
        rx = prescription_from_state(state)
        out.append(PrescriptionSummary(
            prescription_id=rx.prescription_id,
            patient_name=rx.patient_name,
            diagnosis=rx.diagnosis,
            medication_count=len(rx.medications),
            created_at=rx.created_at,
            start_date=rx.start_date,
        ))
    return out
