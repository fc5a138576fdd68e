from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.api.deps import load_prescription
from app.schemas.models import AdherenceSummary, MarkTakenRequest, TakenEvent
from app.services.adherence import compute_adherence
from app.services.adherence_store import append_event, list_events
from app.services.security import verify_internal_service

router = APIRouter(prefix="/adherence", tags=["adherence"])

@router.post("/mark", response_model=TakenEvent)
def mark(req: MarkTakenRequest, _=Depends(verify_internal_service)):
    load_prescription(req.prescription_id)  # 404 for unknown prescriptions

    ev = TakenEvent(
        prescription_id=req.prescription_id,
        medicine=req.medicine,
        scheduled_time=req.time,
        taken_at=req.taken_at or datetime.now(),
    )
    append_event(ev)
    return ev

@router.get("/{prescription_id}", response_model=List[TakenEvent])
def events(prescription_id: str):
    return list_events(prescription_id)

@router.get("/{prescription_id}/summary", response_model=AdherenceSummary)
def summary(prescription_id: str, today: Optional[date] = None):
    rx = load_prescription(prescription_id)
    return compute_adherence(
        rx.reminders,
        rx.start_date,
        list_events(prescription_id),
        today or date.today(),
        prescription_id=prescription_id,
    )
