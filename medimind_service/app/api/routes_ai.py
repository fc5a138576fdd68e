# app/api/routes_ai.py
import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.agent.graph import prescription_graph
from app.api.deps import graph_config, list_prescriptions, load_prescription, prescription_from_state
from app.schemas.models import (
    AnalyzeRequest,
    AuditResponse,
    PrescriptionResponse,
    PrescriptionSummary,
    SampleRequest,
)
from app.services.extraction import ExtractionError
from app.services.ollama_client import OllamaError
from app.services.sample import SAMPLE_PRESCRIPTION
from app.services.security import verify_internal_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

def _new_prescription_id() -> str:
    return "rx_" + uuid.uuid4().hex

def _run_analysis(initial: Dict[str, Any], start: Optional[date]) -> PrescriptionResponse:
    prescription_id = _new_prescription_id()
    now = datetime.now()
    initial_state = {
        "prescription_id": prescription_id,
        "created_at": now.isoformat(),
        "start_date": (start or now.date()).isoformat(),
        "audit": [],
        **initial,
    }

    try:
        result = prescription_graph.invoke(initial_state, config=graph_config(prescription_id))
    except (OllamaError, ExtractionError) as e:
        logger.warning("Prescription analysis failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Failed to analyze prescription: {e}") from e

    if "reminders" not in result:
        raise HTTPException(status_code=500, detail="Reminders missing from graph state.")

    logger.info("Stored prescription %s with %d reminder(s)", prescription_id, len(result["reminders"]))
    return prescription_from_state(result)

@router.post("/analyze", response_model=PrescriptionResponse)
def ai_analyze(req: AnalyzeRequest, _=Depends(verify_internal_service)):
    if not req.meds and not (req.extracted_text or "").strip() and not (req.image_base64 or "").strip():
        raise HTTPException(status_code=400, detail="Provide meds[], extracted_text or image_base64.")

    initial = {
        "extracted_text": req.extracted_text or "",
        "image_base64": req.image_base64 or "",
        "meds": [m.model_dump() for m in (req.meds or [])],
        "patient_name": req.patient_name or "Unknown",
        "diagnosis": req.diagnosis or "",
    }
    return _run_analysis(initial, req.start_date)

@router.post("/sample", response_model=PrescriptionResponse)
def ai_sample(req: Optional[SampleRequest] = None, _=Depends(verify_internal_service)):
    initial = {
        "patient_name": SAMPLE_PRESCRIPTION["patient_name"],
        "diagnosis": SAMPLE_PRESCRIPTION["diagnosis"],
        "meds": [dict(m) for m in SAMPLE_PRESCRIPTION["meds"]],
        "suggested_reminders": [dict(r) for r in SAMPLE_PRESCRIPTION["reminders"]],
        "doctor_info": dict(SAMPLE_PRESCRIPTION["doctor_info"]),
        "explanation": dict(SAMPLE_PRESCRIPTION["explanation"]),
        "additional_notes": SAMPLE_PRESCRIPTION["additional_notes"],
    }
    return _run_analysis(initial, req.start_date if req else None)

@router.get("/prescriptions", response_model=List[PrescriptionSummary])
def ai_prescriptions(limit: int = Query(10, ge=1, le=100)):
    return list_prescriptions(limit)

@router.get("/prescriptions/{prescription_id}", response_model=PrescriptionResponse)
def ai_prescription(prescription_id: str):
    return load_prescription(prescription_id)

@router.get("/audit", response_model=AuditResponse)
def ai_audit(prescription_id: str):
    snap = prescription_graph.get_state(graph_config(prescription_id))
    state = snap.values or {}
    if not state.get("prescription_id"):
        raise HTTPException(status_code=404, detail="Prescription not found")
    return AuditResponse(prescription_id=prescription_id, audit=state.get("audit", []))
