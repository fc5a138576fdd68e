# app/agent/nodes.py
import logging
from typing import Any, Dict

from app.agent.state import AgentState
from app.core import llm_config
from app.schemas.models import MedicationRecord
from app.services.extraction import ExtractionError, simple_extract_meds
from app.services.llm.extraction import llm_extract_prescription
from app.services.ollama_client import OllamaError
from app.services.reminders import reminders_for_prescription, usable_suggestions

logger = logging.getLogger(__name__)

def _audit(state: AgentState, event: str, extra: Dict[str, Any] | None = None) -> Dict[str, Any]:
    audit = list(state.get("audit") or [])
    audit.append({"event": event, **(extra or {})})
    return {"audit": audit}

def _dumped(model) -> Dict[str, Any]:
    return model.model_dump() if model is not None else {}

def _from_provider(extracted: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "meds": [m.model_dump() for m in extracted["meds"]],
        "suggested_reminders": extracted.get("reminders") or [],
        "patient_name": extracted.get("patient_name") or "Unknown",
        "diagnosis": extracted.get("diagnosis") or "",
        "doctor_info": _dumped(extracted.get("doctor_info")),
        "explanation": _dumped(extracted.get("explanation")),
        "additional_notes": extracted.get("additional_notes") or "",
    }

def extract_node(state: AgentState) -> Dict[str, Any]:
    # never keep the raw image in checkpoints
    out: Dict[str, Any] = {"image_base64": ""}

    if state.get("meds"):
        return {**out, **_audit(state, "extract.skip", {"reason": "meds already provided"})}

    image = (state.get("image_base64") or "").strip()
    if image:
        if not llm_config.USE_LLM_EXTRACTION:
            raise ExtractionError("Image analysis requires LLM extraction to be enabled.")
        # no text fallback for images: provider failures propagate
        extracted = llm_extract_prescription(image_b64=image)
        out.update(_from_provider(extracted))
        return {**out, **_audit(state, "extract.llm.image.done", {"count": len(extracted["meds"])})}

    ocr = (state.get("extracted_text") or "").strip()
    if ocr and llm_config.USE_LLM_EXTRACTION:
        try:
            extracted = llm_extract_prescription(ocr_text=ocr)
            out.update(_from_provider(extracted))
            return {**out, **_audit(state, "extract.llm.done", {"count": len(extracted["meds"])})}
        except OllamaError as e:
            logger.warning("LLM extraction failed, falling back to heuristic: %s", e)
            meds = simple_extract_meds(ocr)
            out["meds"] = [m.model_dump() for m in meds]
            return {**out, **_audit(state, "extract.fallback.done", {"count": len(meds), "error": str(e)})}

    meds = simple_extract_meds(ocr)
    out["meds"] = [m.model_dump() for m in meds]
    return {**out, **_audit(state, "extract.heuristic.done", {"count": len(meds)})}

def remind_node(state: AgentState) -> Dict[str, Any]:
    meds = [MedicationRecord(**m) for m in (state.get("meds") or [])]
    suggested = usable_suggestions(state.get("suggested_reminders"))
    reminders = reminders_for_prescription(meds, suggested)
    if not reminders:
        logger.info("Prescription %s has no medications; schedule is empty", state.get("prescription_id"))

    return {
        "reminders": [r.model_dump() for r in reminders],
        **_audit(state, "remind.done", {
            "count": len(reminders),
            "source": "provider" if suggested else "normalizer",
        }),
    }
