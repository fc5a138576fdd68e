from typing import Any, Dict, List, TypedDict

class AgentState(TypedDict, total=False):
    # identity (prescription_id doubles as LangGraph thread_id)
    prescription_id: str
    created_at: str   # ISO timestamp of the analysis
    start_date: str   # ISO date the course starts

    # inputs
    extracted_text: str
    image_base64: str
    patient_name: str
    diagnosis: str
    doctor_info: Dict[str, Any]
    meds: List[Dict[str, Any]]                 # list of MedicationRecord dicts
    suggested_reminders: List[Dict[str, Any]]  # raw provider reminders, if any
    explanation: Dict[str, Any]                # Explanation dict from the provider
    additional_notes: str

    # outputs
    reminders: List[Dict[str, Any]]  # list of Reminder dicts
    audit: List[Dict[str, Any]]
