from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

SAFETY_NOTE = (
    "Not medical advice. This service organizes prescription details into reminders. "
    "Always confirm instructions with a doctor/pharmacist."
)

# window days never fall after `today`
DayState = Literal["BEFORE_START", "TAKEN", "NOT_TAKEN"]


class FrequencyKind(str, Enum):
    ONCE = "ONCE"
    TWICE = "TWICE"
    THRICE = "THRICE"
    CUSTOM = "CUSTOM"


class MedicationRecord(BaseModel):
    """One medication line as returned by the extraction provider (free text)."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    instructions: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_text(cls, v: Any) -> str:
        if v is None or isinstance(v, (dict, list)):
            return ""
        return str(v).strip()

    @field_validator("dosage", "frequency", "duration", "instructions", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        # providers sometimes return numbers ("duration": 5) or nested junk
        if v is None or isinstance(v, (dict, list)):
            return None
        v = str(v).strip()
        return v or None


class NormalizedFrequency(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: FrequencyKind
    times: List[str]
    with_food: bool = False


class Reminder(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    medicine: str
    times: List[str] = Field(..., min_length=1)  # "HH:MM", ascending, unique
    with_food: bool = Field(default=False, alias="withFood")
    duration_days: int = Field(default=7, alias="durationDays", ge=1)


class Occurrence(BaseModel):
    model_config = ConfigDict(frozen=True)

    medicine: str
    scheduled_at: datetime  # naive, host-local
    day_index: int
    reminder_index: int
    time_index: int
    with_food: bool = False
    duration_days: int = 1


class TakenEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    prescription_id: str
    medicine: str
    scheduled_time: str  # "HH:MM" or a named slot
    taken_at: datetime
    taken: bool = True


class DayAdherence(BaseModel):
    day: date
    taken: int
    expected: int
    is_valid: bool
    state: DayState


class AdherenceSummary(BaseModel):
    prescription_id: Optional[str] = None
    per_day: List[DayAdherence]
    daily_expected: int
    valid_days: int
    total_expected: int
    total_taken: int
    rate: int


class CalendarEvent(BaseModel):
    uid: str
    title: str
    start: datetime
    end: datetime
    description: str


class CalendarEventsResponse(BaseModel):
    events: List[CalendarEvent]


class AnalyzeRequest(BaseModel):
    extracted_text: Optional[str] = None   # OCR output (if available)
    image_base64: Optional[str] = None     # raw prescription image
    meds: Optional[List[MedicationRecord]] = None  # structured meds (preferred)
    patient_name: Optional[str] = None
    diagnosis: Optional[str] = None
    start_date: Optional[date] = None      # defaults to the analysis day


class SampleRequest(BaseModel):
    start_date: Optional[date] = None


class DoctorInfo(BaseModel):
    name: Optional[str] = None
    clinic: Optional[str] = None
    specialization: Optional[str] = None


class MedicationExplanation(BaseModel):
    name: str
    purpose: Optional[str] = None
    important_notes: Optional[str] = None


class Explanation(BaseModel):
    """Patient-facing explanation written by the extraction provider."""
    summary: Optional[str] = None
    condition_explanation: Optional[str] = None
    medication_explanations: List[MedicationExplanation] = Field(default_factory=list)
    important_advice: List[str] = Field(default_factory=list)


class PrescriptionResponse(BaseModel):
    prescription_id: str
    patient_name: str = "Unknown"
    diagnosis: Optional[str] = None
    doctor_info: Optional[DoctorInfo] = None
    medications: List[MedicationRecord]
    reminders: List[Reminder]
    explanation: Optional[Explanation] = None
    additional_notes: Optional[str] = None
    created_at: datetime
    start_date: date
    safety_note: str = SAFETY_NOTE


class PrescriptionSummary(BaseModel):
    prescription_id: str
    patient_name: str
    diagnosis: Optional[str] = None
    medication_count: int
    created_at: datetime
    start_date: date


class ScheduledDose(Occurrence):
    display_time: str  # "8:00 PM"


class TodayScheduleResponse(BaseModel):
    prescription_id: str
    day: date
    occurrences: List[ScheduledDose]


class MarkTakenRequest(BaseModel):
    prescription_id: str
    medicine: str
    time: str
    taken_at: Optional[datetime] = None  # defaults to now

    @field_validator("prescription_id")
    @classmethod
    def _real_id(cls, v: str) -> str:
        v = (v or "").strip()
        if not v or v == "undefined":
            raise ValueError("Invalid prescription ID")
        return v


class AuditResponse(BaseModel):
    prescription_id: str
    audit: List[Dict[str, Any]]
