# app/services/llm/extraction_schema.py

_TEXT = {"type": "string"}

PRESCRIPTION_SCHEMA = {
    "type": "object",
    "properties": {
        "patient_name": _TEXT,
        "diagnosis": _TEXT,
        "doctor_info": {
            "type": "object",
            "properties": {"name": _TEXT, "clinic": _TEXT, "specialization": _TEXT},
        },
        "medications": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": _TEXT,
                    "dosage": _TEXT,
                    "frequency": _TEXT,
                    "duration": _TEXT,
                    "instructions": _TEXT,
                },
                "required": ["name"],
            },
        },
        "additional_notes": _TEXT,
        # patient-friendly explanation of the prescription
        "explanation": {
            "type": "object",
            "properties": {
                "summary": {"type": "string", "description": "2-3 sentences"},
                "condition_explanation": _TEXT,
                "medication_explanations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"name": _TEXT, "purpose": _TEXT, "important_notes": _TEXT},
                        "required": ["name"],
                    },
                },
                "important_advice": {"type": "array", "items": _TEXT},
            },
        },
        # optional: model-suggested reminder times per medicine
        "reminders": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "medicine": _TEXT,
                    "times": {"type": "array", "items": {"type": "string", "description": "HH:MM 24-hour"}},
                    "withFood": {"type": "boolean"},
                    "duration": {"type": "string", "description": "Number of days"},
                },
                "required": ["medicine", "times"],
            },
        },
    },
    "required": ["medications"],
}
