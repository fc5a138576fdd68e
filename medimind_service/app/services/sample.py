# Built-in demo prescription, served by POST /ai/sample.

SAMPLE_PRESCRIPTION = {
    "patient_name": "John Smith",
    "diagnosis": "Upper Respiratory Tract Infection with Acute Bronchitis",
    "doctor_info": {
        "name": "Dr. Sarah Johnson, MD",
        "clinic": "City Medical Center",
        "specialization": "General Practice",
    },
    "meds": [
        {
            "name": "Paracetamol",
            "dosage": "500mg",
            "frequency": "Twice daily",
            "duration": "5 days",
            "instructions": "Take with food",
        },
        {
            "name": "Ibuprofen",
            "dosage": "400mg",
            "frequency": "Twice daily",
            "duration": "3 days",
            "instructions": "Take after meals",
        },
        {
            "name": "Oral Rehydration Solutions (ORS)",
            "dosage": "1 sachet",
            "frequency": "Twice daily",
            "duration": "3 days",
            "instructions": "Mix with water",
        },
    ],
    "reminders": [
        {"medicine": "Paracetamol", "times": ["08:00", "20:00"], "withFood": True, "duration": "5"},
        {"medicine": "Ibuprofen", "times": ["09:00", "21:00"], "withFood": True, "duration": "3"},
        {"medicine": "Oral Rehydration Solutions (ORS)", "times": ["10:00", "18:00"], "withFood": False, "duration": "3"},
    ],
    "additional_notes": "Rest well, increase fluid intake, return if symptoms worsen",
    "explanation": {
        "summary": (
            "You have an upper respiratory tract infection with bronchitis. "
            "The prescribed medications will help reduce symptoms and aid recovery."
        ),
        "condition_explanation": (
            "Upper respiratory tract infection affects your breathing passages and is "
            "commonly treated with pain relievers and supportive care."
        ),
        "medication_explanations": [
            {
                "name": "Paracetamol",
                "purpose": "Reduces fever and relieves pain",
                "important_notes": "Take with food to prevent stomach upset",
            },
            {
                "name": "Ibuprofen",
                "purpose": "Anti-inflammatory medication that reduces pain and swelling",
                "important_notes": "Take after meals to avoid stomach irritation",
            },
            {
                "name": "Oral Rehydration Solutions (ORS)",
                "purpose": "Helps maintain hydration and electrolyte balance",
                "important_notes": "Mix with clean water as directed",
            },
        ],
        "important_advice": ["Get plenty of rest", "Drink lots of fluids", "Return if symptoms worsen"],
    },
}
