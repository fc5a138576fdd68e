from datetime import date, datetime, timedelta

from app.core import llm_config
from app.schemas.models import MedicationRecord
from app.services.llm.extraction_sanitize import sanitize_extraction
from app.services.ollama_client import OllamaError

TODAY = date.today()


def _sample(client, auth, start=TODAY):
    r = client.post("/ai/sample", json={"start_date": start.isoformat()}, headers=auth)
    assert r.status_code == 200, r.text
    return r.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_write_endpoints_need_internal_key(client):
    assert client.post("/ai/sample").status_code == 422
    assert client.post("/ai/sample", headers={"X-Internal-Key": "nope"}).status_code == 401


def test_sample_prescription(client, auth):
    rx = _sample(client, auth)
    assert rx["prescription_id"].startswith("rx_")
    assert rx["patient_name"] == "John Smith"
    assert rx["start_date"] == TODAY.isoformat()
    assert [r["medicine"] for r in rx["reminders"]] == [
        "Paracetamol",
        "Ibuprofen",
        "Oral Rehydration Solutions (ORS)",
    ]
    assert rx["reminders"][0] == {"medicine": "Paracetamol", "times": ["08:00", "20:00"], "withFood": True, "durationDays": 5}

    again = client.get(f"/ai/prescriptions/{rx['prescription_id']}").json()
    assert again["reminders"] == rx["reminders"]


def test_sample_without_body_starts_today(client, auth):
    r = client.post("/ai/sample", headers=auth)
    assert r.status_code == 200
    assert r.json()["start_date"] == TODAY.isoformat()


def test_unknown_prescription(client):
    assert client.get("/ai/prescriptions/rx_missing").status_code == 404
    assert client.get("/calendar/rx_missing").status_code == 404
    assert client.get("/adherence/rx_missing/summary").status_code == 404


def test_calendar_events_json(client, auth):
    rx = _sample(client, auth, start=date(2026, 3, 2))
    events = client.get(f"/calendar/{rx['prescription_id']}").json()["events"]

    assert len(events) == 5 * 2 + 3 * 2 + 3 * 2
    assert events[0]["title"] == "Take Paracetamol"
    assert events[0]["start"] == "2026-03-02T08:00:00"
    assert events[0]["description"] == "Medication: Paracetamol\nWith food: Yes\nDay 1 of 5"


def test_calendar_download(client, auth):
    rx = _sample(client, auth)
    url = f"/calendar/{rx['prescription_id']}/download"
    first = client.get(url)
    second = client.get(url)

    assert first.status_code == 200
    assert first.headers["content-type"].startswith("text/calendar")
    assert 'filename="medimind-medication-schedule.ics"' in first.headers["content-disposition"]
    assert first.text.count("BEGIN:VEVENT") == 22

    def uids(text):
        return [ln for ln in text.replace("\r\n ", "").split("\r\n") if ln.startswith("UID:")]

    assert uids(first.text) == uids(second.text)
    assert uids(first.text)[0] == f"UID:{rx['prescription_id']}-0-0-0@medimind.com"


def test_today_schedule(client, auth):
    start = TODAY - timedelta(days=4)
    rx = _sample(client, auth, start=start)
    pid = rx["prescription_id"]

    first_day = client.get(f"/schedule/{pid}/today", params={"on": start.isoformat()}).json()
    assert len(first_day["occurrences"]) == 6

    today = client.get(f"/schedule/{pid}/today").json()
    assert today["day"] == TODAY.isoformat()
    assert [(o["medicine"], o["day_index"]) for o in today["occurrences"]] == [("Paracetamol", 4), ("Paracetamol", 4)]


def test_analyze_text_with_heuristic_extraction(client, auth):
    body = {"extracted_text": "Amoxicillin 500mg twice daily for 7 days, take with food"}
    r = client.post("/ai/analyze", json=body, headers=auth)
    assert r.status_code == 200, r.text
    rx = r.json()

    assert rx["medications"][0]["name"] == "Amoxicillin"
    assert rx["reminders"] == [{"medicine": "Amoxicillin", "times": ["08:00", "20:00"], "withFood": True, "durationDays": 7}]

    events = client.get(f"/calendar/{rx['prescription_id']}").json()["events"]
    assert len(events) == 14

    audit = client.get("/ai/audit", params={"prescription_id": rx["prescription_id"]}).json()["audit"]
    assert [a["event"] for a in audit] == ["extract.heuristic.done", "remind.done"]


def test_analyze_structured_meds(client, auth):
    body = {"meds": [{"name": "Metformin", "frequency": "three times daily", "duration": "30 days"}]}
    rx = client.post("/ai/analyze", json=body, headers=auth).json()
    assert rx["reminders"][0]["times"] == ["08:00", "14:00", "20:00"]
    assert rx["reminders"][0]["durationDays"] == 30


def test_analyze_requires_input(client, auth):
    assert client.post("/ai/analyze", json={}, headers=auth).status_code == 400


def test_analyze_without_medications(client, auth):
    rx = client.post("/ai/analyze", json={"extracted_text": "Rest well and drink fluids"}, headers=auth).json()
    pid = rx["prescription_id"]
    assert rx["reminders"] == []

    assert client.get(f"/calendar/{pid}/download").status_code == 400
    assert client.get(f"/calendar/{pid}").json() == {"events": []}

    summary = client.get(f"/adherence/{pid}/summary").json()
    assert summary["daily_expected"] == 1
    assert summary["rate"] == 0


def test_analyze_image_provider_failure(client, auth, monkeypatch):
    def boom(**kwargs):
        raise OllamaError("Ollama 500: model not found")

    monkeypatch.setattr(llm_config, "USE_LLM_EXTRACTION", True)
    monkeypatch.setattr("app.agent.nodes.llm_extract_prescription", boom)

    r = client.post("/ai/analyze", json={"image_base64": "aGVsbG8="}, headers=auth)
    assert r.status_code == 502


def test_analyze_image_needs_llm(client, auth):
    r = client.post("/ai/analyze", json={"image_base64": "aGVsbG8="}, headers=auth)
    assert r.status_code == 502


def test_analyze_image_uses_provider_reminders(client, auth, monkeypatch):
    def fake_extract(ocr_text=None, image_b64=None):
        assert image_b64 == "aGVsbG8="
        return {
            "patient_name": "Jane Doe",
            "diagnosis": "Influenza",
            "meds": [MedicationRecord(name="Oseltamivir", frequency="Twice daily", duration="5 days")],
            "reminders": [{"medicine": "Oseltamivir", "times": ["night", "morning"], "withFood": False, "duration": "5"}],
        }

    monkeypatch.setattr(llm_config, "USE_LLM_EXTRACTION", True)
    monkeypatch.setattr("app.agent.nodes.llm_extract_prescription", fake_extract)

    rx = client.post("/ai/analyze", json={"image_base64": "aGVsbG8="}, headers=auth).json()
    assert rx["patient_name"] == "Jane Doe"
    assert rx["diagnosis"] == "Influenza"
    assert rx["reminders"] == [{"medicine": "Oseltamivir", "times": ["08:00", "20:00"], "withFood": False, "durationDays": 5}]


def test_analyze_text_falls_back_when_provider_fails(client, auth, monkeypatch):
    def boom(**kwargs):
        raise OllamaError("Ollama unreachable")

    monkeypatch.setattr(llm_config, "USE_LLM_EXTRACTION", True)
    monkeypatch.setattr("app.agent.nodes.llm_extract_prescription", boom)

    r = client.post("/ai/analyze", json={"extracted_text": "Cetirizine 10mg at night"}, headers=auth)
    assert r.status_code == 200
    rx = r.json()
    assert rx["reminders"][0]["medicine"] == "Cetirizine"

    audit = client.get("/ai/audit", params={"prescription_id": rx["prescription_id"]}).json()["audit"]
    assert audit[0]["event"] == "extract.fallback.done"


def test_mark_taken_and_summary(client, auth):
    rx = _sample(client, auth)
    pid = rx["prescription_id"]

    r = client.post("/adherence/mark", json={"prescription_id": pid, "medicine": "Paracetamol", "time": "08:00"}, headers=auth)
    assert r.status_code == 200
    assert r.json()["taken"] is True

    summary = client.get(f"/adherence/{pid}/summary").json()
    assert summary["daily_expected"] == 6
    assert summary["valid_days"] == 1
    assert summary["total_expected"] == 6
    assert summary["total_taken"] == 1
    assert summary["rate"] == 17
    assert summary["per_day"][-1]["state"] == "TAKEN"
    assert [d["state"] for d in summary["per_day"][:6]] == ["BEFORE_START"] * 6


def test_adherence_log_is_in_arrival_order(client, auth):
    pid = _sample(client, auth, start=TODAY - timedelta(days=2))["prescription_id"]
    stamps = [
        datetime.combine(TODAY, datetime.min.time()).replace(hour=20),
        datetime.combine(TODAY - timedelta(days=2), datetime.min.time()).replace(hour=8),
        datetime.combine(TODAY - timedelta(days=1), datetime.min.time()).replace(hour=9),
    ]
    for ts in stamps:
        body = {"prescription_id": pid, "medicine": "Ibuprofen", "time": "morning", "taken_at": ts.isoformat()}
        assert client.post("/adherence/mark", json=body, headers=auth).status_code == 200

    log = client.get(f"/adherence/{pid}").json()
    assert [datetime.fromisoformat(e["taken_at"]) for e in log] == stamps
    assert {e["scheduled_time"] for e in log} == {"morning"}

    summary = client.get(f"/adherence/{pid}/summary", params={"today": TODAY.isoformat()}).json()
    assert summary["total_expected"] == 18
    assert summary["total_taken"] == 3
    assert summary["rate"] == 17


def test_mark_taken_rejects_bad_prescription(client, auth):
    body = {"prescription_id": "undefined", "medicine": "Paracetamol", "time": "08:00"}
    assert client.post("/adherence/mark", json=body, headers=auth).status_code == 422

    body["prescription_id"] = "rx_missing"
    assert client.post("/adherence/mark", json=body, headers=auth).status_code == 404


def test_sample_carries_explanation_and_doctor_details(client, auth):
    rx = _sample(client, auth)
    assert rx["doctor_info"] == {
        "name": "Dr. Sarah Johnson, MD",
        "clinic": "City Medical Center",
        "specialization": "General Practice",
    }
    assert rx["additional_notes"] == "Rest well, increase fluid intake, return if symptoms worsen"

    explanation = rx["explanation"]
    assert explanation["summary"].startswith("You have an upper respiratory tract infection")
    assert [m["name"] for m in explanation["medication_explanations"]] == [r["medicine"] for r in rx["reminders"]]
    assert explanation["important_advice"] == ["Get plenty of rest", "Drink lots of fluids", "Return if symptoms worsen"]

    stored = client.get(f"/ai/prescriptions/{rx['prescription_id']}").json()
    assert stored["explanation"] == explanation
    assert stored["doctor_info"] == rx["doctor_info"]


def test_analyze_keeps_provider_explanation(client, auth, monkeypatch):
    def fake_extract(ocr_text=None, image_b64=None):
        return sanitize_extraction({
            "medications": [{"name": "Cetirizine", "frequency": "once daily"}],
            "doctor_info": {"clinic": "Northside Clinic"},
            "explanation": {"summary": "Seasonal allergy.", "important_advice": ["Avoid pollen"]},
        })

    monkeypatch.setattr(llm_config, "USE_LLM_EXTRACTION", True)
    monkeypatch.setattr("app.agent.nodes.llm_extract_prescription", fake_extract)

    rx = client.post("/ai/analyze", json={"extracted_text": "Cetirizine 10mg"}, headers=auth).json()
    assert rx["doctor_info"] == {"name": None, "clinic": "Northside Clinic", "specialization": None}
    assert rx["explanation"]["summary"] == "Seasonal allergy."
    assert rx["explanation"]["medication_explanations"] == []
    assert rx["explanation"]["important_advice"] == ["Avoid pollen"]
    assert rx["additional_notes"] is None


def test_structured_meds_have_no_explanation(client, auth):
    rx = client.post("/ai/analyze", json={"meds": [{"name": "Metformin"}]}, headers=auth).json()
    assert rx["explanation"] is None
    assert rx["doctor_info"] is None


def test_prescription_history_is_newest_first(client, auth, monkeypatch):
    ids = [_sample(client, auth)["prescription_id"] for _ in range(11)]

    # a failed analysis leaves no prescription behind
    monkeypatch.setattr(llm_config, "USE_LLM_EXTRACTION", False)
    assert client.post("/ai/analyze", json={"image_base64": "aGVsbG8="}, headers=auth).status_code == 502

    recent = client.get("/ai/prescriptions", params={"limit": 3}).json()
    assert [p["prescription_id"] for p in recent] == ids[:-4:-1]
    assert recent[0]["patient_name"] == "John Smith"
    assert recent[0]["medication_count"] == 3

    history = client.get("/ai/prescriptions").json()
    assert [p["prescription_id"] for p in history] == ids[:0:-1]
    created = [p["created_at"] for p in history]
    assert created == sorted(created, reverse=True)


def test_prescription_history_limit_is_validated(client):
    assert client.get("/ai/prescriptions", params={"limit": 0}).status_code == 422


def test_today_schedule_shows_clock_labels(client, auth):
    pid = _sample(client, auth)["prescription_id"]
    doses = client.get(f"/schedule/{pid}/today").json()["occurrences"]
    assert [d["display_time"] for d in doses] == ["8:00 AM", "8:00 PM", "9:00 AM", "9:00 PM", "10:00 AM", "6:00 PM"]
