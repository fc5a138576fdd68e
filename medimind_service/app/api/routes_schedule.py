# app/api/routes_schedule.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from app.api.deps import load_prescription
from app.core.config import CALENDAR_FILENAME
from app.schemas.models import CalendarEventsResponse, ScheduledDose, TodayScheduleResponse
from app.services.calendar_export import to_calendar_document, to_event_list
from app.services.schedule import full_course, todays_occurrences
from app.utils.clock import format_12h

router = APIRouter(tags=["schedule"])

@router.get("/schedule/{prescription_id}/today", response_model=TodayScheduleResponse)
def today_schedule(prescription_id: str, on: Optional[date] = None):
    rx = load_prescription(prescription_id)
    day = on or date.today()
    return TodayScheduleResponse(
        prescription_id=prescription_id,
        day=day,
        occurrences=[
            ScheduledDose(**o.model_dump(), display_time=format_12h(o.scheduled_at.strftime("%H:%M")))
            for o in todays_occurrences(rx.reminders, rx.start_date, day)
        ],
    )

@router.get("/calendar/{prescription_id}", response_model=CalendarEventsResponse)
def calendar_events(prescription_id: str):
    rx = load_prescription(prescription_id)
    occurrences = full_course(rx.reminders, rx.start_date)
    return CalendarEventsResponse(events=to_event_list(occurrences, prescription_id))

@router.get("/calendar/{prescription_id}/download")
def calendar_download(prescription_id: str):
    rx = load_prescription(prescription_id)
    if not rx.reminders:
        raise HTTPException(status_code=400, detail="No reminders found")

    body = to_calendar_document(full_course(rx.reminders, rx.start_date), prescription_id)
    return Response(
        content=body,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CALENDAR_FILENAME}"'},
    )
