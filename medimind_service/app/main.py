import logging

from fastapi import FastAPI
from app.core.config import APP_NAME, LOG_LEVEL
from app.api.routes_ai import router as ai_router
from app.api.routes_schedule import router as schedule_router
from app.api.routes_adherence import router as adherence_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="MediMind Prescription Companion", version="1.0")

app.include_router(ai_router)
app.include_router(schedule_router)
app.include_router(adherence_router)

@app.get("/health")
def health():
    return {"ok": True}
@app.get("/")
def root():
    return {"ok": True, "service": f"{APP_NAME} prescription companion"}
