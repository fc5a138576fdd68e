import os
from pathlib import Path
from app.core.env import load_env

load_env()

SERVICE_DIR = Path(__file__).resolve().parents[2]  # medimind_service/

APP_NAME = os.getenv("APP_NAME", "medimind")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# sqlite file shared by the graph checkpointer and the taken-event log
DB_PATH = Path(os.getenv("MEDIMIND_DB_PATH", str(SERVICE_DIR / "app" / "db" / "medimind.db")))

CALENDAR_UID_DOMAIN = os.getenv("CALENDAR_UID_DOMAIN", f"{APP_NAME}.com")
CALENDAR_FILENAME = f"{APP_NAME}-medication-schedule.ics"
