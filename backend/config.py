import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_PATH = os.getenv("TASKS_DB_PATH", "tasks.db")

DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "UTC")
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en_US")
DEFAULT_DURATION_MINUTES = int(os.getenv("DEFAULT_DURATION_MINUTES", "60"))

# Working-hours window used by the slot suggester (local wall-clock hours)
WORKDAY_START_HOUR = int(os.getenv("WORKDAY_START_HOUR", "9"))
WORKDAY_END_HOUR = int(os.getenv("WORKDAY_END_HOUR", "17"))
SLOT_STEP_MINUTES = int(os.getenv("SLOT_STEP_MINUTES", "30"))
SLOT_WINDOW_DAYS = int(os.getenv("SLOT_WINDOW_DAYS", "7"))
MAX_SLOT_SUGGESTIONS = int(os.getenv("MAX_SLOT_SUGGESTIONS", "3"))

RECURRENCE_HORIZON_DAYS = int(os.getenv("RECURRENCE_HORIZON_DAYS", "365"))
MAX_RECURRENCE_OCCURRENCES = int(os.getenv("MAX_RECURRENCE_OCCURRENCES", "1000"))

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
