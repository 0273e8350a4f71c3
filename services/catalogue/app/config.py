"""
Configuration for the Catalogue service.

All settings are read from environment variables once at import time.
"""
import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

# Gemini text-generation endpoint used by the AI assist client
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL   = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
GENAI_TIMEOUT  = float(os.getenv("GENAI_TIMEOUT", "30"))  # seconds

# Calendar days and years in reports are evaluated in the shop's timezone
REPORT_TIMEZONE = ZoneInfo(os.getenv("REPORT_TIMEZONE", "Asia/Manila"))

SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")
LOG_LEVEL        = os.getenv("LOG_LEVEL", "INFO").upper()


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(moment: datetime) -> datetime:
    """Interpret a naive datetime as local time in REPORT_TIMEZONE."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=REPORT_TIMEZONE)
    return moment
