# booking_api/core/timezone_utils.py
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from .config import settings


def get_today(tz_name: Optional[str] = None) -> date:
    """Current date in the business timezone, or the server's local date."""
    name = tz_name or settings.business_timezone
    if name:
        return datetime.now(ZoneInfo(name)).date()
    return date.today()
