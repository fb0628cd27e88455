"""
Flight lifecycle status derivation.

Status is a pure function of the scheduled time and the current instant.
It is recomputed on every read and never cached, so a board refreshed
at any moment reflects that moment.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from flightboard.config import config
from flightboard.models.flight import FlightStatus

BOARDING_WINDOW = timedelta(minutes=config.status.boarding_minutes)
DEPARTED_WINDOW = timedelta(minutes=config.status.departed_minutes)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so naive and aware values compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_status(
    scheduled_utc: datetime,
    now_utc: Optional[datetime] = None,
) -> FlightStatus:
    """
    Determine flight status for the given instant.

    Windows, relative to the scheduled time s:
    - now < s - 30min            → SCHEDULED
    - s - 30min <= now < s       → BOARDING
    - s <= now <= s + 60min      → DEPARTED (both ends inclusive)
    - now > s + 60min            → LANDED
    """
    scheduled = _as_utc(scheduled_utc)
    now = _as_utc(now_utc) if now_utc is not None else datetime.now(timezone.utc)

    if now < scheduled - BOARDING_WINDOW:
        return FlightStatus.SCHEDULED
    if now < scheduled:
        return FlightStatus.BOARDING
    if now <= scheduled + DEPARTED_WINDOW:
        return FlightStatus.DEPARTED
    return FlightStatus.LANDED
