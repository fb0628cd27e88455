"""
Flight model - one row per scheduled flight on the board.

Design notes:
- Integer surrogate key assigned by the database
- Unique index on flight_number; the index, not an in-memory check,
  is what keeps two concurrent writers from both claiming a number
- Status is NOT a column: it depends on the current instant and is
  derived on every read (see services.status_clock)
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column

from flightboard.models.base import Base, UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FlightStatus(str, Enum):
    """
    Lifecycle state derived from scheduled time and the current instant.

    - SCHEDULED: more than 30 minutes before departure
    - BOARDING: within the 30 minutes before departure
    - DEPARTED: from departure up to and including 60 minutes after
    - LANDED: more than 60 minutes after departure
    """
    SCHEDULED = 'Scheduled'
    BOARDING = 'Boarding'
    DEPARTED = 'Departed'
    LANDED = 'Landed'


class Flight(Base):
    """A flight on the board."""

    __tablename__ = 'flights'

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    flight_number: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment='Flight designator (e.g., FB1002)'
    )

    airline: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default='Generic',
    )

    origin: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default='TLV',
        comment='Origin airport code'
    )

    destination: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment='Destination airport code'
    )

    scheduled_time: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        index=True,  # Board ordering
        comment='Scheduled departure (UTC)'
    )

    estimated_time: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime,
        nullable=True,
        comment='Estimated departure (UTC)'
    )

    gate: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
    )

    is_arrival: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    remarks: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    last_updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        comment='Last create/update timestamp (UTC)'
    )

    __table_args__ = (
        Index('ux_flights_flight_number', 'flight_number', unique=True),
    )

    def __repr__(self) -> str:
        return f'<Flight {self.id} {self.flight_number} -> {self.destination} @ {self.scheduled_time}>'
