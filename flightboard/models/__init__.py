"""
Database models for FlightBoard.

A single hot table of flights, keyed by an integer id with a unique
index on flight number. Lifecycle status is derived, never stored.
"""

from flightboard.models.base import (
    Base,
    UTCDateTime,
    engine,
    SessionLocal,
    create_db_engine,
    create_session_factory,
    init_db,
)
from flightboard.models.flight import Flight, FlightStatus, utcnow

__all__ = [
    'Base',
    'UTCDateTime',
    'engine',
    'SessionLocal',
    'create_db_engine',
    'create_session_factory',
    'init_db',
    'Flight',
    'FlightStatus',
    'utcnow',
]
