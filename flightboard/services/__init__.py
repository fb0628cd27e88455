"""
Core services for FlightBoard.

status_clock       Pure lifecycle status derivation
flight_store       Persistence and the flight-number uniqueness invariant
broadcaster        Ordered, best-effort change notifications
flight_service     Use cases tying the three together
"""

from flightboard.services.status_clock import calculate_status
from flightboard.services.flight_store import FlightDraft, FlightStore
from flightboard.services.broadcaster import ChangeBroadcaster, ChangeKind, EVENT_NAMES
from flightboard.services.flight_service import FlightService, FlightView

__all__ = [
    'calculate_status',
    'FlightDraft',
    'FlightStore',
    'ChangeBroadcaster',
    'ChangeKind',
    'EVENT_NAMES',
    'FlightService',
    'FlightView',
]
