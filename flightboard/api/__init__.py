"""
API module for FlightBoard.

Provides:
- REST endpoints for the flight board
- A Server-Sent Events stream of flight changes
"""

from flightboard.api.flights import flights_bp
from flightboard.api.events import events_bp

__all__ = ['flights_bp', 'events_bp']
