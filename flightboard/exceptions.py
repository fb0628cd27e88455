"""
Exception hierarchy for FlightBoard.

Store and service errors propagate unchanged to the API layer, which
maps each kind to an HTTP status code.
"""

from typing import Dict, List, Optional


class FlightBoardError(Exception):
    """Base exception for all FlightBoard errors."""

    status_code = 500


class FlightNotFoundError(FlightBoardError):
    """Raised when an id does not reference an existing flight."""

    status_code = 404

    def __init__(self, flight_id: int) -> None:
        self.flight_id = flight_id
        super().__init__(f'Flight {flight_id} not found')


class FlightConflictError(FlightBoardError):
    """Raised when a flight number is already used by a different record."""

    status_code = 409

    def __init__(self, flight_number: str) -> None:
        self.flight_number = flight_number
        super().__init__('FlightNumber already exists')


class FlightValidationError(FlightBoardError):
    """Raised when a create/update payload is malformed."""

    status_code = 400

    def __init__(self, errors: Optional[Dict[str, List[str]]] = None) -> None:
        self.errors = errors or {}
        super().__init__('Validation failed')
