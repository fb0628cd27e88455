"""
Flight board API endpoints.

Provides endpoints for:
- GET /api/flights - List flights (optional destination/status filters)
- GET /api/flights/search - Same as list, kept for existing clients
- GET /api/flights/<id> - Get a single flight
- POST /api/flights - Create a flight
- PUT /api/flights/<id> - Replace a flight's fields
- DELETE /api/flights/<id> - Delete a flight

Every flight in a response carries its status as of the request.
"""

import logging

from flask import Blueprint, current_app, jsonify, request, url_for

from flightboard.api.schemas import parse_flight_draft
from flightboard.exceptions import FlightBoardError, FlightValidationError
from flightboard.services.flight_service import FlightService

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


def _service() -> FlightService:
    return current_app.extensions['flightboard']['service']


@flights_bp.errorhandler(FlightBoardError)
def handle_flightboard_error(e: FlightBoardError):
    """Map service errors to JSON error responses."""
    body = {'error': str(e)}
    if isinstance(e, FlightValidationError):
        body['errors'] = e.errors
    if e.status_code >= 500:
        logger.error(f'Unhandled flight board error: {e}')
    return jsonify(body), e.status_code


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    List flights ordered by scheduled time.

    Query parameters:
    - destination: substring of the destination (case-insensitive)
    - status: Scheduled|Boarding|Departed|Landed (case-insensitive)
    """
    destination = request.args.get('destination', '').strip() or None
    status = request.args.get('status', '').strip() or None

    views = _service().list_flights(destination=destination, status=status)
    return jsonify([v.to_dict() for v in views])


@flights_bp.route('/search', methods=['GET'])
def search_flights():
    """Alias of the list endpoint."""
    return list_flights()


@flights_bp.route('/<int:flight_id>', methods=['GET'])
def get_flight(flight_id: int):
    view = _service().get_flight(flight_id)
    return jsonify(view.to_dict())


@flights_bp.route('', methods=['POST'])
def create_flight():
    """
    Create a flight.

    Returns 201 with the flight and a Location header, 400 on invalid
    input, 409 if the flight number is taken.
    """
    draft = parse_flight_draft(request.get_json(silent=True))
    view = _service().create_flight(draft)

    response = jsonify(view.to_dict())
    response.status_code = 201
    response.headers['Location'] = url_for('flights.get_flight', flight_id=view.id)
    return response


@flights_bp.route('/<int:flight_id>', methods=['PUT'])
def update_flight(flight_id: int):
    draft = parse_flight_draft(request.get_json(silent=True))
    view = _service().update_flight(flight_id, draft)
    return jsonify(view.to_dict())


@flights_bp.route('/<int:flight_id>', methods=['DELETE'])
def delete_flight(flight_id: int):
    _service().delete_flight(flight_id)
    return '', 204
