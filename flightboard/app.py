"""
FlightBoard Flask Application.

Main entry point for the web application. Initializes:
- Database schema (and demo flights on an empty board)
- Store, broadcaster and service wiring
- API routes and the live event stream

Usage:
    python -m flightboard.app

Or with gunicorn:
    gunicorn 'flightboard.app:create_app()'
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from flask import Flask
from flask_cors import CORS

from flightboard.config import config
from flightboard.models import create_db_engine, create_session_factory, engine, init_db, utcnow
from flightboard.models.base import SessionLocal
from flightboard.api import flights_bp, events_bp
from flightboard.observers import ObserverRegistry, observer_registry
from flightboard.services import ChangeBroadcaster, FlightDraft, FlightService, FlightStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def seed_demo_flights(store: FlightStore, now: Optional[datetime] = None) -> int:
    """
    Put a few demo flights on an empty board.

    Returns the number of flights created (0 if the board had any).
    """
    if store.count() > 0:
        return 0

    now = now or utcnow()
    demo = [
        FlightDraft(flight_number='FB1001', destination='LHR', gate='A1', scheduled_time=now + timedelta(hours=2)),
        FlightDraft(flight_number='FB1002', destination='AMS', gate='B2', scheduled_time=now + timedelta(minutes=20)),
        FlightDraft(flight_number='FB1003', destination='JFK', gate='C3', scheduled_time=now - timedelta(hours=1)),
    ]
    for draft in demo:
        store.create(draft)

    logger.info(f'Seeded {len(demo)} demo flights')
    return len(demo)


def create_app(
    database_url: Optional[str] = None,
    seed: Optional[bool] = None,
    registry: Optional[ObserverRegistry] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        database_url: Overrides DATABASE_URL (tests pass a temporary database)
        seed: Overrides SEED_DEMO_FLIGHTS
        registry: Observer registry (defaults to the process-wide one)

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': list(config.cors_origins)}})

    # Initialize database
    if database_url:
        db_engine = create_db_engine(database_url, echo=config.debug)
        session_factory = create_session_factory(db_engine)
    else:
        db_engine = engine
        session_factory = SessionLocal

    logger.info('Initializing database...')
    init_db(db_engine)

    store = FlightStore(session_factory)
    if seed is None:
        seed = config.seed_demo_flights
    if seed:
        seed_demo_flights(store)

    # Wire services; the broadcaster only ever sees publish()
    observers = registry if registry is not None else observer_registry
    service = FlightService(store, ChangeBroadcaster(observers.publish))

    app.extensions['flightboard'] = {
        'service': service,
        'observers': observers,
        'engine': db_engine,
    }

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(events_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok', 'observers': len(observers)}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    logger.info(f'Starting FlightBoard on http://localhost:{config.port}')
    logger.info(f'Live updates: http://localhost:{config.port}/api/events')

    app.run(
        host='0.0.0.0',
        port=config.port,
        debug=config.debug,
        threaded=True,  # One thread per open event stream
        use_reloader=False,
    )


if __name__ == '__main__':
    run_development_server()
