"""
Pytest fixtures for FlightBoard tests.

Each test gets its own temporary SQLite database. Service-level tests
run against a fixed clock so status windows are deterministic.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, List, Tuple

import pytest

from flightboard.app import create_app
from flightboard.models import create_db_engine, create_session_factory, init_db
from flightboard.observers import ObserverRegistry
from flightboard.services import ChangeBroadcaster, FlightDraft, FlightService, FlightStore


class RecordingPublisher:
    """publish() stand-in that records every event in call order."""

    def __init__(self):
        self.events: List[Tuple[str, Any]] = []
        self._lock = threading.Lock()

    def __call__(self, event_name: str, payload: Any) -> None:
        with self._lock:
            self.events.append((event_name, payload))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def now() -> datetime:
    """Fixed current instant."""
    return datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_factory(tmp_path):
    """Session factory over a fresh SQLite file."""
    engine = create_db_engine(f'sqlite:///{tmp_path / "flights.db"}')
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory, now) -> FlightStore:
    return FlightStore(session_factory, clock=lambda: now)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(store, publisher, now) -> FlightService:
    return FlightService(store, ChangeBroadcaster(publisher), clock=lambda: now)


@pytest.fixture
def make_draft(now):
    """Build a FlightDraft, scheduled 2h after `now` unless overridden."""
    def _make(flight_number: str = 'FB2001', **overrides) -> FlightDraft:
        fields = {
            'flight_number': flight_number,
            'destination': 'LHR',
            'gate': 'A1',
            'scheduled_time': now + timedelta(hours=2),
        }
        fields.update(overrides)
        return FlightDraft(**fields)

    return _make


@pytest.fixture
def registry() -> ObserverRegistry:
    return ObserverRegistry(queue_size=10)


@pytest.fixture
def app(tmp_path, registry):
    """Flask app over an empty temporary database."""
    flask_app = create_app(
        database_url=f'sqlite:///{tmp_path / "api.db"}',
        seed=False,
        registry=registry,
    )
    flask_app.config['TESTING'] = True
    yield flask_app
    flask_app.extensions['flightboard']['engine'].dispose()


@pytest.fixture
def client(app):
    return app.test_client()
