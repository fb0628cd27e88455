"""
Tests for the HTTP layer using Flask's test client.

These run against the real clock, so scheduled times are relative to
the moment the test runs.
"""

from datetime import datetime, timedelta, timezone

import pytest

from flightboard.app import seed_demo_flights
from flightboard.models import FlightStatus
from flightboard.services import ChangeBroadcaster, FlightService, FlightStore


def in_minutes(minutes: float) -> str:
    return (datetime.now(timezone.utc) + timedelta(minutes=minutes)).isoformat()


def flight_body(flight_number='FB1002', minutes=20, **overrides):
    body = {
        'flightNumber': flight_number,
        'destination': 'AMS',
        'gate': 'B2',
        'scheduledTime': in_minutes(minutes),
    }
    body.update(overrides)
    return body


def drain(subscription):
    events = []
    while True:
        event = subscription.next_event(timeout=0)
        if event is None:
            return events
        events.append(event)


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_app_uses_the_given_registry(app, registry):
    # An empty registry is falsy (it defines __len__) and must still be used
    assert len(registry) == 0
    assert app.extensions['flightboard']['observers'] is registry


class TestCreate:

    def test_create_boarding_flight_notifies_observers(self, client, registry):
        first = registry.subscribe()
        second = registry.subscribe()

        response = client.post('/api/flights', json=flight_body())

        assert response.status_code == 201
        body = response.get_json()
        assert body['status'] == 'Boarding'
        assert body['flightNumber'] == 'FB1002'
        assert body['airline'] == 'Generic'
        assert body['origin'] == 'TLV'
        assert response.headers['Location'].endswith(f"/api/flights/{body['id']}")

        for sub in (first, second):
            [event] = drain(sub)
            assert event.name == 'flightCreated'
            assert event.payload == body

    def test_duplicate_number_is_409(self, client, registry):
        client.post('/api/flights', json=flight_body())
        sub = registry.subscribe()

        response = client.post('/api/flights', json=flight_body(destination='CDG'))

        assert response.status_code == 409
        assert response.get_json()['error'] == 'FlightNumber already exists'
        assert drain(sub) == []

    def test_past_schedule_is_400(self, client, registry):
        sub = registry.subscribe()

        response = client.post('/api/flights', json=flight_body(minutes=-5))

        assert response.status_code == 400
        assert 'scheduledTime' in response.get_json()['errors']
        assert drain(sub) == []

    def test_missing_body_is_400(self, client):
        response = client.post('/api/flights', data='not json', content_type='text/plain')
        assert response.status_code == 400


class TestRead:

    @pytest.fixture
    def seeded(self, client):
        for number, destination, minutes in [
            ('LATE', 'JFK', 300),
            ('SOON', 'AMS', 10),
            ('MID', 'LHR', 120),
        ]:
            client.post('/api/flights', json=flight_body(number, minutes=minutes, destination=destination))
        return client

    def test_list_ordered_by_schedule(self, seeded):
        body = seeded.get('/api/flights').get_json()
        assert [f['flightNumber'] for f in body] == ['SOON', 'MID', 'LATE']

    def test_filter_by_destination(self, seeded):
        body = seeded.get('/api/flights?destination=jf').get_json()
        assert [f['flightNumber'] for f in body] == ['LATE']

    def test_filter_by_status(self, seeded):
        body = seeded.get('/api/flights?status=scheduled').get_json()
        assert [f['flightNumber'] for f in body] == ['MID', 'LATE']

    def test_search_alias(self, seeded):
        assert seeded.get('/api/flights/search?status=Boarding').get_json()[0]['flightNumber'] == 'SOON'

    def test_get_one(self, seeded):
        first = seeded.get('/api/flights').get_json()[0]
        assert seeded.get(f"/api/flights/{first['id']}").get_json()['flightNumber'] == first['flightNumber']

    def test_get_missing_is_404(self, client):
        response = client.get('/api/flights/999')
        assert response.status_code == 404
        assert 'error' in response.get_json()


class TestUpdateAndDelete:

    def test_update(self, client, registry):
        created = client.post('/api/flights', json=flight_body()).get_json()
        sub = registry.subscribe()

        response = client.put(f"/api/flights/{created['id']}", json=flight_body(gate='C3', minutes=90))

        assert response.status_code == 200
        body = response.get_json()
        assert body['gate'] == 'C3'
        assert body['status'] == 'Scheduled'
        [event] = drain(sub)
        assert (event.name, event.payload) == ('flightUpdated', body)

    def test_update_to_taken_number_is_409(self, client):
        a = client.post('/api/flights', json=flight_body('FB1')).get_json()
        client.post('/api/flights', json=flight_body('FB2'))

        response = client.put(f"/api/flights/{a['id']}", json=flight_body('FB2'))

        assert response.status_code == 409

    def test_update_missing_is_404(self, client):
        assert client.put('/api/flights/77', json=flight_body()).status_code == 404

    def test_delete(self, client, registry):
        created = client.post('/api/flights', json=flight_body()).get_json()
        sub = registry.subscribe()

        response = client.delete(f"/api/flights/{created['id']}")

        assert response.status_code == 204
        [event] = drain(sub)
        assert (event.name, event.payload) == ('flightDeleted', created['id'])
        assert client.get(f"/api/flights/{created['id']}").status_code == 404

    def test_delete_missing_is_404_without_broadcast(self, client, registry):
        sub = registry.subscribe()

        response = client.delete('/api/flights/31337')

        assert response.status_code == 404
        assert drain(sub) == []


def test_event_stream_response(client, registry):
    response = client.get('/api/events')

    assert response.status_code == 200
    assert response.mimetype == 'text/event-stream'
    assert response.headers['Cache-Control'] == 'no-cache'
    assert len(registry) == 1

    response.close()
    assert len(registry) == 0


def test_seed_demo_flights(session_factory, publisher, now):
    store = FlightStore(session_factory, clock=lambda: now)

    assert seed_demo_flights(store, now=now) == 3
    assert seed_demo_flights(store, now=now) == 0

    service = FlightService(store, ChangeBroadcaster(publisher), clock=lambda: now)
    statuses = {v.flight_number: v.status for v in service.list_flights()}
    assert statuses == {
        'FB1001': FlightStatus.SCHEDULED,
        'FB1002': FlightStatus.BOARDING,
        'FB1003': FlightStatus.DEPARTED,
    }
