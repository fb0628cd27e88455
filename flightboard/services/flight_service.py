"""
Flight service - the board's use cases.

Runs each operation against the store, attaches the live status and,
for mutations, broadcasts the result once the commit has succeeded.
Store errors propagate unchanged; nothing is retried here.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from flightboard.models.flight import Flight, FlightStatus, utcnow
from flightboard.services.broadcaster import ChangeBroadcaster, ChangeKind
from flightboard.services.flight_store import FlightDraft, FlightStore
from flightboard.services.status_clock import calculate_status

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class FlightView:
    """
    A flight's stored fields plus its status at the time of reading.

    The same shape is returned to callers and sent to observers.
    """
    id: int
    flight_number: str
    airline: str
    origin: str
    destination: str
    scheduled_time: datetime
    estimated_time: Optional[datetime]
    gate: str
    is_arrival: bool
    last_updated_at: datetime
    remarks: Optional[str]
    status: FlightStatus

    @classmethod
    def from_flight(cls, flight: Flight, status: FlightStatus) -> 'FlightView':
        return cls(
            id=flight.id,
            flight_number=flight.flight_number,
            airline=flight.airline,
            origin=flight.origin,
            destination=flight.destination,
            scheduled_time=flight.scheduled_time,
            estimated_time=flight.estimated_time,
            gate=flight.gate,
            is_arrival=flight.is_arrival,
            last_updated_at=flight.last_updated_at,
            remarks=flight.remarks,
            status=status,
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses and events."""
        return {
            'id': self.id,
            'flightNumber': self.flight_number,
            'airline': self.airline,
            'origin': self.origin,
            'destination': self.destination,
            'scheduledTime': _iso(self.scheduled_time),
            'estimatedTime': _iso(self.estimated_time),
            'gate': self.gate,
            'isArrival': self.is_arrival,
            'lastUpdatedAt': _iso(self.last_updated_at),
            'remarks': self.remarks,
            'status': self.status.value,
        }


class FlightService:
    """
    Orchestrates store mutations, status derivation and broadcasting.

    Holds no per-call state. The commit-order lock only makes sure the
    store commit and the broadcast of one mutation are not interleaved
    with another's, so observers see changes in commit order. It is one
    lock for the whole board, so writes to unrelated flights also queue
    behind each other; SQLite serializes writers anyway.
    """

    def __init__(
        self,
        store: FlightStore,
        broadcaster: ChangeBroadcaster,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.broadcaster = broadcaster
        self._clock = clock
        self._commit_order = threading.Lock()

    def _enrich(self, flight: Flight) -> FlightView:
        # Evaluated per call, never cached
        status = calculate_status(flight.scheduled_time, self._clock())
        return FlightView.from_flight(flight, status)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_flights(
        self,
        destination: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[FlightView]:
        """
        Flights ordered by scheduled time, with live status.

        destination is a case-insensitive substring filter; status is a
        case-insensitive match on the computed status name.
        """
        views = [self._enrich(f) for f in self.store.find_all(destination)]

        if status:
            wanted = status.strip().lower()
            views = [v for v in views if v.status.value.lower() == wanted]

        return views

    def get_flight(self, flight_id: int) -> FlightView:
        return self._enrich(self.store.find_by_id(flight_id))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_flight(self, draft: FlightDraft) -> FlightView:
        with self._commit_order:
            view = self._enrich(self.store.create(draft))
            self.broadcaster.broadcast(ChangeKind.CREATED, view.to_dict())
        return view

    def update_flight(self, flight_id: int, draft: FlightDraft) -> FlightView:
        with self._commit_order:
            view = self._enrich(self.store.update(flight_id, draft))
            self.broadcaster.broadcast(ChangeKind.UPDATED, view.to_dict())
        return view

    def delete_flight(self, flight_id: int) -> None:
        with self._commit_order:
            self.store.delete(flight_id)
            self.broadcaster.broadcast(ChangeKind.DELETED, flight_id)
