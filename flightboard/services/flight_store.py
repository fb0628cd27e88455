"""
Flight store - sole owner of the flights table.

Every mutation of the board goes through this class so the
flight-number uniqueness invariant is enforced in one place.

The existence check before a write only produces a clean error in the
common case. Two concurrent writers can both pass it; the unique index
on flight_number then rejects the second commit, and the resulting
IntegrityError is translated into the same FlightConflictError. A
failed commit is rolled back, so no half-written record is visible.

Returned Flight instances are detached snapshots: the session that
loaded them is closed, and changing them does not touch the database.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from flightboard.exceptions import FlightConflictError, FlightNotFoundError
from flightboard.models.base import SessionLocal
from flightboard.models.flight import Flight, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlightDraft:
    """
    Validated input fields for creating or updating a flight.

    Timestamps are expected in UTC already; normalization happens in
    the request layer.
    """
    flight_number: str
    destination: str
    gate: str
    scheduled_time: datetime
    airline: str = 'Generic'
    origin: str = 'TLV'
    is_arrival: bool = False
    estimated_time: Optional[datetime] = None
    remarks: Optional[str] = None

    def as_columns(self) -> dict:
        return asdict(self)


class FlightStore:
    """
    Persistence-backed flight repository.

    Args:
        session_factory: SQLAlchemy session factory (defaults to SessionLocal)
        clock: Source of the current UTC instant for last_updated_at
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory or SessionLocal
        self._clock = clock

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_all(self, destination: Optional[str] = None) -> List[Flight]:
        """
        All flights ordered by scheduled time (earliest first).

        If destination is given, only flights whose destination contains
        it (case-insensitive) are returned.
        """
        stmt = select(Flight)
        if destination:
            stmt = stmt.where(Flight.destination.icontains(destination, autoescape=True))
        stmt = stmt.order_by(Flight.scheduled_time.asc(), Flight.id.asc())

        with self._session_factory() as session:
            return list(session.scalars(stmt).all())

    def find_by_id(self, flight_id: int) -> Flight:
        """Get a flight by id, raising FlightNotFoundError if absent."""
        with self._session_factory() as session:
            flight = session.get(Flight, flight_id)
            if flight is None:
                raise FlightNotFoundError(flight_id)
            return flight

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(Flight)) or 0

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, draft: FlightDraft) -> Flight:
        """Insert a new flight, assigning its id and last_updated_at."""
        with self._session_factory() as session:
            if self._number_taken(session, draft.flight_number):
                logger.warning(f'Create rejected: {draft.flight_number} already exists')
                raise FlightConflictError(draft.flight_number)

            flight = Flight(**draft.as_columns(), last_updated_at=self._clock())
            session.add(flight)
            self._commit(session, draft.flight_number)
            # Reload so the snapshot carries stored (UTC) values, not the draft's
            session.refresh(flight)

        logger.info(f'Created flight {flight.id} ({flight.flight_number})')
        return flight

    def update(self, flight_id: int, draft: FlightDraft) -> Flight:
        """
        Replace all input fields of an existing flight.

        Keeping the flight's own number is never a conflict.
        """
        with self._session_factory() as session:
            flight = session.get(Flight, flight_id)
            if flight is None:
                raise FlightNotFoundError(flight_id)

            if (
                flight.flight_number != draft.flight_number
                and self._number_taken(session, draft.flight_number, exclude_id=flight_id)
            ):
                logger.warning(
                    f'Update of flight {flight_id} rejected: {draft.flight_number} already exists'
                )
                raise FlightConflictError(draft.flight_number)

            for column, value in draft.as_columns().items():
                setattr(flight, column, value)
            flight.last_updated_at = self._clock()

            try:
                self._commit(session, draft.flight_number)
            except StaleDataError:
                # Row deleted between the load and the UPDATE
                session.rollback()
                raise FlightNotFoundError(flight_id)
            session.refresh(flight)

        logger.info(f'Updated flight {flight_id} ({flight.flight_number})')
        return flight

    def delete(self, flight_id: int) -> None:
        """Remove a flight, raising FlightNotFoundError if absent."""
        with self._session_factory() as session:
            result = session.execute(delete(Flight).where(Flight.id == flight_id))
            if result.rowcount == 0:
                session.rollback()
                raise FlightNotFoundError(flight_id)
            session.commit()

        logger.info(f'Deleted flight {flight_id}')

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _number_taken(
        session: Session,
        flight_number: str,
        exclude_id: Optional[int] = None,
    ) -> bool:
        stmt = select(Flight.id).where(Flight.flight_number == flight_number)
        if exclude_id is not None:
            stmt = stmt.where(Flight.id != exclude_id)
        return session.scalar(stmt.limit(1)) is not None

    @staticmethod
    def _commit(session: Session, flight_number: str) -> None:
        """Commit, translating a unique index violation into a conflict."""
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f'Unique constraint rejected {flight_number}: {e.orig}')
            raise FlightConflictError(flight_number) from e
