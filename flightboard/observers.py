"""
Process-wide registry of live observers.

Each connected client (an open event stream) holds a Subscription with
its own bounded queue. Publishing enqueues the event on every queue
without blocking: an observer that cannot keep up is dropped rather
than allowed to stall the publisher or the other observers.

Single-process only. Events are numbered in publish order, and every
observer sees them in that order.
"""

import itertools
import json
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flightboard.config import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserverEvent:
    """A named event as delivered to observers."""
    name: str
    payload: Any
    sequence: int

    def to_sse(self) -> str:
        """Render as a Server-Sent Events frame."""
        return (
            f'id: {self.sequence}\n'
            f'event: {self.name}\n'
            f'data: {json.dumps(self.payload)}\n\n'
        )


@dataclass
class Subscription:
    """One connected observer."""
    id: int
    queue: 'queue.Queue[ObserverEvent]'
    closed: threading.Event = field(default_factory=threading.Event)

    def next_event(self, timeout: Optional[float] = None) -> Optional[ObserverEvent]:
        """Wait for the next event; None on timeout."""
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None

    @property
    def is_closed(self) -> bool:
        return self.closed.is_set()


class ObserverRegistry:
    """
    Thread-safe registry with explicit subscribe/unsubscribe lifecycle.

    The registry is the only place that knows about connections; the
    rest of the system sees just its publish() method.
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or config.realtime.queue_size

        self._subscriptions: Dict[int, Subscription] = {}
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._sequence = 0

        # Statistics
        self._published = 0
        self._dropped = 0

    def subscribe(self) -> Subscription:
        """Register a new observer."""
        with self._lock:
            sub = Subscription(id=next(self._ids), queue=queue.Queue(maxsize=self.queue_size))
            self._subscriptions[sub.id] = sub

        logger.info(f'Observer {sub.id} subscribed ({len(self)} connected)')
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        """Remove an observer. Safe to call more than once."""
        with self._lock:
            removed = self._subscriptions.pop(sub.id, None)
        sub.closed.set()

        if removed is not None:
            logger.info(f'Observer {sub.id} unsubscribed ({len(self)} connected)')

    def publish(self, event_name: str, payload: Any) -> int:
        """
        Deliver an event to every connected observer.

        Never blocks. Observers whose queue is full are dropped.
        Returns the number of observers the event was queued for.
        """
        delivered = 0
        lagging = []

        with self._lock:
            self._sequence += 1
            event = ObserverEvent(name=event_name, payload=payload, sequence=self._sequence)

            for sub in self._subscriptions.values():
                try:
                    sub.queue.put_nowait(event)
                    delivered += 1
                except queue.Full:
                    lagging.append(sub)

            for sub in lagging:
                self._subscriptions.pop(sub.id, None)
                sub.closed.set()

            self._published += 1
            self._dropped += len(lagging)

        for sub in lagging:
            logger.warning(f'Observer {sub.id} dropped: queue full at event {event.sequence}')

        logger.debug(f'Published {event_name} #{event.sequence} to {delivered} observers')
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    @property
    def stats(self) -> dict:
        """Get registry statistics."""
        with self._lock:
            return {
                'observers': len(self._subscriptions),
                'published': self._published,
                'dropped': self._dropped,
                'last_sequence': self._sequence,
            }


# Singleton instance
observer_registry = ObserverRegistry()
