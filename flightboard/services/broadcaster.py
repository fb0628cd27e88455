"""
Change broadcaster - fans flight changes out to live observers.

Knows nothing about persistence or connections: it holds a single
publish(event_name, payload) callable and maps change kinds onto the
event names clients listen for.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Union

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    CREATED = 'Created'
    UPDATED = 'Updated'
    DELETED = 'Deleted'


EVENT_NAMES = {
    ChangeKind.CREATED: 'flightCreated',
    ChangeKind.UPDATED: 'flightUpdated',
    ChangeKind.DELETED: 'flightDeleted',
}


class ChangeBroadcaster:
    """
    Best-effort, ordered fan-out of flight changes.

    Calls are serialized, so events leave in the order broadcast() was
    called. A failing publish is logged and swallowed: the mutation that
    triggered it has already been committed and must not be reported as
    failed.
    """

    def __init__(self, publish: Callable[[str, Any], Any]):
        self._publish = publish
        self._lock = threading.Lock()

    def broadcast(self, kind: ChangeKind, payload: Union[dict, int]) -> None:
        """
        Notify observers of a change.

        Payload is the enriched flight view for CREATED/UPDATED and the
        bare flight id for DELETED.
        """
        event_name = EVENT_NAMES[ChangeKind(kind)]

        with self._lock:
            try:
                self._publish(event_name, payload)
            except Exception as e:
                logger.error(f'Broadcast of {event_name} failed: {e}')
