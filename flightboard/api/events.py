"""
Live update stream.

GET /api/events keeps a Server-Sent Events connection open and relays
flightCreated / flightUpdated / flightDeleted events as they are
published. A comment line is sent when the stream has been idle for
the keepalive interval so proxies do not close it.
"""

import logging
from typing import Iterator

from flask import Blueprint, Response, current_app

from flightboard.config import config
from flightboard.observers import ObserverRegistry, Subscription

logger = logging.getLogger(__name__)

events_bp = Blueprint('events', __name__, url_prefix='/api/events')


def event_stream(
    registry: ObserverRegistry,
    subscription: Subscription,
    keepalive_seconds: float,
) -> Iterator[str]:
    """
    Yield SSE frames for one observer until it disconnects or is dropped.

    The subscription is released when the generator is closed, which
    happens when the client goes away.
    """
    try:
        yield ': connected\n\n'
        while not subscription.is_closed:
            event = subscription.next_event(timeout=keepalive_seconds)
            if event is None:
                yield ': keepalive\n\n'
                continue
            yield event.to_sse()
    finally:
        registry.unsubscribe(subscription)


@events_bp.route('', methods=['GET'])
def stream_events():
    registry: ObserverRegistry = current_app.extensions['flightboard']['observers']
    subscription = registry.subscribe()

    response = Response(
        event_stream(registry, subscription, config.realtime.keepalive_seconds),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        },
    )
    # Also covers a client that goes away before the first frame
    response.call_on_close(lambda: registry.unsubscribe(subscription))
    return response
