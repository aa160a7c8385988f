"""Web-facing observers for planner events.

Subscribes to the GLOBAL_EVENT_BUS for:
  - planner.day_completed (the celebration trigger)
  - planner.week_materialized

and keeps a small in-memory ring buffer that the web layer exposes through
/api/events, so a client can poll for celebrations without reloading.

Design:
  * Each event gets an auto-increment integer id (cursor); clients pass
    since=<last_id_seen> to receive only newer events.
  * A Lock guards the buffer (uvicorn may serve requests from a thread pool).
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import GLOBAL_EVENT_BUS, EventBus, DAY_COMPLETED, WEEK_MATERIALIZED

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            for k in ('week_id', 'day', 'count'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus: EventBus = GLOBAL_EVENT_BUS):
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    bus.subscribe(DAY_COMPLETED, _record)
    bus.subscribe(WEEK_MATERIALIZED, _record)
    _started = True
    logger.info("Web observers subscribed to planner events")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns every buffered event. next_cursor is the largest
    id seen so the client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
