"""Simple Event Bus / Observer implementation for planner notifications.

Event names used so far:
  planner.day_completed -> payload {"week_id": str, "day": str, "count": int}
  planner.week_materialized -> payload {"week_id": str, "count": int}

Subscribers are callables taking (event_name, payload). A failing subscriber is
logged and never interrupts the publisher or the other subscribers.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
DAY_COMPLETED = "planner.day_completed"
WEEK_MATERIALIZED = "planner.week_materialized"


Subscriber = Callable[[str, Any], None]


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Subscriber):
		"""Register callback for event_name; registering the same callback twice is a no-op."""
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def publish(self, event_name: str, payload: Any) -> int:
		"""Deliver payload to every subscriber of event_name. Returns how many succeeded."""
		delivered = 0
		for cb in list(self._subscribers.get(event_name, ())):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)
			else:
				delivered += 1
		return delivered


# Bus shared by the web app; the engine only publishes to the bus it is given
GLOBAL_EVENT_BUS = EventBus()

__all__ = ['EventBus', 'GLOBAL_EVENT_BUS', 'DAY_COMPLETED', 'WEEK_MATERIALIZED']
