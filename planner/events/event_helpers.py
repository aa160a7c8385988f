"""Event helper utilities.

Quick import:
    from planner.events.event_helpers import publish_day_completed, publish_week_materialized
"""
from __future__ import annotations
from typing import Optional

from .Event_Bus import EventBus, DAY_COMPLETED, WEEK_MATERIALIZED

__all__ = ['publish_day_completed', 'publish_week_materialized', 'DAY_COMPLETED', 'WEEK_MATERIALIZED']


def publish_day_completed(bus: Optional[EventBus], week_id, day: str, count: int):
    """Publish planner.day_completed: every task scheduled on `day` is now done."""
    if bus is None:
        return
    bus.publish(DAY_COMPLETED, {
        'week_id': str(week_id),
        'day': day,
        'count': count,
    })


def publish_week_materialized(bus: Optional[EventBus], week_id, count: int):
    """Publish planner.week_materialized after a week was created from templates."""
    if bus is None:
        return
    bus.publish(WEEK_MATERIALIZED, {
        'week_id': str(week_id),
        'count': count,
    })
