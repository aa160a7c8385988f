import unittest

from planner.events import web_observers
from planner.events.Event_Bus import EventBus, DAY_COMPLETED
from planner.events.event_helpers import publish_day_completed, publish_week_materialized


class TestEventBus(unittest.TestCase):
    def test_publish_reaches_subscribers(self):
        bus = EventBus()
        received = []
        bus.subscribe(DAY_COMPLETED, lambda name, payload: received.append((name, payload)))
        publish_day_completed(bus, "2026-W06", "Monday", 3)
        self.assertEqual(received, [(DAY_COMPLETED, {"week_id": "2026-W06", "day": "Monday", "count": 3})])

    def test_failing_subscriber_does_not_stop_others(self):
        bus = EventBus()
        received = []

        def broken(name, payload):
            raise RuntimeError("subscriber failure")

        bus.subscribe(DAY_COMPLETED, broken)
        bus.subscribe(DAY_COMPLETED, lambda name, payload: received.append(payload))
        with self.assertLogs("planner.events.Event_Bus", level="ERROR"):
            publish_day_completed(bus, "2026-W06", "Friday", 1)
        self.assertEqual(len(received), 1)

    def test_duplicate_subscription_delivers_once(self):
        bus = EventBus()
        received = []
        callback = lambda name, payload: received.append(payload)
        bus.subscribe(DAY_COMPLETED, callback)
        bus.subscribe(DAY_COMPLETED, callback)
        self.assertEqual(bus.publish(DAY_COMPLETED, {"day": "Monday"}), 1)
        self.assertEqual(received, [{"day": "Monday"}])

    def test_publish_without_subscribers(self):
        self.assertEqual(EventBus().publish(DAY_COMPLETED, {}), 0)

    def test_helpers_ignore_missing_bus(self):
        publish_day_completed(None, "2026-W06", "Monday", 1)
        publish_week_materialized(None, "2026-W06", 0)


class TestWebObservers(unittest.TestCase):
    def test_events_are_buffered_with_cursor(self):
        bus = EventBus()
        web_observers._started = False
        web_observers.start(bus)
        web_observers.start(bus)
        cursor = web_observers.get_events()["next_cursor"]

        publish_week_materialized(bus, "2026-W06", 2)
        publish_day_completed(bus, "2026-W06", "Monday", 2)

        result = web_observers.get_events(since=cursor)
        self.assertEqual([e["type"] for e in result["events"]],
                         ["planner.week_materialized", "planner.day_completed"])
        self.assertEqual(result["events"][1]["day"], "Monday")
        self.assertEqual(result["next_cursor"], result["events"][-1]["id"])
        self.assertEqual(web_observers.get_events(since=result["next_cursor"])["events"], [])


if __name__ == "__main__":
    unittest.main()
