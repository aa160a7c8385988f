import unittest

from planner.domain.WeekId import WeekId
from planner.domain.errors import InvalidTaskFieldError, TaskNotFoundError
from planner.events.Event_Bus import EventBus, DAY_COMPLETED
from planner.infra.Planner_Repository import MemoryPlannerStore
from planner.logic.templates.engine import TemplateInstanceEngine


class _EngineTestCase(unittest.TestCase):
    def setUp(self):
        self.store = MemoryPlannerStore()
        self.bus = EventBus()
        self.completed_days = []
        self.bus.subscribe(DAY_COMPLETED, lambda name, payload: self.completed_days.append(payload))
        self.engine = TemplateInstanceEngine(self.store, self.bus)

    def add(self, title, day="Monday", time=None, **extra):
        fields = {"title": title, "scheduled_day": day, "scheduled_time": time}
        fields.update(extra)
        return self.engine.add_task("2026-W06", fields)


class TestAddAndUpdate(_EngineTestCase):
    def test_add_task_is_one_off(self):
        task = self.add("  Dentist  ", day="wednesday", time="9:30")
        self.assertIsNone(task.template_id)
        self.assertEqual(task.title, "Dentist")
        self.assertEqual(task.scheduled_day, "Wednesday")
        self.assertEqual(task.scheduled_time, "09:30")
        self.assertEqual(task.duration, 60)
        week_id, stored = self.engine.find_task(task.instance_id)
        self.assertEqual(week_id, WeekId(2026, 6))
        self.assertEqual(stored.title, "Dentist")

    def test_add_task_requires_title(self):
        with self.assertRaises(InvalidTaskFieldError):
            self.engine.add_task("2026-W06", {"goal": "no title"})
        with self.assertRaises(InvalidTaskFieldError):
            self.engine.add_task("2026-W06", {"title": "   "})
        self.assertEqual(self.store.load().weekly_instances, {})

    def test_update_fields(self):
        task = self.add("Read")
        updated = self.engine.update_task(task.instance_id, {
            "title": "Read a book", "duration": 90, "scheduled_day": "Sunday",
            "scheduled_time": None, "hierarchy": ["Personal", " ", "Reading"],
        })
        self.assertEqual(updated.title, "Read a book")
        self.assertEqual(updated.duration, 90)
        self.assertEqual(updated.scheduled_day, "Sunday")
        self.assertIsNone(updated.scheduled_time)
        self.assertEqual(updated.hierarchy, ["Personal", "Reading"])
        self.assertEqual(self.engine.find_task(task.instance_id)[1].duration, 90)

    def test_invalid_update_changes_nothing(self):
        task = self.add("Read")
        for fields in ({"duration": 10}, {"duration": 500}, {"scheduled_day": "Someday"},
                       {"scheduled_time": "25:00"}, {"hierarchy": ["a", "b", "c", "d", "e"]},
                       {"title": "New", "unknown": 1}, {"completed": "yes"}):
            with self.subTest(fields=fields):
                with self.assertRaises(InvalidTaskFieldError):
                    self.engine.update_task(task.instance_id, fields)
        self.assertEqual(self.engine.find_task(task.instance_id)[1].title, "Read")

    def test_delete_task(self):
        task = self.add("Read")
        self.engine.delete_task(task.instance_id)
        with self.assertRaises(TaskNotFoundError):
            self.engine.find_task(task.instance_id)
        with self.assertRaises(TaskNotFoundError):
            self.engine.delete_task(task.instance_id)


class TestCompletion(_EngineTestCase):
    def test_toggle_flips_flag(self):
        task = self.add("Run")
        self.assertTrue(self.engine.toggle_complete(task.instance_id).completed)
        self.assertFalse(self.engine.toggle_complete(task.instance_id).completed)

    def test_day_completed_published_once(self):
        first = self.add("Run")
        second = self.add("Stretch")
        self.add("Other day", day="Tuesday")

        self.engine.toggle_complete(first.instance_id)
        self.assertEqual(self.completed_days, [])
        self.engine.toggle_complete(second.instance_id)
        self.assertEqual(self.completed_days, [{"week_id": "2026-W06", "day": "Monday", "count": 2}])

        # Already complete: editing another field does not announce again
        self.engine.update_task(second.instance_id, {"notes": "done"})
        self.assertEqual(len(self.completed_days), 1)

    def test_moving_last_open_task_away_completes_day(self):
        done = self.add("Run")
        pending = self.add("Swim")
        self.engine.toggle_complete(done.instance_id)
        self.engine.update_task(pending.instance_id, {"scheduled_day": "Thursday"})
        self.assertEqual([e["day"] for e in self.completed_days], ["Monday"])

    def test_unscheduled_tasks_never_complete_a_day(self):
        task = self.add("Someday", day=None)
        self.engine.toggle_complete(task.instance_id)
        self.assertEqual(self.completed_days, [])

    def test_delete_does_not_announce(self):
        done = self.add("Run")
        pending = self.add("Swim")
        self.engine.toggle_complete(done.instance_id)
        self.engine.delete_task(pending.instance_id)
        self.assertEqual(self.completed_days, [])


class TestAdvanceProgress(_EngineTestCase):
    def test_ticks_items_in_order_then_completes(self):
        task = self.add("Pack", notes="[ ] passport\n[ ] charger")

        task, advanced = self.engine.advance_progress(task.instance_id)
        self.assertTrue(advanced)
        self.assertEqual(task.notes, "[x] passport\n[ ] charger")
        self.assertFalse(task.completed)

        task, advanced = self.engine.advance_progress(task.instance_id)
        self.assertTrue(advanced)
        self.assertEqual(task.notes, "[x] passport\n[x] charger")
        self.assertTrue(task.completed)
        self.assertEqual(len(self.completed_days), 1)

    def test_without_checklist_toggles(self):
        task = self.add("Call mom")
        task, advanced = self.engine.advance_progress(task.instance_id)
        self.assertFalse(advanced)
        self.assertTrue(task.completed)
        task, advanced = self.engine.advance_progress(task.instance_id)
        self.assertFalse(task.completed)


class TestCopyFromPreviousWeek(_EngineTestCase):
    def test_copies_tasks_as_incomplete_with_new_ids(self):
        task = self.engine.add_task("2026-W05", {"title": "Gym", "scheduled_day": "Monday",
                                                 "scheduled_time": "07:00"})
        self.engine.toggle_complete(task.instance_id)

        copied = self.engine.copy_from_previous_week("2026-W06")
        self.assertEqual(copied, 1)
        week = self.engine.materialize("2026-W06")
        self.assertEqual(len(week.tasks), 1)
        clone = week.tasks[0]
        self.assertNotEqual(clone.instance_id, task.instance_id)
        self.assertFalse(clone.completed)
        self.assertEqual((clone.title, clone.scheduled_day, clone.scheduled_time), ("Gym", "Monday", "07:00"))

    def test_skips_tasks_already_present(self):
        self.engine.add_task("2026-W05", {"title": "Gym", "scheduled_day": "Monday"})
        self.engine.add_task("2026-W05", {"title": "Read", "scheduled_day": "Monday"})
        self.add("Gym")
        self.assertEqual(self.engine.copy_from_previous_week("2026-W06"), 1)
        self.assertEqual(self.engine.copy_from_previous_week("2026-W06"), 0)

    def test_crosses_year_boundary(self):
        self.engine.add_task("2025-W52", {"title": "Year review"})
        self.assertEqual(self.engine.copy_from_previous_week("2026-W01"), 1)

    def test_missing_previous_week_copies_nothing(self):
        self.assertEqual(self.engine.copy_from_previous_week("2026-W06"), 0)
        state = self.store.load()
        self.assertIn(WeekId(2026, 6), state.weekly_instances)
        self.assertNotIn(WeekId(2026, 5), state.weekly_instances)


if __name__ == "__main__":
    unittest.main()
