import unittest

from planner.domain.errors import InvalidTaskFieldError
from planner.infra.Planner_Repository import MemoryPlannerStore
from planner.logic.templates.engine import TemplateInstanceEngine


class TestDailyGoals(unittest.TestCase):
    def setUp(self):
        self.store = MemoryPlannerStore()
        self.engine = TemplateInstanceEngine(self.store)

    def test_save_and_read_goals(self):
        self.assertEqual(self.engine.get_goals(), {})
        goals = self.engine.save_goal("monday", "  Ship the release  ")
        self.assertEqual(goals, {"Monday": "Ship the release"})
        self.engine.save_goal("Friday", "Inbox zero")
        self.assertEqual(self.engine.get_goals(), {"Monday": "Ship the release", "Friday": "Inbox zero"})
        self.assertEqual(self.store.load().to_dict()["goals"]["Friday"], "Inbox zero")

    def test_empty_goal_clears_day(self):
        self.engine.save_goal("Monday", "Run 5k")
        self.assertEqual(self.engine.save_goal("Monday", ""), {})

    def test_invalid_day_is_rejected(self):
        for day in ("Someday", "", None):
            with self.subTest(day=day):
                with self.assertRaises(InvalidTaskFieldError):
                    self.engine.save_goal(day, "x")
        self.assertEqual(self.engine.get_goals(), {})

    def test_malformed_stored_goals_are_skipped(self):
        store = MemoryPlannerStore({"weeklyInstances": {}, "templates": [],
                                    "goals": {"Monday": "Focus", "Blursday": "x", "Tuesday": 5}, "nextId": 1})
        with self.assertLogs("planner.domain.PlannerState", level="WARNING"):
            goals = TemplateInstanceEngine(store).get_goals()
        self.assertEqual(goals, {"Monday": "Focus"})


if __name__ == "__main__":
    unittest.main()
