import unittest

from fastapi.testclient import TestClient

from planner.api.api_run import app
from planner.api.dependencies import get_engine
from planner.events import web_observers
from planner.events.Event_Bus import GLOBAL_EVENT_BUS
from planner.infra.Planner_Repository import MemoryPlannerStore
from planner.logic.templates.engine import TemplateInstanceEngine


class TestPlannerAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.engine = TemplateInstanceEngine(MemoryPlannerStore(), GLOBAL_EVENT_BUS)
        app.dependency_overrides[get_engine] = lambda: self.engine
        web_observers._started = False
        web_observers.start(GLOBAL_EVENT_BUS)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _add(self, title="Gym", **extra):
        body = {"title": title, "scheduledDay": "Monday", "scheduledTime": "07:00", "duration": 45}
        body.update(extra)
        resp = self.client.post("/api/weeks/2026-W06/tasks", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def test_week_navigation(self):
        self.assertEqual(self.client.get("/api/week-id", params={"date": "2026-01-01"}).json(),
                         {"weekId": "2025-W52"})
        self.assertEqual(self.client.get("/api/weeks/2026-W01/previous").json(), {"weekId": "2025-W52"})
        self.assertEqual(self.client.get("/api/weeks/2025-W52/next").json(), {"weekId": "2026-W01"})

    def test_current_week_materializes(self):
        resp = self.client.get("/api/weeks/current", params={"today": "2026-02-11"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["weekId"], "2026-W06")
        self.assertEqual(data["startDate"], "2026-02-09")
        self.assertEqual(data["endDate"], "2026-02-15")
        self.assertEqual(data["tasks"], [])

    def test_invalid_week_id_is_400(self):
        for path in ("/api/weeks/2026-W99", "/api/weeks/garbage/next", "/api/weeks/2026-6/analytics"):
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 400)

    def test_add_and_edit_task(self):
        task = self._add()
        self.assertEqual(task["title"], "Gym")
        self.assertIsNone(task["templateId"])

        resp = self.client.patch(f"/api/tasks/{task['instanceId']}", json={"notes": "[ ] warm up", "duration": 60})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["duration"], 60)

        found = self.client.get(f"/api/tasks/{task['instanceId']}").json()
        self.assertEqual(found["weekId"], "2026-W06")
        self.assertEqual(found["task"]["notes"], "[ ] warm up")

        week = self.client.get("/api/weeks/2026-W06").json()
        self.assertEqual([t["instanceId"] for t in week["tasks"]], [task["instanceId"]])

    def test_validation_errors(self):
        self.assertEqual(self.client.post("/api/weeks/2026-W06/tasks", json={"goal": "x"}).status_code, 422)
        self.assertEqual(self.client.post("/api/weeks/2026-W06/tasks",
                                          json={"title": "x", "bogus": 1}).status_code, 422)
        task = self._add()
        resp = self.client.patch(f"/api/tasks/{task['instanceId']}", json={"duration": 5})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("duration", resp.json()["detail"])
        resp = self.client.patch(f"/api/tasks/{task['instanceId']}", json={"scheduledDay": "Funday"})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_ids_are_404(self):
        self.assertEqual(self.client.get("/api/tasks/999").status_code, 404)
        self.assertEqual(self.client.post("/api/tasks/999/toggle").status_code, 404)
        self.assertEqual(self.client.delete("/api/tasks/999").status_code, 404)
        self.assertEqual(self.client.get("/api/templates/999").status_code, 404)
        self.assertEqual(self.client.patch("/api/templates/999", json={"title": "x"}).status_code, 404)

    def test_toggle_advance_and_delete(self):
        task = self._add(notes="[ ] one")
        resp = self.client.post(f"/api/tasks/{task['instanceId']}/advance")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["advanced"])
        self.assertTrue(resp.json()["task"]["completed"])

        resp = self.client.post(f"/api/tasks/{task['instanceId']}/toggle")
        self.assertFalse(resp.json()["completed"])

        resp = self.client.delete(f"/api/tasks/{task['instanceId']}")
        self.assertEqual(resp.json(), {"deleted": task["instanceId"]})

    def test_template_flow(self):
        task = self._add()
        resp = self.client.post(f"/api/tasks/{task['instanceId']}/promote", params={"link": "true"})
        self.assertEqual(resp.status_code, 201)
        template = resp.json()
        self.assertEqual(self.client.get(f"/api/tasks/{task['instanceId']}").json()["task"]["templateId"],
                         template["id"])

        resp = self.client.patch(f"/api/templates/{template['id']}", json={"title": "Morning gym"})
        self.assertEqual(resp.json()["title"], "Morning gym")
        self.assertEqual([t["id"] for t in self.client.get("/api/templates").json()], [template["id"]])

        following = self.client.get("/api/weeks/2026-W07").json()
        self.assertEqual([t["title"] for t in following["tasks"]], ["Morning gym"])

        self.assertEqual(self.client.delete(f"/api/templates/{template['id']}").json(), {"deleted": template["id"]})
        self.assertEqual(self.client.get("/api/templates").json(), [])

    def test_copy_previous(self):
        self.client.post("/api/weeks/2026-W05/tasks", json={"title": "Review"})
        resp = self.client.post("/api/weeks/2026-W06/copy-previous")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["copied"], 1)
        self.assertEqual([t["title"] for t in resp.json()["week"]["tasks"]], ["Review"])

    def test_analytics(self):
        task = self._add()
        self.client.post(f"/api/tasks/{task['instanceId']}/toggle")
        stats = self.client.get("/api/weeks/2026-W06/analytics").json()
        self.assertEqual(stats["tasks"], {"total": 1, "completed": 1, "percent": 100})

    def test_day_completed_event_is_polled(self):
        cursor = self.client.get("/api/events").json()["next_cursor"]
        task = self._add()
        self.client.post(f"/api/tasks/{task['instanceId']}/toggle")
        events = self.client.get("/api/events", params={"since": cursor}).json()["events"]
        completed = [e for e in events if e["type"] == "planner.day_completed"]
        self.assertEqual(len(completed), 1)
        self.assertEqual((completed[0]["week_id"], completed[0]["day"], completed[0]["count"]),
                         ("2026-W06", "Monday", 1))

    def test_reset_week_and_replace_templates(self):
        self._add()
        self._add(title="Read", scheduledDay="Tuesday")
        templates = self.client.post("/api/templates/from-week/2026-W06").json()
        self.assertEqual([t["title"] for t in templates], ["Gym", "Read"])

        self.client.post("/api/weeks/2026-W06/tasks", json={"title": "Extra"})
        resp = self.client.post("/api/weeks/2026-W06/reset")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([t["title"] for t in resp.json()["tasks"]], ["Gym", "Read"])
        self.assertEqual(self.client.post("/api/weeks/2026-W99/reset").status_code, 400)

    def test_goals(self):
        self.assertEqual(self.client.get("/api/goals").json(), {})
        resp = self.client.put("/api/goals/monday", json={"goal": "Ship it"})
        self.assertEqual(resp.json(), {"Monday": "Ship it"})
        self.assertEqual(self.client.put("/api/goals/Funday", json={"goal": "x"}).status_code, 400)
        self.assertEqual(self.client.get("/api/goals").json(), {"Monday": "Ship it"})

    def test_export_and_import(self):
        self._add()
        resp = self.client.get("/api/export")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("attachment", resp.headers["content-disposition"])
        backup = resp.json()
        self.assertEqual(list(backup["data"]["weeklyInstances"]), ["2026-W06"])

        self.engine = TemplateInstanceEngine(MemoryPlannerStore(), GLOBAL_EVENT_BUS)
        resp = self.client.post("/api/import", json=backup)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["tasks"], 1)
        self.assertEqual([t["title"] for t in self.client.get("/api/weeks/2026-W06").json()["tasks"]], ["Gym"])

        resp = self.client.post("/api/import", params={"merge": "true"}, json=backup)
        self.assertEqual(resp.json()["tasks"], 0)
        self.assertEqual(self.client.post("/api/import", json={"nope": 1}).status_code, 400)

    def test_out_of_range_navigation_is_400(self):
        self.assertEqual(self.client.get("/api/weeks/0002-W01/previous").status_code, 400)
        self.assertEqual(self.client.get("/api/week-id", params={"date": "9999-12-31"}).status_code, 400)

    def test_export_pdf(self):
        self._add(hierarchy=["Health"])
        resp = self.client.get("/export_pdf", params={"week_id": "2026-W06"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))
        self.assertIn("weekly_plan_2026-W06.pdf", resp.headers["content-disposition"])


if __name__ == "__main__":
    unittest.main()
