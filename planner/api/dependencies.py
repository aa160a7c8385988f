"""Engine wiring for the web layer.

The app uses one engine backed by the configured planner file and the global
event bus. Tests replace it with app.dependency_overrides[get_engine].
"""
from functools import lru_cache

from planner.events.Event_Bus import GLOBAL_EVENT_BUS
from planner.infra.Planner_Repository import JsonPlannerStore
from planner.infra.paths import PLANNER_FILE
from planner.logic.templates.engine import TemplateInstanceEngine


@lru_cache(maxsize=None)
def get_engine() -> TemplateInstanceEngine:
    return TemplateInstanceEngine(JsonPlannerStore(PLANNER_FILE), GLOBAL_EVENT_BUS)


def week_payload(week):
    """JSON view of a WeeklyInstance: its dates plus tasks in agenda order."""
    return {
        "weekId": str(week.week_id),
        "startDate": week.week_id.monday().isoformat(),
        "endDate": week.week_id.sunday().isoformat(),
        "tasks": [t.to_dict() for t in week.sorted_tasks()],
    }
