"""PlannerState aggregate: everything the store persists.

Root shape: {"weeklyInstances": {"YYYY-Www": {"tasks": [...]}}, "templates": [...],
             "goals": {"Monday": "...", ...}, "nextId": int}
"""
import logging
from typing import Dict, List, Optional, Tuple

from planner.domain.Template import Template
from planner.domain.TaskInstance import TaskInstance
from planner.domain.WeekId import WeekId
from planner.domain.WeeklyInstance import WeeklyInstance
from planner.domain.errors import PlannerError
from planner.domain.fields import normalize_day, normalize_text

logger = logging.getLogger(__name__)


class PlannerState:
    def __init__(self, weekly_instances: Optional[Dict[WeekId, WeeklyInstance]] = None,
                 templates: Optional[List[Template]] = None, next_id: int = 1,
                 goals: Optional[Dict[str, str]] = None):
        self.weekly_instances = dict(weekly_instances) if weekly_instances else {}
        self.templates = templates[:] if templates else []
        # Standing goal per weekday, independent of any week
        self.goals = dict(goals) if goals else {}
        self.next_id = max(next_id, self.max_known_id() + 1)

    @classmethod
    def empty(cls) -> "PlannerState":
        return cls()

    def allocate_id(self) -> int:
        """Hand out the next id. Ids are shared by templates and task instances and never reused."""
        new_id = self.next_id
        self.next_id += 1
        return new_id

    def max_known_id(self) -> int:
        ids = [t.id for t in self.templates]
        for week in self.weekly_instances.values():
            ids.extend(t.instance_id for t in week.tasks)
        return max(ids, default=0)

    def get_week(self, week_id: WeekId) -> Optional[WeeklyInstance]:
        return self.weekly_instances.get(week_id)

    def find_template(self, template_id: int) -> Optional[Template]:
        for template in self.templates:
            if template.id == template_id:
                return template
        return None

    def find_task(self, instance_id: int) -> Optional[Tuple[WeeklyInstance, TaskInstance]]:
        for week in self.weekly_instances.values():
            task = week.find(instance_id)
            if task is not None:
                return week, task
        return None

    @staticmethod
    def from_dict(data):
        """Decode the persisted root. Raises ValueError if the root itself is unusable."""
        if not isinstance(data, dict):
            raise ValueError(f"planner data must be an object, got {type(data).__name__}")
        weeks_raw = data.get("weeklyInstances", {})
        templates_raw = data.get("templates", [])
        if not isinstance(weeks_raw, dict) or not isinstance(templates_raw, list):
            raise ValueError("'weeklyInstances' must be an object and 'templates' a list")

        weeks: Dict[WeekId, WeeklyInstance] = {}
        for key, value in weeks_raw.items():
            try:
                week_id = WeekId.parse(key)
                weeks[week_id] = WeeklyInstance.from_dict(week_id, value)
            except (PlannerError, TypeError) as e:
                logger.warning("Skipping malformed week %r: %s", key, e)

        templates: List[Template] = []
        for entry in templates_raw:
            try:
                templates.append(Template.from_dict(entry))
            except (PlannerError, KeyError, TypeError) as e:
                logger.warning("Skipping malformed template: %s", e)

        goals: Dict[str, str] = {}
        goals_raw = data.get("goals") or {}
        if not isinstance(goals_raw, dict):
            logger.warning("Ignoring goals: expected an object, got %s", type(goals_raw).__name__)
            goals_raw = {}
        for day, goal in goals_raw.items():
            try:
                day = normalize_day(day)
                goal = normalize_text(goal, "goal")
            except PlannerError as e:
                logger.warning("Skipping malformed goal for %r: %s", day, e)
                continue
            if day and goal:
                goals[day] = goal

        next_id = data.get("nextId", 1)
        if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 1:
            logger.warning("Invalid nextId %r, recomputing from stored ids", next_id)
            next_id = 1
        return PlannerState(weeks, templates, next_id, goals)

    def to_dict(self):
        return {
            "weeklyInstances": {str(week_id): week.to_dict()
                                for week_id, week in sorted(self.weekly_instances.items())},
            "templates": [t.to_dict() for t in self.templates],
            "goals": dict(self.goals),
            "nextId": self.next_id,
        }
