"""Template domain entity: reusable task definition that seeds future weeks."""
from typing import List, Optional

from planner.domain.TaskInstance import TaskInstance
from planner.domain.fields import (
    TEMPLATE_FIELDS, clean_fields, normalize_day, normalize_duration, normalize_hierarchy,
    normalize_text, normalize_time, normalize_title,
)
from planner.utilities.constants import DEFAULT_DURATION


class Template:
    def __init__(self, id: int, title: str, goal: str = "", hierarchy: Optional[List[str]] = None,
                 duration: int = DEFAULT_DURATION, notes: str = "", scheduled_day: Optional[str] = None,
                 scheduled_time: Optional[str] = None):
        self.id = id
        self.title = title
        self.goal = goal
        self.hierarchy = hierarchy[:] if hierarchy else []
        self.duration = duration
        self.notes = notes
        self.scheduled_day = scheduled_day
        self.scheduled_time = scheduled_time

    def __str__(self) -> str:
        path = " > ".join(self.hierarchy) or "Uncategorized"
        return f"Template #{self.id} {self.title} [{path}] - {self.scheduled_day or '-'} {self.scheduled_time or ''}".rstrip()

    __repr__ = __str__

    def update(self, fields: dict) -> None:
        """Overwrite template fields; already materialized instances keep their copies."""
        for key, value in clean_fields(fields, TEMPLATE_FIELDS).items():
            setattr(self, key, value)

    def instantiate(self, instance_id: int) -> TaskInstance:
        return TaskInstance(
            instance_id,
            self.title,
            template_id=self.id,
            goal=self.goal,
            hierarchy=self.hierarchy,
            duration=self.duration,
            notes=self.notes,
            completed=False,
            scheduled_day=self.scheduled_day,
            scheduled_time=self.scheduled_time,
        )

    @classmethod
    def from_task(cls, task: TaskInstance, template_id: int) -> "Template":
        """Capture a task's current fields as a new template."""
        return cls(
            template_id,
            task.title,
            goal=task.goal,
            hierarchy=task.hierarchy,
            duration=task.duration,
            notes=task.notes,
            scheduled_day=task.scheduled_day,
            scheduled_time=task.scheduled_time,
        )

    @staticmethod
    def from_dict(data):
        if not isinstance(data, dict):
            raise TypeError(f"template entry must be an object, got {type(data).__name__}")
        template_id = data["id"]
        if isinstance(template_id, bool) or not isinstance(template_id, int):
            raise TypeError(f"template id must be an integer, got {template_id!r}")
        return Template(
            template_id,
            normalize_title(data.get("title")),
            goal=normalize_text(data.get("goal"), "goal"),
            hierarchy=normalize_hierarchy(data.get("hierarchy")),
            duration=normalize_duration(data.get("duration", DEFAULT_DURATION), bounded=False),
            notes=normalize_text(data.get("notes"), "notes"),
            scheduled_day=normalize_day(data.get("scheduledDay")),
            scheduled_time=normalize_time(data.get("scheduledTime")),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "goal": self.goal,
            "hierarchy": list(self.hierarchy),
            "duration": self.duration,
            "notes": self.notes,
            "scheduledDay": self.scheduled_day,
            "scheduledTime": self.scheduled_time,
        }
