"""TaskInstance domain entity: one scheduled task occurrence inside a week."""
from typing import List, Optional

from planner.domain.fields import (
    TASK_FIELDS, clean_fields, normalize_day, normalize_duration, normalize_hierarchy,
    normalize_text, normalize_time, normalize_title,
)
from planner.utilities.constants import DAYS, DEFAULT_DURATION


class TaskInstance:
    def __init__(self, instance_id: int, title: str, template_id: Optional[int] = None, goal: str = "",
                 hierarchy: Optional[List[str]] = None, duration: int = DEFAULT_DURATION, notes: str = "",
                 completed: bool = False, scheduled_day: Optional[str] = None,
                 scheduled_time: Optional[str] = None):
        self.instance_id = instance_id
        # Relation only: the template may be edited or deleted independently
        self.template_id = template_id
        self.title = title
        self.goal = goal
        self.hierarchy = hierarchy[:] if hierarchy else []
        self.duration = duration
        self.notes = notes
        self.completed = completed
        self.scheduled_day = scheduled_day
        self.scheduled_time = scheduled_time

    def __str__(self) -> str:
        when = f"{self.scheduled_day or '-'} {self.scheduled_time or ''}".strip()
        mark = "x" if self.completed else " "
        return f"[{mark}] #{self.instance_id} {self.title} ({when}, {self.duration}m)"

    __repr__ = __str__

    def update(self, fields: dict) -> None:
        """Apply a partial edit. Nothing is assigned unless every field is valid."""
        for key, value in clean_fields(fields, TASK_FIELDS).items():
            setattr(self, key, value)

    def same_slot(self, other: "TaskInstance") -> bool:
        return (self.title == other.title
                and self.scheduled_day == other.scheduled_day
                and self.scheduled_time == other.scheduled_time)

    def copy(self, instance_id: int) -> "TaskInstance":
        """Fresh, incomplete copy with a new id; keeps the template reference."""
        return TaskInstance(
            instance_id,
            self.title,
            template_id=self.template_id,
            goal=self.goal,
            hierarchy=self.hierarchy,
            duration=self.duration,
            notes=self.notes,
            scheduled_day=self.scheduled_day,
            scheduled_time=self.scheduled_time,
        )

    def sort_key(self):
        day_index = DAYS.index(self.scheduled_day) if self.scheduled_day in DAYS else len(DAYS)
        return day_index, self.scheduled_time or "99:99", self.instance_id

    @staticmethod
    def from_dict(data):
        '''Creates a TaskInstance from its persisted form. Raises on malformed entries.'''
        if not isinstance(data, dict):
            raise TypeError(f"task entry must be an object, got {type(data).__name__}")
        instance_id = data["instanceId"]
        template_id = data.get("templateId")
        if isinstance(instance_id, bool) or not isinstance(instance_id, int):
            raise TypeError(f"instanceId must be an integer, got {instance_id!r}")
        if template_id is not None and (isinstance(template_id, bool) or not isinstance(template_id, int)):
            raise TypeError(f"templateId must be an integer or null, got {template_id!r}")
        return TaskInstance(
            instance_id,
            normalize_title(data.get("title")),
            template_id=template_id,
            goal=normalize_text(data.get("goal"), "goal"),
            hierarchy=normalize_hierarchy(data.get("hierarchy")),
            duration=normalize_duration(data.get("duration", DEFAULT_DURATION), bounded=False),
            notes=normalize_text(data.get("notes"), "notes"),
            completed=bool(data.get("completed", False)),
            scheduled_day=normalize_day(data.get("scheduledDay")),
            scheduled_time=normalize_time(data.get("scheduledTime")),
        )

    def to_dict(self):
        '''Converts the TaskInstance to a dictionary for JSON persistence.'''
        return {
            "instanceId": self.instance_id,
            "templateId": self.template_id,
            "title": self.title,
            "goal": self.goal,
            "hierarchy": list(self.hierarchy),
            "duration": self.duration,
            "notes": self.notes,
            "completed": self.completed,
            "scheduledDay": self.scheduled_day,
            "scheduledTime": self.scheduled_time,
        }
