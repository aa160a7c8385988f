"""WeeklyInstance domain entity: the task instances that belong to one week."""
import logging
from typing import List, Optional

from planner.domain.TaskInstance import TaskInstance
from planner.domain.WeekId import WeekId
from planner.domain.errors import PlannerError, TaskNotFoundError

logger = logging.getLogger(__name__)


class WeeklyInstance:
    def __init__(self, week_id: WeekId, tasks: Optional[List[TaskInstance]] = None):
        self.week_id = week_id
        self.tasks = tasks[:] if tasks else []

    def __str__(self) -> str:
        done = sum(1 for t in self.tasks if t.completed)
        return f"Week {self.week_id} - {len(self.tasks)} tasks ({done} done)"

    __repr__ = __str__

    def find(self, instance_id: int) -> Optional[TaskInstance]:
        for task in self.tasks:
            if task.instance_id == instance_id:
                return task
        return None

    def add(self, task: TaskInstance) -> None:
        self.tasks.append(task)

    def remove(self, instance_id: int) -> TaskInstance:
        task = self.find(instance_id)
        if task is None:
            raise TaskNotFoundError(instance_id)
        self.tasks.remove(task)
        return task

    def tasks_for_day(self, day: str) -> List[TaskInstance]:
        return [t for t in self.tasks if t.scheduled_day == day]

    def is_day_complete(self, day: Optional[str]) -> bool:
        """True when the day has at least one task and all of them are completed."""
        if day is None:
            return False
        day_tasks = self.tasks_for_day(day)
        return bool(day_tasks) and all(t.completed for t in day_tasks)

    def sorted_tasks(self) -> List[TaskInstance]:
        return sorted(self.tasks, key=TaskInstance.sort_key)

    @staticmethod
    def from_dict(week_id: WeekId, data):
        '''Builds the week from {"tasks": [...]}. Malformed task entries are skipped with a warning.'''
        if not isinstance(data, dict) or not isinstance(data.get("tasks", []), list):
            raise TypeError(f"week {week_id} must be an object with a 'tasks' list")
        tasks = []
        for entry in data.get("tasks", []):
            try:
                tasks.append(TaskInstance.from_dict(entry))
            except (PlannerError, KeyError, TypeError) as e:
                logger.warning("Skipping malformed task in week %s: %s", week_id, e)
        return WeeklyInstance(week_id, tasks)

    def to_dict(self):
        return {"tasks": [t.to_dict() for t in self.tasks]}
