"""Template-to-week materialization engine.

Templates seed weeks the first time a week is visited; after that, the week's
task instances live on their own. Every operation is a single scoped
read-modify-write on the injected PlannerStore: load, change, save once. An
exception raised inside the block leaves the stored data untouched.
"""
import logging
from typing import Dict, List, Optional, Tuple

from planner.domain.PlannerState import PlannerState
from planner.domain.TaskInstance import TaskInstance
from planner.domain.Template import Template
from planner.domain.WeekId import WeekId
from planner.domain.WeeklyInstance import WeeklyInstance
from planner.domain.errors import InvalidTaskFieldError, TaskNotFoundError, TemplateNotFoundError
from planner.domain.fields import TEMPLATE_FIELDS, clean_fields, normalize_day, normalize_text
from planner.events.Event_Bus import EventBus
from planner.events.event_helpers import publish_day_completed, publish_week_materialized
from planner.infra.Planner_Repository import PlannerStore
from planner.logic.tasks.checklist import advance_checklist, has_open_items
from planner.logic.week.clock import get_previous_week_id

logger = logging.getLogger(__name__)


class TemplateInstanceEngine:
    def __init__(self, store: PlannerStore, event_bus: Optional[EventBus] = None):
        self._store = store
        self._events = event_bus

    @property
    def store(self) -> PlannerStore:
        return self._store

    # ---- weeks ----

    def materialize(self, week_id) -> WeeklyInstance:
        """Return the week's instance, creating it from the active templates on first access.

        Idempotent: an existing week is returned as stored and nothing is written.
        Creating a week advances the id counter by exactly the number of templates.
        """
        week_id = WeekId.parse(week_id)
        with self._store.lock:
            state = self._store.load()
            week, created = self._ensure_week(state, week_id)
            if created:
                self._store.save(state)
        if created:
            publish_week_materialized(self._events, week_id, len(week.tasks))
        return week

    def reset_week_to_templates(self, week_id) -> WeeklyInstance:
        """Throw away the week's tasks and rebuild it from the active templates.

        The discarded ids are not reused; the rebuilt tasks get fresh ones.
        """
        week_id = WeekId.parse(week_id)
        with self._store.edit() as state:
            dropped = state.weekly_instances.pop(week_id, None)
            week, _ = self._ensure_week(state, week_id)
        logger.info("Reset %s to templates (%d task(s) discarded)",
                    week_id, len(dropped.tasks) if dropped else 0)
        publish_week_materialized(self._events, week_id, len(week.tasks))
        return week

    def copy_from_previous_week(self, week_id) -> int:
        """Copy last week's tasks into this week, skipping ones already present (same title/day/time).

        Copies get new ids, keep their template reference and start incomplete.
        Returns the number of tasks copied.
        """
        week_id = WeekId.parse(week_id)
        previous_id = get_previous_week_id(week_id)
        with self._store.edit() as state:
            target, _ = self._ensure_week(state, week_id)
            source = state.get_week(previous_id)
            if source is None or not source.tasks:
                logger.info("No tasks found in previous week (%s) to copy.", previous_id)
                return 0
            copied = 0
            for task in source.sorted_tasks():
                if any(existing.same_slot(task) for existing in target.tasks):
                    continue
                target.add(task.copy(state.allocate_id()))
                copied += 1
        logger.info("Copied %d task(s) from %s into %s", copied, previous_id, week_id)
        return copied

    # ---- templates ----

    def list_templates(self) -> List[Template]:
        return self._store.load().templates

    def get_template(self, template_id: int) -> Template:
        return self._require_template(self._store.load(), template_id)

    def promote_to_template(self, instance_id: int, link: bool = False) -> Template:
        """Capture a task's current fields as a new template for future weeks.

        The source task keeps its previous template reference unless link=True.
        Weeks that already exist are not changed.
        """
        with self._store.edit() as state:
            _, task = self._require_task(state, instance_id)
            template = Template.from_task(task, state.allocate_id())
            state.templates.append(template)
            if link:
                task.template_id = template.id
        logger.info("Promoted task %s to template %s (linked=%s)", instance_id, template.id, link)
        return template

    def edit_template(self, template_id: int, fields: dict) -> Template:
        with self._store.edit() as state:
            template = self._require_template(state, template_id)
            template.update(fields)
        logger.info("Template %s updated: %s", template_id, ", ".join(sorted(fields)))
        return template

    def replace_templates_from_week(self, week_id) -> List[Template]:
        """Make the tasks of `week_id` the new template set.

        Every existing template is dropped. Weeks after `week_id` are discarded so
        they materialize from the new set when next visited; `week_id` and earlier
        weeks are kept as history.
        """
        week_id = WeekId.parse(week_id)
        with self._store.edit() as state:
            week, _ = self._ensure_week(state, week_id)
            state.templates = [Template.from_task(task, state.allocate_id()) for task in week.sorted_tasks()]
            future = [w for w in state.weekly_instances if w > week_id]
            for w in future:
                del state.weekly_instances[w]
            templates = state.templates
        logger.info("Templates replaced from %s: %d template(s), %d future week(s) cleared",
                    week_id, len(templates), len(future))
        return templates

    def delete_template(self, template_id: int) -> Template:
        """Stop materializing a template. Existing instances keep their fields and their templateId."""
        with self._store.edit() as state:
            template = self._require_template(state, template_id)
            state.templates.remove(template)
        logger.info("Template %s deleted", template_id)
        return template

    # ---- task instances ----

    def add_task(self, week_id, fields: dict) -> TaskInstance:
        """Insert a one-off task (no template) into a week."""
        week_id = WeekId.parse(week_id)
        cleaned = clean_fields(fields, TEMPLATE_FIELDS)
        if "title" not in cleaned:
            raise InvalidTaskFieldError("title", None, "is required")
        with self._store.edit() as state:
            week, _ = self._ensure_week(state, week_id)
            task = TaskInstance(state.allocate_id(), **cleaned)
            week.add(task)
        logger.info("Added task %s to %s", task.instance_id, week_id)
        return task

    def find_task(self, instance_id: int) -> Tuple[WeekId, TaskInstance]:
        week, task = self._require_task(self._store.load(), instance_id)
        return week.week_id, task

    def update_task(self, instance_id: int, fields: dict) -> TaskInstance:
        with self._store.edit() as state:
            week, task = self._require_task(state, instance_id)
            watched = self._completion_snapshot(week, task)
            task.update(fields)
            completed_days = self._newly_completed_days(week, task, watched)
        self._announce(week, completed_days)
        return task

    def toggle_complete(self, instance_id: int) -> TaskInstance:
        with self._store.edit() as state:
            week, task = self._require_task(state, instance_id)
            watched = self._completion_snapshot(week, task)
            task.completed = not task.completed
            completed_days = self._newly_completed_days(week, task, watched)
        self._announce(week, completed_days)
        return task

    def advance_progress(self, instance_id: int) -> Tuple[TaskInstance, bool]:
        """Tick the next checklist item in the notes, or toggle the task if there is none.

        Ticking the last open item also completes the task.
        Returns (task, step_advanced).
        """
        with self._store.edit() as state:
            week, task = self._require_task(state, instance_id)
            watched = self._completion_snapshot(week, task)
            notes, advanced = advance_checklist(task.notes)
            if advanced:
                task.notes = notes
                if not has_open_items(notes):
                    task.completed = True
            else:
                task.completed = not task.completed
            completed_days = self._newly_completed_days(week, task, watched)
        self._announce(week, completed_days)
        return task, advanced

    def delete_task(self, instance_id: int) -> TaskInstance:
        with self._store.edit() as state:
            week, task = self._require_task(state, instance_id)
            week.remove(task.instance_id)
        logger.info("Deleted task %s from %s", instance_id, week.week_id)
        return task

    # ---- goals ----

    def get_goals(self) -> Dict[str, str]:
        return self._store.load().goals

    def save_goal(self, day: str, goal: str) -> Dict[str, str]:
        """Set the standing goal for a weekday; an empty goal clears it. Returns all goals."""
        day_name = normalize_day(day)
        if day_name is None:
            raise InvalidTaskFieldError("day", day, "a day name is required")
        text = normalize_text(goal, "goal").strip()
        with self._store.edit() as state:
            if text:
                state.goals[day_name] = text
            else:
                state.goals.pop(day_name, None)
            goals = dict(state.goals)
        return goals

    # ---- helpers ----

    def _ensure_week(self, state: PlannerState, week_id: WeekId) -> Tuple[WeeklyInstance, bool]:
        week = state.get_week(week_id)
        if week is not None:
            return week, False
        week = WeeklyInstance(week_id, [t.instantiate(state.allocate_id()) for t in state.templates])
        state.weekly_instances[week_id] = week
        logger.info("Materialized %s from %d template(s)", week_id, len(week.tasks))
        return week, True

    @staticmethod
    def _require_template(state: PlannerState, template_id: int) -> Template:
        template = state.find_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    @staticmethod
    def _require_task(state: PlannerState, instance_id: int) -> Tuple[WeeklyInstance, TaskInstance]:
        found = state.find_task(instance_id)
        if found is None:
            raise TaskNotFoundError(instance_id)
        return found

    @staticmethod
    def _completion_snapshot(week: WeeklyInstance, task: TaskInstance) -> dict:
        day = task.scheduled_day
        return {day: week.is_day_complete(day)} if day else {}

    @staticmethod
    def _newly_completed_days(week: WeeklyInstance, task: TaskInstance, before: dict) -> List[str]:
        days = set(before)
        if task.scheduled_day:
            days.add(task.scheduled_day)
        return [d for d in sorted(days) if week.is_day_complete(d) and not before.get(d, False)]

    def _announce(self, week: WeeklyInstance, days: List[str]) -> None:
        for day in days:
            count = len(week.tasks_for_day(day))
            logger.info("All %d task(s) on %s of %s are done", count, day, week.week_id)
            publish_day_completed(self._events, week.week_id, day, count)
