"""Weekly analytics: time per top-level category, task and checklist completion, per-day stats."""
from collections import defaultdict
from typing import Any, Dict

from planner.domain.WeeklyInstance import WeeklyInstance
from planner.logic.tasks.checklist import count_checklist
from planner.utilities.constants import DAYS, DAY_LABELS


def _percent(completed: int, total: int) -> int:
    # Round half up, so 1 of 8 reads 13%
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def compute_week_analytics(week: WeeklyInstance) -> Dict[str, Any]:
    """Aggregate completion stats for one week.

    Returns structure:
    {
      'week_id': 'YYYY-Www',
      'by_hierarchy': { 'WORK': {'total': minutes, 'completed': minutes}, ... },
      'tasks': {'total': int, 'completed': int, 'percent': int},
      'duration': {'total': minutes, 'completed': minutes},
      'mini_tasks': {'total': int, 'completed': int, 'percent': int},
      'days': [ {'day': 'Monday', 'label': 'Mon',
                 'tasks': {...}, 'mini_tasks': {...}}, ... ]   # Monday..Sunday
    }
    Tasks without a category are grouped under 'Uncategorized'.
    """
    by_hierarchy = defaultdict(lambda: {'total': 0, 'completed': 0})
    totals = defaultdict(int)

    for task in week.tasks:
        top = task.hierarchy[0] if task.hierarchy else 'Uncategorized'
        by_hierarchy[top]['total'] += task.duration
        totals['tasks'] += 1
        totals['duration'] += task.duration
        if task.completed:
            by_hierarchy[top]['completed'] += task.duration
            totals['tasks_done'] += 1
            totals['duration_done'] += task.duration
        mini_total, mini_done = count_checklist(task.notes)
        totals['mini'] += mini_total
        totals['mini_done'] += mini_done

    days = []
    for day in DAYS:
        day_tasks = week.tasks_for_day(day)
        done = sum(1 for t in day_tasks if t.completed)
        mini_total = mini_done = 0
        for task in day_tasks:
            t_total, t_done = count_checklist(task.notes)
            mini_total += t_total
            mini_done += t_done
        days.append({
            'day': day,
            'label': DAY_LABELS[day],
            'tasks': {'total': len(day_tasks), 'completed': done, 'percent': _percent(done, len(day_tasks))},
            'mini_tasks': {'total': mini_total, 'completed': mini_done, 'percent': _percent(mini_done, mini_total)},
        })

    return {
        'week_id': str(week.week_id),
        'by_hierarchy': dict(by_hierarchy),
        'tasks': {
            'total': totals['tasks'],
            'completed': totals['tasks_done'],
            'percent': _percent(totals['tasks_done'], totals['tasks']),
        },
        'duration': {'total': totals['duration'], 'completed': totals['duration_done']},
        'mini_tasks': {
            'total': totals['mini'],
            'completed': totals['mini_done'],
            'percent': _percent(totals['mini_done'], totals['mini']),
        },
        'days': days,
    }

__all__ = ["compute_week_analytics"]
