"""
In-memory task query over a list of Task objects.
"""

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from tasklens.models.analytics import PeriodWindow
from tasklens.models.task import Priority, Task
from tasklens.query.interface import TaskQuery, check_group_field


class InMemoryTaskQuery(TaskQuery):
    """
    Task query backed by a list of tasks.

    Useful when the caller already holds a user's tasks, and in tests.
    """

    def __init__(self, tasks: Iterable[Task]):
        self.tasks: List[Task] = list(tasks)

    def _select(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        updated_between: Optional[PeriodWindow] = None,
        created_between: Optional[PeriodWindow] = None,
        due_before: Optional[datetime] = None,
        due_between: Optional[PeriodWindow] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Task]:
        checks: List[Callable[[Task], bool]] = [lambda t: t.user_id == user_id]

        if completed is not None:
            checks.append(lambda t: t.completed == completed)
        if updated_between is not None:
            checks.append(lambda t: updated_between.contains(t.updated_at))
        if created_between is not None:
            checks.append(lambda t: created_between.contains(t.created_at))
        if due_before is not None:
            checks.append(lambda t: t.due_date is not None and t.due_date < due_before)
        if due_between is not None:
            checks.append(lambda t: due_between.contains(t.due_date))
        if category is not None:
            checks.append(lambda t: t.category == category)
        if priority is not None:
            wanted = Priority(priority)
            checks.append(lambda t: t.priority == wanted)

        return [task for task in self.tasks if all(check(task) for check in checks)]

    async def count(self, user_id: str, **filters) -> int:
        return len(self._select(user_id, **filters))

    async def sum_estimated_minutes(self, user_id: str, **filters) -> int:
        return sum(task.estimated_minutes or 0 for task in self._select(user_id, **filters))

    async def group_count(self, user_id: str, field: str) -> Dict[Optional[str], int]:
        check_group_field(field)
        counts: Dict[Optional[str], int] = {}
        for task in self._select(user_id):
            key = task.priority.value if field == "priority" else task.category
            counts[key] = counts.get(key, 0) + 1
        return counts
