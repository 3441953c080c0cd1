"""
Recurrence Service for Tasklens.

Advances a recurring task to its next occurrence. `generate_next` is a pure
function of the task and a caller-supplied `now`; RecurrenceService wires it
to the task store.
"""

import logging
from datetime import datetime, timedelta

from tasklens.dates import add_months, add_years, skip_weekend
from tasklens.errors import NotRecurring, RecurrenceEnded
from tasklens.models.task import NewTaskRecord, Recurrence, Task
from tasklens.services.tasks import TaskService

logger = logging.getLogger(__name__)


def next_due_date(recurrence: Recurrence, base: datetime) -> datetime:
    """
    Advance `base` by one step of `recurrence`.

    WEEKDAYS moves one day, then two more if that lands on a weekend.
    MONTHLY and YEARLY clamp to the last day of a shorter target month.
    CUSTOM advances like DAILY until it has a rule of its own.

    Raises:
        NotRecurring: If recurrence is NONE
    """
    recurrence = Recurrence(recurrence)

    if recurrence == Recurrence.NONE:
        raise NotRecurring()
    if recurrence == Recurrence.WEEKDAYS:
        return skip_weekend(base + timedelta(days=1))
    if recurrence == Recurrence.WEEKLY:
        return base + timedelta(weeks=1)
    if recurrence == Recurrence.BIWEEKLY:
        return base + timedelta(weeks=2)
    if recurrence == Recurrence.MONTHLY:
        return add_months(base, 1)
    if recurrence == Recurrence.YEARLY:
        return add_years(base, 1)
    # DAILY, CUSTOM
    return base + timedelta(days=1)


def generate_next(task: Task, now: datetime) -> NewTaskRecord:
    """
    Build the next occurrence of a recurring task.

    The new due date advances from the task's due date (or `now` when it has
    none) and keeps the original hour and minute. A reminder keeps its offset
    from the due date; without a due date no reminder is carried over. The
    source task is not modified.

    Args:
        task: The recurring task
        now: Reference time

    Returns:
        NewTaskRecord for the next occurrence

    Raises:
        NotRecurring: If the task does not recur
        RecurrenceEnded: If `now` is after the task's recurrence end
    """
    if task.recurrence == Recurrence.NONE:
        raise NotRecurring(task.id)
    if task.recurrence_end is not None and now > task.recurrence_end:
        raise RecurrenceEnded(task.id, task.recurrence_end)

    base = task.due_date or now
    due_date = next_due_date(task.recurrence, base)

    reminder_time = None
    if task.due_date is not None:
        due_date = due_date.replace(hour=task.due_date.hour, minute=task.due_date.minute)
        if task.reminder_time is not None:
            offset = task.due_date - task.reminder_time
            reminder_time = due_date - offset

    return NewTaskRecord(
        title=task.title,
        user_id=task.user_id,
        description=task.description,
        due_date=due_date,
        priority=task.priority,
        recurrence=task.recurrence,
        recurrence_end=task.recurrence_end,
        estimated_minutes=task.estimated_minutes,
        reminder_time=reminder_time,
        tags=list(task.tags),
        category=task.category,
    )


class RecurrenceService:
    """
    Service for recurring tasks backed by the task store.
    """

    def __init__(self, adapter=None, tasks: TaskService | None = None):
        """
        Initialize recurrence service.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
            tasks: Optional TaskService to persist occurrences with
        """
        self.tasks = tasks or TaskService(adapter=adapter)

    async def list_recurring(self, user_id: str) -> list[Task]:
        """List the user's tasks that have a recurrence schedule."""
        return await self.tasks.list(user_id, recurring=True)

    async def advance(self, task_id: str, user_id: str, now: datetime) -> Task | None:
        """
        Create and store the next occurrence of a user's recurring task.

        Args:
            task_id: Source task
            user_id: User who must own the source task
            now: Reference time, also used as the new task's creation time

        Returns:
            The created Task, or None if the source task was not found

        Raises:
            NotRecurring: If the task does not recur
            RecurrenceEnded: If the recurrence has ended
        """
        source = await self.tasks.get(task_id, user_id=user_id)
        if source is None:
            return None

        record = generate_next(source, now)
        created = await self.tasks.create_from_record(record, now=now)

        logger.info(
            f"Generated occurrence {created.id} of {source.id} "
            f"({source.recurrence.value}) due {created.due_date}"
        )
        return created
