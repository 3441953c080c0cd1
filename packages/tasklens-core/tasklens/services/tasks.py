"""
Task Service for Tasklens.

CRUD operations for tasks with support for both PostgreSQL and SQLite.
"""

import builtins
import logging
from datetime import datetime

from tasklens.db import get_adapter
from tasklens.models.task import (
    TASK_PRIORITIES,
    TASK_RECURRENCES,
    NewTaskRecord,
    Recurrence,
    Task,
    format_tags,
)
from tasklens.query.sql import WhereBuilder

logger = logging.getLogger(__name__)

TASK_COLUMNS = (
    "id", "user_id", "title", "description", "due_date", "priority", "completed",
    "created_at", "updated_at", "recurrence", "recurrence_end", "estimated_minutes",
    "reminder_time", "tags", "category",
)

# Incomplete first, then soonest due (undated last), then newest
ORDER_BY = "completed ASC, (due_date IS NULL) ASC, due_date ASC, created_at DESC"


def _validate(
    title: str | None = None,
    priority: str | None = None,
    recurrence: str | None = None,
    estimated_minutes: int | None = None,
) -> None:
    if title is not None and not title.strip():
        raise ValueError("Title is required")
    if priority is not None and str(getattr(priority, "value", priority)) not in TASK_PRIORITIES:
        raise ValueError(f"Invalid priority. Must be one of: {', '.join(TASK_PRIORITIES)}")
    if recurrence is not None and str(getattr(recurrence, "value", recurrence)) not in TASK_RECURRENCES:
        raise ValueError(f"Invalid recurrence. Must be one of: {', '.join(TASK_RECURRENCES)}")
    if estimated_minutes is not None and (
        isinstance(estimated_minutes, bool)
        or not isinstance(estimated_minutes, int)
        or estimated_minutes <= 0
    ):
        raise ValueError("Estimated minutes must be a positive integer")


class TaskService:
    """
    Service for managing tasks.

    Provides CRUD operations that work across PostgreSQL and SQLite.
    Tags are a list on Task and a comma-separated string in the table.
    """

    def __init__(self, adapter=None):
        """
        Initialize task service.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
        """
        self._adapter = adapter

    @property
    def adapter(self):
        """Get the database adapter."""
        if self._adapter is None:
            self._adapter = get_adapter()
        return self._adapter

    def _table_name(self) -> str:
        """Get the full table name."""
        return self.adapter.table("tasks")

    def _row_values(self, task: Task) -> list:
        return [
            task.id, task.user_id, task.title, task.description, task.due_date,
            task.priority.value, task.completed, task.created_at, task.updated_at,
            task.recurrence.value, task.recurrence_end, task.estimated_minutes,
            task.reminder_time, format_tags(task.tags), task.category,
        ]

    async def _insert(self, task: Task) -> Task:
        placeholders = ", ".join(f"${i + 1}" for i in range(len(TASK_COLUMNS)))
        query = self.adapter.format_query(f"""
            INSERT INTO {self._table_name()}
                ({", ".join(TASK_COLUMNS)})
            VALUES ({placeholders})
        """)
        await self.adapter.execute(query, *self._row_values(task))

        logger.info(f"Created task: {task.id} - {task.title}")
        return task

    async def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
        priority: str = "NORMAL",
        recurrence: str = "NONE",
        recurrence_end: datetime | None = None,
        estimated_minutes: int | None = None,
        reminder_time: datetime | None = None,
        tags: list[str] | None = None,
        category: str | None = None,
        now: datetime | None = None,
    ) -> Task:
        """
        Create a new task.

        Args:
            user_id: Owning user
            title: Task title (required, non-empty)
            description: Task description
            due_date: Optional due date
            priority: Priority (LOW, NORMAL, HIGH, URGENT)
            recurrence: Recurrence (NONE, DAILY, WEEKDAYS, WEEKLY, BIWEEKLY, MONTHLY, YEARLY, CUSTOM)
            recurrence_end: Stop recurring after this instant
            estimated_minutes: Positive effort estimate
            reminder_time: When to remind
            tags: List of tags
            category: Free-text category
            now: Creation timestamp, defaults to the current UTC time

        Returns:
            Created Task object
        """
        _validate(title, priority, recurrence, estimated_minutes)

        created_at = now or datetime.utcnow()
        task = Task(
            title=title,
            user_id=user_id,
            description=description,
            due_date=due_date,
            priority=priority,
            recurrence=recurrence,
            recurrence_end=recurrence_end,
            estimated_minutes=estimated_minutes,
            reminder_time=reminder_time,
            tags=tags or [],
            category=category,
            created_at=created_at,
            updated_at=created_at,
        )
        return await self._insert(task)

    async def create_from_record(self, record: NewTaskRecord, now: datetime | None = None) -> Task:
        """Persist a NewTaskRecord, assigning identity and timestamps."""
        created_at = now or datetime.utcnow()
        task = Task(
            title=record.title,
            user_id=record.user_id,
            description=record.description,
            due_date=record.due_date,
            priority=record.priority,
            completed=False,
            recurrence=record.recurrence,
            recurrence_end=record.recurrence_end,
            estimated_minutes=record.estimated_minutes,
            reminder_time=record.reminder_time,
            tags=list(record.tags),
            category=record.category,
            created_at=created_at,
            updated_at=created_at,
        )
        return await self._insert(task)

    async def get(self, task_id: str, user_id: str | None = None) -> Task | None:
        """Get a task by ID, optionally only if owned by `user_id`."""
        where = WhereBuilder().add("id = {}", task_id)
        if user_id is not None:
            where.add("user_id = {}", user_id)

        query = self.adapter.format_query(
            f"SELECT * FROM {self._table_name()} WHERE {where.sql()}"
        )
        row = await self.adapter.fetchrow(query, *where.params)
        if row:
            return Task.from_dict(row)
        return None

    async def update(
        self,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        due_date: datetime | None = None,
        priority: str | None = None,
        completed: bool | None = None,
        recurrence: str | None = None,
        recurrence_end: datetime | None = None,
        estimated_minutes: int | None = None,
        reminder_time: datetime | None = None,
        tags: list[str] | None = None,
        category: str | None = None,
        now: datetime | None = None,
    ) -> Task | None:
        """
        Update a task.

        Only the fields that are given change; updated_at is always refreshed.

        Returns:
            Updated Task or None if not found
        """
        _validate(title, priority, recurrence, estimated_minutes)

        fields = {
            "title": title,
            "description": description,
            "due_date": due_date,
            "priority": getattr(priority, "value", priority),
            "completed": completed,
            "recurrence": getattr(recurrence, "value", recurrence),
            "recurrence_end": recurrence_end,
            "estimated_minutes": estimated_minutes,
            "reminder_time": reminder_time,
            "category": category,
        }
        # Build dynamic update
        updates = {column: value for column, value in fields.items() if value is not None}
        # An empty tag list clears the column
        if tags is not None:
            updates["tags"] = format_tags(tags)

        if not updates:
            return await self.get(task_id)

        updates["updated_at"] = now or datetime.utcnow()

        where = WhereBuilder()
        set_clause = ", ".join(f"{column} = {where.param(value)}" for column, value in updates.items())
        where.add("id = {}", task_id)

        query = self.adapter.format_query(f"""
            UPDATE {self._table_name()}
            SET {set_clause}
            WHERE {where.sql()}
        """)
        await self.adapter.execute(query, *where.params)
        return await self.get(task_id)

    async def complete(self, task_id: str, now: datetime | None = None) -> Task | None:
        """Mark a task as completed."""
        return await self.update(task_id, completed=True, now=now)

    async def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""
        query = self.adapter.format_query(f"DELETE FROM {self._table_name()} WHERE id = $1")
        result = await self.adapter.execute(query, task_id)

        deleted = result.split()[-1] != "0"
        if deleted:
            logger.info(f"Deleted task: {task_id}")
        return deleted

    def _filters(
        self,
        where: WhereBuilder,
        category: str | None = None,
        priority: str | None = None,
        completed: bool | None = None,
        recurrence: str | None = None,
        recurring: bool | None = None,
        due_before: datetime | None = None,
        due_after: datetime | None = None,
    ) -> WhereBuilder:
        if category:
            where.add("category = {}", category)
        if priority:
            where.add("priority = {}", getattr(priority, "value", priority))
        if completed is not None:
            where.add("completed = {}", completed)
        if recurrence:
            where.add("recurrence = {}", getattr(recurrence, "value", recurrence))
        if recurring is not None:
            where.add("recurrence <> {}" if recurring else "recurrence = {}", Recurrence.NONE.value)
        if due_before:
            where.add("due_date < {}", due_before)
        if due_after:
            where.add("due_date > {}", due_after)
        return where

    async def list(
        self,
        user_id: str,
        category: str | None = None,
        priority: str | None = None,
        completed: bool | None = None,
        recurrence: str | None = None,
        recurring: bool | None = None,
        due_before: datetime | None = None,
        due_after: datetime | None = None,
    ) -> list[Task]:
        """
        List a user's tasks with optional filters.

        Args:
            user_id: Owning user
            category: Filter by category
            priority: Filter by priority
            completed: Filter by completion flag
            recurrence: Filter by recurrence schedule
            recurring: True for any schedule other than NONE, False for NONE only
            due_before: Due strictly before this instant
            due_after: Due strictly after this instant

        Returns:
            List of Task objects, incomplete and soonest due first
        """
        where = WhereBuilder().add("user_id = {}", user_id)
        self._filters(
            where,
            category=category,
            priority=priority,
            completed=completed,
            recurrence=recurrence,
            recurring=recurring,
            due_before=due_before,
            due_after=due_after,
        )

        query = self.adapter.format_query(f"""
            SELECT * FROM {self._table_name()}
            WHERE {where.sql()}
            ORDER BY {ORDER_BY}
        """)
        rows = await self.adapter.fetch(query, *where.params)
        return [Task.from_dict(row) for row in rows]

    async def search(
        self,
        user_id: str,
        term: str | None = None,
        tags: builtins.list[str] | None = None,
        priority: str | None = None,
        completed: bool | None = None,
        category: str | None = None,
        recurrence: str | None = None,
        due_before: datetime | None = None,
        due_after: datetime | None = None,
        estimated_lt: int | None = None,
        estimated_gt: int | None = None,
    ) -> builtins.list[Task]:
        """
        Search a user's tasks.

        Args:
            user_id: Owning user
            term: Substring of title or description
            tags: Match tasks carrying any of these tags
            priority: Filter by priority
            completed: Filter by completion flag
            category: Filter by category
            recurrence: Filter by recurrence schedule
            due_before: Due strictly before this instant
            due_after: Due strictly after this instant
            estimated_lt: Estimated minutes strictly below
            estimated_gt: Estimated minutes strictly above

        Returns:
            List of matching Task objects
        """
        like = self.adapter.like_operator
        where = WhereBuilder().add("user_id = {}", user_id)

        if term:
            pattern = f"%{term}%"
            where.add(f"(title {like} {{}} OR description {like} {{}})", pattern, pattern)

        wanted = [tag.strip() for tag in tags or [] if tag.strip()]
        if wanted:
            conditions = " OR ".join([f"tags {like} {{}}"] * len(wanted))
            where.add(f"({conditions})", *[f"%{tag}%" for tag in wanted])

        self._filters(
            where,
            category=category,
            priority=priority,
            completed=completed,
            recurrence=recurrence,
            due_before=due_before,
            due_after=due_after,
        )
        if estimated_lt is not None:
            where.add("estimated_minutes < {}", estimated_lt)
        if estimated_gt is not None:
            where.add("estimated_minutes > {}", estimated_gt)

        query = self.adapter.format_query(f"""
            SELECT * FROM {self._table_name()}
            WHERE {where.sql()}
            ORDER BY {ORDER_BY}
        """)
        rows = await self.adapter.fetch(query, *where.params)
        return [Task.from_dict(row) for row in rows]
