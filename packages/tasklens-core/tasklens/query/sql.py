"""
SQL-backed task query using a DatabaseAdapter.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from tasklens.db.interface import DatabaseAdapter
from tasklens.models.analytics import PeriodWindow
from tasklens.models.task import Priority
from tasklens.query.interface import TaskQuery, check_group_field

logger = logging.getLogger(__name__)


class WhereBuilder:
    """
    Collects WHERE conditions with $1, $2 placeholders.

    Placeholders are numbered in the order they are added, so the query
    can be converted to qmark style without reordering parameters.
    """

    def __init__(self):
        self.conditions: List[str] = []
        self.params: List[Any] = []

    def param(self, value: Any) -> str:
        self.params.append(value)
        return f"${len(self.params)}"

    def add(self, condition: str, *values: Any) -> "WhereBuilder":
        """Add a condition; each `{}` in it is replaced by a new placeholder."""
        self.conditions.append(condition.format(*[self.param(v) for v in values]))
        return self

    def between(self, column: str, window: Optional[PeriodWindow]) -> "WhereBuilder":
        if window is not None:
            self.add(f"{column} >= {{}} AND {column} <= {{}}", window.start, window.end)
        return self

    def sql(self) -> str:
        return " AND ".join(self.conditions) if self.conditions else "TRUE"


class SQLTaskQuery(TaskQuery):
    """Task query that pushes filtering and grouping into SQL."""

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def _where(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        updated_between: Optional[PeriodWindow] = None,
        created_between: Optional[PeriodWindow] = None,
        due_before: Optional[datetime] = None,
        due_between: Optional[PeriodWindow] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> WhereBuilder:
        where = WhereBuilder().add("user_id = {}", user_id)

        if completed is not None:
            where.add("completed = {}", completed)
        where.between("updated_at", updated_between)
        where.between("created_at", created_between)
        if due_before is not None:
            where.add("due_date < {}", due_before)
        where.between("due_date", due_between)
        if category is not None:
            where.add("category = {}", category)
        if priority is not None:
            where.add("priority = {}", Priority(priority).value)

        return where

    async def count(self, user_id: str, **filters) -> int:
        where = self._where(user_id, **filters)
        query = self.adapter.format_query(
            f"SELECT COUNT(*) FROM {self.adapter.table('tasks')} WHERE {where.sql()}"
        )
        return int(await self.adapter.fetchval(query, *where.params) or 0)

    async def sum_estimated_minutes(self, user_id: str, **filters) -> int:
        where = self._where(user_id, **filters)
        query = self.adapter.format_query(
            f"SELECT COALESCE(SUM(estimated_minutes), 0) FROM {self.adapter.table('tasks')} "
            f"WHERE {where.sql()}"
        )
        return int(await self.adapter.fetchval(query, *where.params) or 0)

    async def group_count(self, user_id: str, field: str) -> Dict[Optional[str], int]:
        column = check_group_field(field)
        where = self._where(user_id)
        query = self.adapter.format_query(f"""
            SELECT {column} AS value, COUNT(*) AS count
            FROM {self.adapter.table('tasks')}
            WHERE {where.sql()}
            GROUP BY {column}
            ORDER BY {column}
        """)
        rows = await self.adapter.fetch(query, *where.params)
        return {row["value"]: int(row["count"]) for row in rows}
