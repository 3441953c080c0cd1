"""
Task query collaborators for analytics.
"""

from tasklens.query.interface import GROUPABLE_FIELDS, TaskQuery
from tasklens.query.memory import InMemoryTaskQuery
from tasklens.query.sql import SQLTaskQuery, WhereBuilder

__all__ = [
    "TaskQuery",
    "InMemoryTaskQuery",
    "SQLTaskQuery",
    "WhereBuilder",
    "GROUPABLE_FIELDS",
]
