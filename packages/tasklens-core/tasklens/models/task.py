"""
Task model for Tasklens.

Tasks are owned by a single user and may repeat on a fixed schedule.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List
from uuid import uuid4


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Recurrence(str, Enum):
    """
    Recurrence schedules.

    CUSTOM has no rule of its own yet and advances like DAILY.
    """

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKDAYS = "WEEKDAYS"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


TAG_SEPARATOR = ","


def parse_tags(value) -> List[str]:
    """Split the stored comma-separated tag string into a list."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return [tag.strip() for tag in value.split(TAG_SEPARATOR) if tag.strip()]


def format_tags(tags: List[str]) -> Optional[str]:
    """Join tags for storage. Empty lists are stored as NULL."""
    if not tags:
        return None
    return TAG_SEPARATOR.join(tags)


def _parse_datetime(value):
    if value and isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Task:
    """
    A unit of work with an optional due date and recurrence.

    Attributes:
        id: Unique identifier (UUID)
        title: Task title
        user_id: Owning user
        description: Optional details
        due_date: When the task is due
        priority: Priority level
        completed: Whether the task is done
        created_at: When the task was created, assigned by TaskService
        updated_at: When last modified
        recurrence: Recurrence schedule
        recurrence_end: No occurrences are generated after this instant
        estimated_minutes: Estimated effort
        reminder_time: When to remind, usually a fixed offset before due_date
        tags: Short labels
        category: Free-text grouping label
    """

    title: str
    id: str = field(default_factory=lambda: str(uuid4()))
    user_id: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = Priority.NORMAL
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    recurrence: Recurrence = Recurrence.NONE
    recurrence_end: Optional[datetime] = None
    estimated_minutes: Optional[int] = None
    reminder_time: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    category: Optional[str] = None

    def __post_init__(self):
        self.priority = Priority(self.priority)
        self.recurrence = Recurrence(self.recurrence)
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def is_recurring(self) -> bool:
        """Check if the task repeats."""
        return self.recurrence != Recurrence.NONE

    def is_overdue(self, now: datetime) -> bool:
        """Check if the task is incomplete and past due at `now`."""
        return not self.completed and self.due_date is not None and self.due_date < now

    def to_dict(self) -> dict:
        """Convert to dictionary for storage/serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "due_date": _isoformat(self.due_date),
            "priority": self.priority.value,
            "completed": self.completed,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
            "recurrence": self.recurrence.value,
            "recurrence_end": _isoformat(self.recurrence_end),
            "estimated_minutes": self.estimated_minutes,
            "reminder_time": _isoformat(self.reminder_time),
            "tags": self.tags,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from dictionary (e.g., database row)."""
        return cls(
            id=data.get("id"),
            user_id=data.get("user_id"),
            title=data.get("title", ""),
            description=data.get("description"),
            due_date=_parse_datetime(data.get("due_date")),
            priority=data.get("priority") or Priority.NORMAL,
            completed=bool(data.get("completed", False)),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
            recurrence=data.get("recurrence") or Recurrence.NONE,
            recurrence_end=_parse_datetime(data.get("recurrence_end")),
            estimated_minutes=data.get("estimated_minutes"),
            reminder_time=_parse_datetime(data.get("reminder_time")),
            # Stored as comma-separated text
            tags=parse_tags(data.get("tags")),
            category=data.get("category"),
        )


@dataclass
class NewTaskRecord:
    """
    A task that has not been persisted yet.

    Storage assigns identity and timestamps on creation. `completed` is
    always False for a new record.
    """

    title: str
    user_id: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = Priority.NORMAL
    recurrence: Recurrence = Recurrence.NONE
    recurrence_end: Optional[datetime] = None
    estimated_minutes: Optional[int] = None
    reminder_time: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    category: Optional[str] = None
    completed: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "due_date": _isoformat(self.due_date),
            "priority": Priority(self.priority).value,
            "completed": self.completed,
            "recurrence": Recurrence(self.recurrence).value,
            "recurrence_end": _isoformat(self.recurrence_end),
            "estimated_minutes": self.estimated_minutes,
            "reminder_time": _isoformat(self.reminder_time),
            "tags": list(self.tags),
            "category": self.category,
        }


# Valid priority values
TASK_PRIORITIES = tuple(p.value for p in Priority)

# Valid recurrence values
TASK_RECURRENCES = tuple(r.value for r in Recurrence)
