"""
Pytest configuration and fixtures for tasklens tests.
"""

import pytest
import sys
import tempfile
from datetime import datetime
from pathlib import Path

# Add packages to path for testing
packages_dir = Path(__file__).parent.parent / "packages"
sys.path.insert(0, str(packages_dir / "tasklens-core"))

USER = "user-1"


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / ".tasklens"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
async def sqlite_db():
    """A connected SQLite adapter with the tasks table created."""
    from tasklens.db.schema import init_schema
    from tasklens.db.sqlite import SQLiteAdapter

    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = SQLiteAdapter(str(Path(tmpdir) / "test.db"))
        await adapter.connect()
        await init_schema(adapter)

        yield adapter

        await adapter.close()


@pytest.fixture
async def task_service(sqlite_db):
    """TaskService bound to a temporary SQLite database."""
    from tasklens.services.tasks import TaskService

    return TaskService(adapter=sqlite_db)


@pytest.fixture
def make_task():
    """Factory for Task objects owned by USER with fixed timestamps."""
    from tasklens.models.task import Task

    def _make(**overrides):
        data = {
            "title": "Task",
            "user_id": USER,
            "created_at": datetime(2024, 1, 1, 9, 0),
        }
        data.update(overrides)
        return Task(**data)

    return _make


@pytest.fixture
def sample_task_data():
    """Sample task data for testing."""
    return {
        "title": "Water the plants",
        "description": "Both balconies",
        "priority": "HIGH",
        "recurrence": "WEEKLY",
        "estimated_minutes": 15,
        "tags": ["home", "garden"],
        "category": "Chores",
    }
