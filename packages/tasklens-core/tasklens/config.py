"""
Tasklens Configuration

Loads settings from ~/.tasklens/config.yaml with environment variable overrides.
Supports both PostgreSQL and SQLite database configurations.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import os
import logging

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".tasklens"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_PERIOD = "week"
DEFAULT_DUE_SOON_HOURS = 48


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    type: str = "sqlite"  # "sqlite" or "postgres"
    sqlite_path: str = "~/.tasklens/tasklens.db"
    postgres_url: Optional[str] = None


@dataclass
class AnalyticsConfig:
    """Analytics defaults."""

    default_period: str = DEFAULT_PERIOD
    due_soon_hours: int = DEFAULT_DUE_SOON_HOURS


@dataclass
class TasklensConfig:
    """
    Complete Tasklens configuration.

    Loaded from ~/.tasklens/config.yaml with environment variable overrides.
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for display (masks secrets)."""
        result = asdict(self)

        # Mask database URL
        if result.get("database", {}).get("postgres_url"):
            url = result["database"]["postgres_url"]
            result["database"]["postgres_url"] = url[:30] + "..." if len(url) > 30 else "***"

        return result


def _parse_database_config(data: dict) -> DatabaseConfig:
    """Parse database configuration from YAML data."""
    db_data = data.get("database", {})

    db_type = db_data.get("type", "sqlite")

    # SQLite config
    sqlite_config = db_data.get("sqlite", {})
    sqlite_path = sqlite_config.get("path", "~/.tasklens/tasklens.db")

    # PostgreSQL config
    postgres_config = db_data.get("postgres", {})
    postgres_url = postgres_config.get("url")

    # Check for URL from environment variable reference
    url_env = postgres_config.get("url_env")
    if url_env and not postgres_url:
        postgres_url = os.environ.get(url_env)

    return DatabaseConfig(
        type=db_type,
        sqlite_path=sqlite_path,
        postgres_url=postgres_url,
    )


def _parse_due_soon_hours(value, source: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid due_soon_hours from {source}: {value!r}")
        return DEFAULT_DUE_SOON_HOURS


def _parse_analytics_config(data: dict) -> AnalyticsConfig:
    """Parse analytics configuration from YAML data."""
    analytics_data = data.get("analytics", {})

    return AnalyticsConfig(
        default_period=analytics_data.get("default_period", DEFAULT_PERIOD),
        due_soon_hours=_parse_due_soon_hours(
            analytics_data.get("due_soon_hours", DEFAULT_DUE_SOON_HOURS), "config file"
        ),
    )


def load_config(config_path: Optional[Path] = None) -> TasklensConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Optional path to config file. Defaults to ~/.tasklens/config.yaml

    Returns:
        TasklensConfig instance
    """
    config_file = config_path or CONFIG_FILE
    config = TasklensConfig()

    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            config.database = _parse_database_config(data)
            config.analytics = _parse_analytics_config(data)

        except yaml.YAMLError as e:
            logger.warning(f"Could not parse config file at {config_file}: {e}")
        except (OSError, AttributeError) as e:
            logger.warning(f"Unexpected error loading config from {config_file}: {e}")

    # Environment variable overrides
    if os.environ.get("TASKLENS_DATABASE_URL"):
        config.database.type = "postgres"
        config.database.postgres_url = os.environ["TASKLENS_DATABASE_URL"]

    if os.environ.get("TASKLENS_DEFAULT_PERIOD"):
        config.analytics.default_period = os.environ["TASKLENS_DEFAULT_PERIOD"]

    if os.environ.get("TASKLENS_DUE_SOON_HOURS"):
        config.analytics.due_soon_hours = _parse_due_soon_hours(
            os.environ["TASKLENS_DUE_SOON_HOURS"], "TASKLENS_DUE_SOON_HOURS"
        )

    return config


def save_config(config: TasklensConfig, config_path: Optional[Path] = None) -> None:
    """
    Save configuration to file.

    Args:
        config: TasklensConfig instance to save
        config_path: Optional path to config file. Defaults to ~/.tasklens/config.yaml
    """
    config_file = config_path or CONFIG_FILE

    # Ensure config directory exists
    config_file.parent.mkdir(parents=True, exist_ok=True)

    # Build YAML structure
    data = {
        "database": {
            "type": config.database.type,
        },
        "analytics": {
            "default_period": config.analytics.default_period,
            "due_soon_hours": config.analytics.due_soon_hours,
        },
    }

    # Add database-specific config
    if config.database.type == "sqlite":
        data["database"]["sqlite"] = {"path": config.database.sqlite_path}
    elif config.database.postgres_url:
        data["database"]["postgres"] = {"url": config.database.postgres_url}

    # Write file
    with open(config_file, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    # Secure permissions (readable only by owner)
    config_file.chmod(0o600)

    logger.info(f"Configuration saved to {config_file}")


# Cached config instance
_config: Optional[TasklensConfig] = None


def get_config() -> TasklensConfig:
    """Get cached config instance, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> TasklensConfig:
    """Force reload config from file."""
    global _config
    _config = load_config()
    return _config
