"""Application configuration loader.

Loads configuration from data/config/skills_tracker_v1.yaml, falling back
to built-in defaults. The SKILLS_TRACKER_DB environment variable overrides
the database path.

Usage:
    from skills_tracker.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/skills_tracker_v1.yaml")
DB_PATH_ENV = "SKILLS_TRACKER_DB"


@dataclass
class DatabaseConfig:
    """Where the SQLite database lives."""

    path: Path = Path("db/skills_tracker.db")


@dataclass
class AnalyticsConfig:
    """Defaults for report commands."""

    attention_count: int = 3
    top_performers: int = 3
    support_threshold: float = 50.0


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    seed_sample_data: bool = True


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "path": "db/skills_tracker.db",
        },
        "analytics": {
            "attention_count": 3,
            "top_performers": 3,
            "support_threshold": 50.0,
        },
        "seed_sample_data": True,
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    db_data = data.get("database") or {}
    database = DatabaseConfig(
        path=Path(db_data.get("path", defaults["database"]["path"])),
    )

    analytics_data = data.get("analytics") or {}
    analytics_defaults = defaults["analytics"]
    analytics = AnalyticsConfig(
        attention_count=int(
            analytics_data.get("attention_count", analytics_defaults["attention_count"])
        ),
        top_performers=int(
            analytics_data.get("top_performers", analytics_defaults["top_performers"])
        ),
        support_threshold=float(
            analytics_data.get("support_threshold", analytics_defaults["support_threshold"])
        ),
    )

    return AppConfig(
        database=database,
        analytics=analytics,
        seed_sample_data=bool(data.get("seed_sample_data", defaults["seed_sample_data"])),
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    config = _parse_config(data)

    env_db = os.environ.get(DB_PATH_ENV)
    if env_db:
        config.database.path = Path(env_db)

    _cached_config = config
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
