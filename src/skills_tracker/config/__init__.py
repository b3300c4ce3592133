"""Configuration package for the skills tracker."""

from skills_tracker.config.app_config import (
    AnalyticsConfig,
    AppConfig,
    DatabaseConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AnalyticsConfig",
    "AppConfig",
    "DatabaseConfig",
    "clear_config_cache",
    "load_app_config",
]
