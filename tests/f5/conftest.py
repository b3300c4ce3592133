"""Fixtures for F5 tests - bootstrap, configuration and CLI."""

from pathlib import Path

import pytest

from skills_tracker.config.app_config import AppConfig, DatabaseConfig


@pytest.fixture
def db_file(tmp_path) -> Path:
    return tmp_path / "db" / "tracker.db"


@pytest.fixture
def app_config(db_file) -> AppConfig:
    """Config pointing at a temporary database, sample data enabled."""
    return AppConfig(database=DatabaseConfig(path=db_file))


@pytest.fixture
def cli_env(db_file, monkeypatch, tmp_path) -> dict[str, str]:
    """Environment for CliRunner.invoke, isolated from the working directory."""
    monkeypatch.chdir(tmp_path)
    return {"SKILLS_TRACKER_DB": str(db_file)}
