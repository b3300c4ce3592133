"""Tests for application configuration (F5)."""

from pathlib import Path

import pytest

from skills_tracker.config import app_config
from skills_tracker.config.app_config import (
    AppConfig,
    clear_config_cache,
    load_app_config,
)


@pytest.fixture
def in_tmp(tmp_path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_config(root: Path, text: str) -> None:
    path = root / app_config.CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_defaults_without_file(self, in_tmp):
        config = load_app_config()

        assert isinstance(config, AppConfig)
        assert config.database.path == Path("db/skills_tracker.db")
        assert config.analytics.attention_count == 3
        assert config.analytics.top_performers == 3
        assert config.analytics.support_threshold == 50.0
        assert config.seed_sample_data is True

    def test_reads_yaml_file(self, in_tmp):
        _write_config(
            in_tmp,
            "database:\n"
            "  path: data/tracker.db\n"
            "analytics:\n"
            "  attention_count: 5\n"
            "seed_sample_data: false\n",
        )

        config = load_app_config()

        assert config.database.path == Path("data/tracker.db")
        assert config.analytics.attention_count == 5
        # Missing keys fall back to defaults
        assert config.analytics.support_threshold == 50.0
        assert config.seed_sample_data is False

    def test_empty_yaml_file_uses_defaults(self, in_tmp):
        _write_config(in_tmp, "")

        config = load_app_config()

        assert config.analytics.attention_count == 3

    def test_env_overrides_db_path(self, in_tmp, monkeypatch):
        _write_config(in_tmp, "database:\n  path: data/tracker.db\n")
        monkeypatch.setenv("SKILLS_TRACKER_DB", "/tmp/other.db")

        config = load_app_config()

        assert config.database.path == Path("/tmp/other.db")

    def test_cached_until_cleared(self, in_tmp):
        first = load_app_config()
        _write_config(in_tmp, "analytics:\n  attention_count: 9\n")

        assert load_app_config() is first
        assert load_app_config(force_reload=True).analytics.attention_count == 9

        clear_config_cache()
        assert load_app_config() is not first
