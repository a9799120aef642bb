"""Tests for Settings configuration."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from rulesd_core.config import Settings, configure_logging
from rulesd_core.rules import DEFAULT_EXCLUDE_DIRS, RuleEngine


@pytest.fixture
def restore_logging():
    """Restore rulesd_core logger level after a test changes it."""
    logger = logging.getLogger("rulesd_core")
    level = logger.level
    yield
    logger.setLevel(level)


class TestSettings:
    """Tests for Settings class."""

    def test_from_environment(self, tmp_path):
        with patch.dict(os.environ, {
            "RULESD_RULES_DIR": str(tmp_path),
            "RULESD_MAX_WORKERS": "4",
            "RULESD_EXCLUDE_DIRS": "drafts, archive",
            "RULESD_LOG_LEVEL": "debug",
        }):
            settings = Settings.from_environment()

        assert settings.rules_dir == tmp_path
        assert settings.max_workers == 4
        assert {"drafts", "archive"} <= settings.exclude_dirs
        assert DEFAULT_EXCLUDE_DIRS <= settings.exclude_dirs
        assert settings.log_level == "DEBUG"
        assert settings.has_rules_dir is True

    def test_defaults(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_environment(start_path=tmp_path)

        assert settings.max_workers == 1
        assert settings.exclude_dirs == DEFAULT_EXCLUDE_DIRS
        assert settings.log_level == "WARNING"

    def test_default_rules_dir_is_git_root(self, tmp_path):
        (tmp_path / ".git").mkdir()
        nested = tmp_path / "docs" / "guides"
        nested.mkdir(parents=True)

        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_environment(start_path=nested)

        assert settings.rules_dir == tmp_path.resolve()

    @pytest.mark.parametrize("value", ["zero", "", "-3", "0"])
    def test_invalid_max_workers(self, value):
        with patch.dict(os.environ, {"RULESD_MAX_WORKERS": value}):
            settings = Settings.from_environment()

        assert settings.max_workers == 1

    def test_create_engine(self, rules_dir):
        settings = Settings(rules_dir=rules_dir, max_workers=2)

        engine = settings.create_engine()
        engine.initialize()

        assert isinstance(engine, RuleEngine)
        assert engine.store.max_workers == 2
        assert len(engine.get_all_rules()) == 6


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_package_level(self, restore_logging):
        configure_logging("debug")
        assert logging.getLogger("rulesd_core").level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self, restore_logging):
        configure_logging("LOUD")
        assert logging.getLogger("rulesd_core").level == logging.WARNING
