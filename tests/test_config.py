"""
Tests for Config — Settings hierarchy and validation

These tests validate:
- Defaults under ~/.gulp
- Config hierarchy (env > user file > defaults)
- Malformed user config is ignored
- Section validation
- InitializerConfig from environment
"""

import pytest
import yaml
from pathlib import Path

from gulp.config import Config, ConfigManager, DisplayConfig, LoggingConfig, StoreConfig, gulp_home
from gulp.initializer.config import InitializerConfig


class TestDefaults:
    """Default values."""

    def test_store_path_under_home(self):
        """Store lives at ~/.gulp/db/resources.sqlite3 by default."""
        assert StoreConfig().store_path == gulp_home() / "db" / "resources.sqlite3"

    def test_log_dir_under_home(self):
        assert LoggingConfig().log_dir == gulp_home() / "logs"

    def test_explicit_paths(self, tmp_path):
        assert StoreConfig(path=str(tmp_path / "s.db")).store_path == tmp_path / "s.db"
        assert LoggingConfig(directory=str(tmp_path)).log_dir == tmp_path

    def test_default_color_auto(self):
        assert Config().display.color == "auto"


class TestValidation:
    """Section validation returns a message or None."""

    def test_valid_defaults(self):
        assert Config().validate() is None

    def test_bad_color(self):
        assert "Unknown color" in DisplayConfig(color="rainbow").validate()

    def test_bad_level(self):
        assert "Unknown log level" in LoggingConfig(level="LOUD").validate()

    def test_level_case_insensitive(self):
        assert LoggingConfig(level="debug").validate() is None

    def test_bad_recent_lines(self):
        assert LoggingConfig(recent_lines=0).validate() is not None


class TestHierarchy:
    """Env > user file > defaults."""

    def test_user_file(self, tmp_path):
        (tmp_path / "config.yaml").write_text(yaml.dump({"display": {"color": "never"}}))
        config = ConfigManager(tmp_path).load()
        assert config.display.color == "never"
        assert config.logging.level == "INFO"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text(yaml.dump({"display": {"color": "never"}}))
        monkeypatch.setenv("GULP_COLOR", "always")
        monkeypatch.setenv("GULP_STORE_PATH", str(tmp_path / "x.db"))
        config = ConfigManager(tmp_path).load()
        assert config.display.color == "always"
        assert config.store.store_path == tmp_path / "x.db"

    def test_malformed_file_ignored(self, tmp_path):
        (tmp_path / "config.yaml").write_text("display: [unclosed")
        config = ConfigManager(tmp_path).load()
        assert config.display.color == "auto"

    @pytest.mark.parametrize("text", [
        "display: null\n",
        "display: [never]\n",
        "logging: {recent_lines: abc}\n",
        "logging: {recent_lines: [1]}\n",
        "- just\n- a list\n",
    ])
    def test_malformed_values_ignored(self, tmp_path, text):
        (tmp_path / "config.yaml").write_text(text)
        config = ConfigManager(tmp_path).load()
        assert config.display.color == "auto"
        assert config.logging.recent_lines == 200

    def test_env_applies_when_file_ignored(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("logging: {recent_lines: abc}\n")
        monkeypatch.setenv("GULP_LOG_LEVEL", "DEBUG")
        assert ConfigManager(tmp_path).load().logging.level == "DEBUG"


class TestInitializerConfig:
    """Worker pool sizing."""

    def test_default_workers(self):
        assert InitializerConfig.from_env().workers == 4

    def test_env_workers(self, monkeypatch):
        monkeypatch.setenv("GULP_INIT_WORKERS", "2")
        assert InitializerConfig.from_env().workers == 2

    def test_invalid_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("GULP_INIT_WORKERS", "many")
        assert InitializerConfig.from_env().workers == 4

    def test_validate(self):
        with pytest.raises(ValueError, match="GULP_INIT_WORKERS"):
            InitializerConfig(workers=0).validate()
