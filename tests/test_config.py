"""Tests for YAML config loading and logging setup."""

import logging

import pytest

from common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled
from constants import Constants, _load_yaml_config, apply_config


@pytest.fixture(autouse=True)
def _restore_constants(monkeypatch):
    """Keep Constants mutations local to each test."""
    monkeypatch.setattr(Constants, "BREW_PATH", Constants.BREW_PATH)
    monkeypatch.setattr(Constants, "SUPPORTED_PLATFORMS", Constants.SUPPORTED_PLATFORMS)
    monkeypatch.setattr(Constants, "DEFAULT_CONFIG_PATHS", ())
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    monkeypatch.delenv(Constants.ENV_BREW_PATH, raising=False)


class TestLoadYamlConfig:
    """Test config discovery and parsing."""

    def test_explicit_path(self, tmp_path):
        cfg_file = tmp_path / "brewprov.yml"
        cfg_file.write_text("homebrew:\n  brew_path: /opt/homebrew/bin/brew\n", encoding="utf-8")
        assert _load_yaml_config(str(cfg_file)) == {"homebrew": {"brew_path": "/opt/homebrew/bin/brew"}}

    def test_env_path(self, tmp_path, monkeypatch):
        cfg_file = tmp_path / "env.yml"
        cfg_file.write_text("homebrew: {}\n", encoding="utf-8")
        monkeypatch.setenv(Constants.ENV_CONFIG, str(cfg_file))
        assert _load_yaml_config() == {"homebrew": {}}

    def test_missing_explicit_path_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="constants"):
            assert _load_yaml_config(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_invalid_yaml(self, tmp_path, caplog):
        cfg_file = tmp_path / "bad.yml"
        cfg_file.write_text("homebrew: [unclosed\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="constants"):
            assert _load_yaml_config(str(cfg_file)) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping(self, tmp_path):
        cfg_file = tmp_path / "list.yml"
        cfg_file.write_text("- a\n- b\n", encoding="utf-8")
        assert _load_yaml_config(str(cfg_file)) == {}

    def test_empty_file(self, tmp_path):
        cfg_file = tmp_path / "empty.yml"
        cfg_file.write_text("", encoding="utf-8")
        assert _load_yaml_config(str(cfg_file)) == {}

    def test_nothing_found(self):
        assert _load_yaml_config() == {}


class TestApplyConfig:
    """Test mapping config onto Constants."""

    def test_brew_path_and_platforms(self):
        apply_config({"homebrew": {"brew_path": "/opt/homebrew/bin/brew",
                                   "supported_platforms": ["Darwin", "linux"]}})
        assert Constants.BREW_PATH == "/opt/homebrew/bin/brew"
        assert Constants.SUPPORTED_PLATFORMS == ("darwin", "linux")

    def test_env_overrides_file(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_BREW_PATH, "/custom/brew")
        apply_config({"homebrew": {"brew_path": "/opt/homebrew/bin/brew"}})
        assert Constants.BREW_PATH == "/custom/brew"

    def test_ignores_bad_values(self):
        before = Constants.BREW_PATH
        apply_config({"homebrew": {"brew_path": "", "supported_platforms": "darwin"}})
        apply_config({"homebrew": "not a mapping"})
        apply_config({})
        assert Constants.BREW_PATH == before
        assert Constants.SUPPORTED_PLATFORMS == ("darwin",)


class TestLoggingUtils:
    """Test logging helpers."""

    def test_configure_logging_idempotent(self):
        root = logging.getLogger()
        old_level = root.level
        try:
            configure_logging("WARNING")
            configure_logging("DEBUG")
            handlers = [h for h in root.handlers if h.get_name() == "brewprov-stderr"]
            assert len(handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            for h in [h for h in root.handlers if h.get_name() == "brewprov-stderr"]:
                root.removeHandler(h)
            root.setLevel(old_level)

    def test_extra_context_drops_none(self):
        assert extra_context(event="x", outcome=None, count=0) == {"event": "x", "count": 0}

    def test_is_debug_enabled(self):
        logger = logging.getLogger("brewprov.test")
        logger.setLevel(logging.INFO)
        assert is_debug_enabled(logger) is False
        logger.setLevel(logging.DEBUG)
        assert is_debug_enabled(logger) is True

    def test_timer(self):
        with Timer() as t:
            pass
        assert t.duration_ms() >= 0
