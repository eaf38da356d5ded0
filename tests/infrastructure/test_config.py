"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from catalog.infrastructure.config import Config


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("CATALOG_DATA_DIR", "CATALOG_LOG_LEVEL", "CATALOG_SNAPSHOT_DEPTH"):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_env()
        assert config.data_dir.name == "data"
        assert config.log_level == "INFO"
        assert config.snapshot_depth == 2

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CATALOG_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("CATALOG_LOG_LEVEL", "debug")
        monkeypatch.setenv("CATALOG_SNAPSHOT_DEPTH", "3")
        config = Config.from_env()
        assert config.data_dir == Path(tmp_path)
        assert config.log_level == "DEBUG"
        assert config.snapshot_depth == 3

    @pytest.mark.parametrize("value", ["0", "two"])
    def test_bad_depth(self, monkeypatch, value):
        monkeypatch.setenv("CATALOG_SNAPSHOT_DEPTH", value)
        with pytest.raises(ValueError, match="CATALOG_SNAPSHOT_DEPTH"):
            Config.from_env()

    def test_bad_log_level(self, monkeypatch):
        monkeypatch.setenv("CATALOG_LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError, match="CATALOG_LOG_LEVEL"):
            Config.from_env()

    def test_bad_depth_keeps_cause(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SNAPSHOT_DEPTH", "two")
        with pytest.raises(ValueError) as excinfo:
            Config.from_env()
        assert isinstance(excinfo.value.__cause__, ValueError)
