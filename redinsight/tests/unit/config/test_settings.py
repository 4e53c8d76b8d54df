"""Tests for settings and logging setup."""

import logging

from redinsight.config.settings import Settings
from redinsight.utils.logging_utils import setup_logging


class TestSettings:
    """Test cases for the Settings class."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.PORT == 3000
        assert settings.UPSTREAM_BASE_URL == "https://www.reddit.com"
        assert settings.UPSTREAM_TIMEOUT_SECONDS == 10.0
        assert settings.upstream_headers["User-Agent"] == "RedInsight/1.0 (Educational Project)"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "2.5")
        settings = Settings(_env_file=None)
        assert settings.PORT == 8080
        assert settings.UPSTREAM_TIMEOUT_SECONDS == 2.5

    def test_comma_separated_lists(self):
        settings = Settings(_env_file=None, CORS_ORIGINS="http://a.test, http://b.test", CORS_ALLOW_HEADERS="*")
        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
        assert settings.CORS_ALLOW_HEADERS == ["*"]
        assert "OPTIONS" in settings.CORS_ALLOW_METHODS


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_loads_yaml_config(self):
        setup_logging(log_level="debug")
        assert logging.getLogger("redinsight").level == logging.DEBUG
        setup_logging(log_level="info")

    def test_missing_file_falls_back(self, tmp_path, mocker):
        basic_config = mocker.patch("redinsight.utils.logging_utils.logging.basicConfig")
        setup_logging(config_path=tmp_path / "missing.yaml", log_level="warning")
        basic_config.assert_called_once_with(level="WARNING")

    def test_invalid_yaml_falls_back(self, tmp_path, mocker):
        config_path = tmp_path / "logging.yaml"
        config_path.write_text("version: [unclosed")
        basic_config = mocker.patch("redinsight.utils.logging_utils.logging.basicConfig")
        setup_logging(config_path=config_path)
        basic_config.assert_called_once()
