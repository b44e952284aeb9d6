"""Tests for docsidebar_common.settings.

Tests cover defaults, environment variable overrides, explicit overrides and
fail-fast SettingsError conversion.
"""

from __future__ import annotations

import pytest

from docsidebar_common.errors import ErrorCode, SettingsError
from docsidebar_common.settings import LoggingConfig, SidebarSettings, load_settings


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_defaults(self) -> None:
        """Logging is quiet and structured by default."""
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.json_format is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """DOCSIDEBAR_LOG_* variables are read and levels normalised."""
        monkeypatch.setenv("DOCSIDEBAR_LOG_LEVEL", "debug")
        monkeypatch.setenv("DOCSIDEBAR_LOG_JSON_FORMAT", "false")
        config = LoggingConfig()
        assert config.level == "DEBUG"
        assert config.json_format is False

    def test_rejects_unknown_level(self) -> None:
        """Unknown level names fail validation."""
        with pytest.raises(ValueError, match="unsupported log level"):
            LoggingConfig(level="LOUD")


class TestSidebarSettings:
    """Tests for SidebarSettings."""

    def test_defaults(self) -> None:
        """Defaults match rustdoc output."""
        settings = SidebarSettings()
        assert settings.strict_kinds is True
        assert settings.require_descriptions is False
        assert settings.filename == "sidebar-items.js"
        assert settings.render_style == "legacy"
        assert settings.logging.level == "WARNING"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """DOCSIDEBAR_* variables override defaults."""
        monkeypatch.setenv("DOCSIDEBAR_STRICT_KINDS", "false")
        monkeypatch.setenv("DOCSIDEBAR_REQUIRE_DESCRIPTIONS", "1")
        monkeypatch.setenv("DOCSIDEBAR_FILENAME", "items.js")
        monkeypatch.setenv("DOCSIDEBAR_RENDER_STYLE", "window")
        settings = load_settings()
        assert settings.strict_kinds is False
        assert settings.require_descriptions is True
        assert settings.filename == "items.js"
        assert settings.render_style == "window"

    def test_explicit_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Keyword overrides take precedence over the environment."""
        monkeypatch.setenv("DOCSIDEBAR_STRICT_KINDS", "true")
        assert load_settings(strict_kinds=False).strict_kinds is False

    def test_invalid_value_raises_settings_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Validation errors become SettingsError with field details."""
        monkeypatch.setenv("DOCSIDEBAR_RENDER_STYLE", "yaml")
        with pytest.raises(SettingsError) as exc_info:
            load_settings()
        error = exc_info.value
        assert error.code is ErrorCode.CONFIGURATION_ERROR
        fields = [entry["field"] for entry in error.context["validation_errors"]]
        assert fields == ["render_style"]
        assert error.to_problem_details()["status"] == 500

    def test_unknown_override_rejected(self) -> None:
        """Unknown settings are not silently ignored."""
        with pytest.raises(SettingsError):
            load_settings(colour=True)
