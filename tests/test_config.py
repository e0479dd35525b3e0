"""Tests for settings loading and logging setup."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
import structlog
from pydantic import ValidationError

from cardscore.config import EngineSettings, LosSettings, Settings
from cardscore.logging_config import configure_logging


class TestSettings:
    def test_defaults(self) -> None:
        engine = EngineSettings()
        assert engine.dbr_default_net_income == Decimal("50000")
        assert engine.dbr_age_override == 65
        assert engine.decision_approve_cutoff == Decimal("70")
        assert engine.decision_conditional_cutoff == Decimal("50")

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("DBR_AGE_OVERRIDE", "70")
        monkeypatch.setenv("LOS_TIMEOUT", "9.5")
        assert EngineSettings().dbr_age_override == 70
        assert LosSettings().los_timeout == 9.5

    def test_log_level_uppercased(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_is_production(self) -> None:
        assert Settings(environment="production").is_production is True
        assert Settings(environment="development").is_production is False


class TestConfigureLogging:
    def test_sets_root_level(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_structlog_configured(self) -> None:
        configure_logging("INFO")
        assert structlog.is_configured()

    def test_console_renderer_outside_production(self, monkeypatch) -> None:
        monkeypatch.setattr("cardscore.logging_config.settings", Settings(environment="development"))
        configure_logging("INFO")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer_in_production(self, monkeypatch) -> None:
        monkeypatch.setattr("cardscore.logging_config.settings", Settings(environment="production"))
        configure_logging("INFO")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
