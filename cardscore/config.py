"""Application configuration via pydantic-settings.

Connection details and engine tunables are loaded from environment variables (.env file).
Regulatory tables (weights, income thresholds, Annexure A) stay in code so they are
reviewed together with the rules that use them.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Tunables of the scoring and decision engine."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    dbr_default_net_income: Decimal = Field(
        default=Decimal("50000"),
        description="Conservative net income used by DBR when no income figure is usable",
    )
    dbr_age_override: int = Field(
        default=65,
        description="Applicants older than this are referred to RRU even when DBR passes",
    )
    decision_approve_cutoff: Decimal = Field(default=Decimal("70"), description="Final score for APPROVED")
    decision_conditional_cutoff: Decimal = Field(default=Decimal("50"), description="Final score for CONDITIONAL")


class LosSettings(BaseSettings):
    """Loan-origination and data-engine endpoints (data-access layer only)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    los_api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL serving /api/applications/{id} and /api/cbs/{id}",
    )
    data_engine_url: str = Field(
        default="http://localhost:5000",
        description="Base URL serving POST /api/dbr",
    )
    los_timeout: float = Field(default=5.0, description="Per-request timeout in seconds")
    los_connect_timeout: float = Field(default=2.0, description="Connect timeout in seconds")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.engine.dbr_default_net_income
        settings.los.los_api_base_url
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    engine: EngineSettings = Field(default_factory=EngineSettings)
    los: LosSettings = Field(default_factory=LosSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton, import this wherever settings are needed.
settings = Settings()
