"""Application settings.

All defaults are defined here in the schema. Values are read from the
environment (or a ``.env`` file) by Pydantic Settings.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lunanul.core.config.enums import Environment, LogFormat


class Settings(BaseSettings):
    """Settings for the entitlement engine.

    Env vars map 1:1 to field names:
        ENVIRONMENT=prd
        USAGE_STORE_PATH=/var/lib/lunanul/usage.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.TEXT

    USAGE_STORE_PATH: Optional[Path] = Field(
        None, description="JSON file holding persisted usage counters; unset keeps usage in memory"
    )
    USAGE_HISTORY_PERIODS: int = Field(
        12, ge=0, description="Number of past periods kept per feature in usage history"
    )
    APPROACHING_LIMIT_RATIO: float = Field(
        0.8, gt=0, le=1, description="Usage ratio at which a feature counts as approaching its limit"
    )
    GATING_FAIL_CLOSED: Optional[bool] = Field(
        None, description="Deny instead of raising on configuration errors; defaults to ENVIRONMENT=prd"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def fail_closed(self) -> bool:
        """Whether gate queries degrade to deny on configuration errors."""
        if self.GATING_FAIL_CLOSED is not None:
            return self.GATING_FAIL_CLOSED
        return self.ENVIRONMENT == Environment.PRD
