"""Configuration module for the Lunanul entitlement engine.

Provides centralized configuration management with type-safe enums.

Usage:
    from lunanul.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from lunanul.core.config.enums import Environment, LogFormat
from lunanul.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "LogFormat",
    "settings",
]

# Singleton settings instance
settings = Settings()
