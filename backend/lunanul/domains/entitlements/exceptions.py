"""Entitlements domain exceptions."""

from typing import Optional

from lunanul.core.exceptions import ConfigurationError, NotFoundException


class SpreadNotFoundError(NotFoundException):
    """Raised when no tier grants a spread, or the spread id is unknown."""

    def __init__(self, spread_id: str, message: Optional[str] = None) -> None:
        """Initialize with the offending spread id."""
        self.spread_id = spread_id
        super().__init__(message or f"Spread not granted by any tier: {spread_id}")


class GuideNotFoundError(NotFoundException):
    """Raised when no tier grants a guide, or the guide id is unknown."""

    def __init__(self, guide_id: str, message: Optional[str] = None) -> None:
        """Initialize with the offending guide id."""
        self.guide_id = guide_id
        super().__init__(message or f"Guide not granted by any tier: {guide_id}")


class UnknownQuotaError(ConfigurationError):
    """Raised when a quota is requested for a dimension the policy does not know."""

    def __init__(self, feature_key: str, message: Optional[str] = None) -> None:
        """Initialize with the unknown feature key."""
        self.feature_key = feature_key
        super().__init__(message or f"Unknown quota dimension: {feature_key}")


class UnknownTierError(ConfigurationError):
    """Raised when a tier value is not one of the known subscription tiers."""

    def __init__(self, tier: str, message: Optional[str] = None) -> None:
        """Initialize with the unknown tier value."""
        self.tier = tier
        super().__init__(message or f"Unknown subscription tier: {tier}")


class InconsistentPolicyError(ConfigurationError):
    """Raised when an entitlement table is incomplete or not monotonic."""
