"""Usage domain exceptions."""

from typing import Optional

from lunanul.core.exceptions import InvalidArgumentError, InvalidStateError, LunanulException


class InvalidFeatureKeyError(InvalidArgumentError):
    """Raised when the ledger is called with a feature key it does not track."""

    def __init__(self, feature_key: str, message: Optional[str] = None) -> None:
        """Initialize with the offending feature key."""
        self.feature_key = feature_key
        super().__init__(message or f"Untracked feature key: {feature_key}")


class UsageLimitExceededError(InvalidStateError):
    """Raised when an action would exceed the tier's quota for the period."""

    def __init__(
        self,
        feature_key: str,
        limit: int,
        current_usage: int,
        upgrade_tier: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """Initialize with feature key, limit, current usage and upgrade target."""
        if message is None:
            message = f"Usage limit exceeded for {feature_key}: {current_usage}/{limit}"
        self.feature_key = feature_key
        self.limit = limit
        self.current_usage = current_usage
        self.upgrade_tier = upgrade_tier
        super().__init__(message)


class UsageStoreError(LunanulException):
    """Raised when persisted usage state cannot be read or written."""
