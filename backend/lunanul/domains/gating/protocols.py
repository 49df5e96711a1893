"""Gating domain protocols."""

from typing import Protocol, Union, runtime_checkable

from lunanul.schemas.gating import GateDecision
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier


@runtime_checkable
class FeatureGateServiceProtocol(Protocol):
    """Single entry point for "may this tier do X" questions."""

    async def can_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> bool:
        """Preview whether ``tier`` may use one more unit of ``feature_key``."""
        ...

    async def try_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> GateDecision:
        """Consume one unit if allowed; name the upgrade tier if not."""
        ...

    async def ensure_can_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> None:
        """Raise UsageLimitExceededError if the action is not allowed."""
        ...

    def check_spread(
        self, tier: Union[SubscriptionTier, str], spread_id: Union[SpreadId, str]
    ) -> GateDecision:
        """Gate access to a spread."""
        ...

    def check_guide(
        self, tier: Union[SubscriptionTier, str], guide_id: Union[GuideId, str]
    ) -> GateDecision:
        """Gate access to a guide."""
        ...

    def ads_enabled(self, tier: Union[SubscriptionTier, str]) -> bool:
        """Whether ads are shown to ``tier``."""
        ...
