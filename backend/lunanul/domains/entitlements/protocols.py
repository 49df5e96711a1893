"""Entitlements domain protocols."""

from typing import Optional, Protocol, Union, runtime_checkable

from lunanul.schemas.entitlement import Entitlement
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier


@runtime_checkable
class TierPolicyProtocol(Protocol):
    """Read-only lookup from subscription tier to what it grants.

    Implementations hold no mutable state, so they are safe to share.
    """

    def entitlement_for(self, tier: Union[SubscriptionTier, str]) -> Entitlement:
        """Return the entitlement record for ``tier``."""
        ...

    def is_spread_allowed(
        self, tier: Union[SubscriptionTier, str], spread_id: Union[SpreadId, str]
    ) -> bool:
        """Check whether ``tier`` grants ``spread_id``."""
        ...

    def is_guide_allowed(
        self, tier: Union[SubscriptionTier, str], guide_id: Union[GuideId, str]
    ) -> bool:
        """Check whether ``tier`` grants ``guide_id``."""
        ...

    def limit_for(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> Optional[int]:
        """Return the per-period quota (None = unlimited).

        Raises ConfigurationError for an unknown quota dimension.
        """
        ...

    def required_tier_for(self, spread_id: Union[SpreadId, str]) -> SubscriptionTier:
        """Return the lowest tier granting ``spread_id``."""
        ...

    def required_tier_for_guide(self, guide_id: Union[GuideId, str]) -> SubscriptionTier:
        """Return the lowest tier granting ``guide_id``."""
        ...

    def upgrade_tier_for(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> Optional[SubscriptionTier]:
        """Return the lowest higher tier with a larger quota, if any."""
        ...
