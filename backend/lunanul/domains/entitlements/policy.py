"""Tier policy: the single data-driven tier-to-benefit table.

Every screen that needs to know what a tier grants asks this object instead
of switching on the tier locally.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Union

from lunanul.domains.entitlements.exceptions import (
    GuideNotFoundError,
    SpreadNotFoundError,
    UnknownQuotaError,
)
from lunanul.domains.entitlements.protocols import TierPolicyProtocol
from lunanul.domains.entitlements.types import (
    ENTITLEMENTS,
    QUOTA_FIELDS,
    TIERS_ASCENDING,
    TierRank,
    coerce_tier,
    quota_exceeds,
    validate_entitlement_table,
)
from lunanul.schemas.entitlement import Entitlement
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier

logger = logging.getLogger(__name__)


class TierPolicy(TierPolicyProtocol):
    """Pure lookup over an entitlement table.

    The table is validated on construction (complete and monotonic in tier)
    and frozen afterwards.
    """

    def __init__(self, table: Optional[Mapping[SubscriptionTier, Entitlement]] = None) -> None:
        """Initialize with ``table``, defaulting to the product's tier table."""
        table = dict(ENTITLEMENTS if table is None else table)
        validate_entitlement_table(table)
        self._table: Mapping[SubscriptionTier, Entitlement] = MappingProxyType(table)

    def entitlement_for(self, tier: Union[SubscriptionTier, str]) -> Entitlement:
        """Return the entitlement record for ``tier``."""
        return self._table[coerce_tier(tier)]

    def is_spread_allowed(
        self, tier: Union[SubscriptionTier, str], spread_id: Union[SpreadId, str]
    ) -> bool:
        """Check whether ``tier`` grants ``spread_id``.

        Unknown spread ids are never granted.
        """
        spread = _as_member(SpreadId, spread_id)
        if spread is None:
            logger.warning("Unknown spread id %r treated as not allowed", spread_id)
            return False
        return spread in self.entitlement_for(tier).allowed_spreads

    def is_guide_allowed(
        self, tier: Union[SubscriptionTier, str], guide_id: Union[GuideId, str]
    ) -> bool:
        """Check whether ``tier`` grants ``guide_id``.

        Unknown guide ids are never granted.
        """
        guide = _as_member(GuideId, guide_id)
        if guide is None:
            logger.warning("Unknown guide id %r treated as not allowed", guide_id)
            return False
        return guide in self.entitlement_for(tier).allowed_guides

    def limit_for(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> Optional[int]:
        """Return the per-period quota for ``feature_key`` (None = unlimited)."""
        feature = _as_member(FeatureKey, feature_key)
        if feature is None or feature not in QUOTA_FIELDS:
            raise UnknownQuotaError(str(getattr(feature_key, "value", feature_key)))
        return getattr(self.entitlement_for(tier), QUOTA_FIELDS[feature])

    def required_tier_for(self, spread_id: Union[SpreadId, str]) -> SubscriptionTier:
        """Return the lowest tier whose entitlement includes ``spread_id``."""
        spread = _as_member(SpreadId, spread_id)
        if spread is not None:
            for tier in TIERS_ASCENDING:
                if spread in self._table[tier].allowed_spreads:
                    return tier
        raise SpreadNotFoundError(str(getattr(spread_id, "value", spread_id)))

    def required_tier_for_guide(self, guide_id: Union[GuideId, str]) -> SubscriptionTier:
        """Return the lowest tier whose entitlement includes ``guide_id``."""
        guide = _as_member(GuideId, guide_id)
        if guide is not None:
            for tier in TIERS_ASCENDING:
                if guide in self._table[tier].allowed_guides:
                    return tier
        raise GuideNotFoundError(str(getattr(guide_id, "value", guide_id)))

    def upgrade_tier_for(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> Optional[SubscriptionTier]:
        """Return the lowest tier above ``tier`` with a larger quota, or None."""
        current = coerce_tier(tier)
        current_limit = self.limit_for(current, feature_key)
        current_rank = TierRank.from_tier(current).value
        for candidate in TIERS_ASCENDING:
            if TierRank.from_tier(candidate).value <= current_rank:
                continue
            if quota_exceeds(self.limit_for(candidate, feature_key), current_limit):
                return candidate
        return None


def _as_member(enum_cls, value):
    """Coerce ``value`` to a member of ``enum_cls``; None if it is not one."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None
