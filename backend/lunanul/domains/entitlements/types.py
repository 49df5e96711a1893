"""Entitlement domain types and pure business logic.

The default tier table, tier ranking and the pure helpers the policy is
built from. No IO. Everything here is deterministic.
"""

from enum import Enum
from typing import Mapping, Optional, Union

from lunanul.domains.entitlements.exceptions import InconsistentPolicyError, UnknownTierError
from lunanul.schemas.entitlement import Entitlement
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier


class TierRank(Enum):
    """Tier hierarchy for upgrade/downgrade decisions."""

    SEEKER = 0
    MYSTIC = 1
    ORACLE = 2

    @classmethod
    def from_tier(cls, tier: SubscriptionTier) -> "TierRank":
        """Convert SubscriptionTier to TierRank."""
        mapping = {
            SubscriptionTier.SEEKER: cls.SEEKER,
            SubscriptionTier.MYSTIC: cls.MYSTIC,
            SubscriptionTier.ORACLE: cls.ORACLE,
        }
        return mapping[tier]


class ChangeType(Enum):
    """Type of tier change."""

    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    SAME = "same"


# Tiers in ascending rank order.
TIERS_ASCENDING: tuple[SubscriptionTier, ...] = tuple(
    sorted(SubscriptionTier, key=lambda t: TierRank.from_tier(t).value)
)

# Quota dimension -> Entitlement field holding its limit.
QUOTA_FIELDS: dict[FeatureKey, str] = {
    FeatureKey.AI_READINGS: "ai_reading_limit",
    FeatureKey.MANUAL_INTERPRETATIONS: "monthly_interpretation_limit",
    FeatureKey.JOURNAL_ENTRIES: "journal_entry_limit",
    FeatureKey.AUDIO_READINGS: "audio_reading_limit",
}

# Tier configuration. None = unlimited.
ENTITLEMENTS: dict[SubscriptionTier, Entitlement] = {
    SubscriptionTier.SEEKER: Entitlement(
        allowed_spreads=frozenset({SpreadId.SINGLE_CARD, SpreadId.THREE_CARD}),
        allowed_guides=frozenset({GuideId.HEALER, GuideId.MENTOR}),
        ai_reading_limit=3,
        monthly_interpretation_limit=5,
        journal_entry_limit=3,
        audio_reading_limit=0,
        ads_enabled=True,
    ),
    SubscriptionTier.MYSTIC: Entitlement(
        allowed_spreads=frozenset(SpreadId),
        allowed_guides=frozenset(GuideId),
        ai_reading_limit=None,
        monthly_interpretation_limit=None,
        journal_entry_limit=None,
        audio_reading_limit=0,
        ads_enabled=False,
    ),
    SubscriptionTier.ORACLE: Entitlement(
        allowed_spreads=frozenset(SpreadId),
        allowed_guides=frozenset(GuideId),
        ai_reading_limit=None,
        monthly_interpretation_limit=None,
        journal_entry_limit=None,
        audio_reading_limit=None,
        ads_enabled=False,
    ),
}


def coerce_tier(tier: Union[SubscriptionTier, str]) -> SubscriptionTier:
    """Accept a tier enum or its string value."""
    if isinstance(tier, SubscriptionTier):
        return tier
    try:
        return SubscriptionTier(tier)
    except ValueError:
        raise UnknownTierError(str(tier)) from None


def is_paid_tier(tier: SubscriptionTier) -> bool:
    """Check if a tier requires payment."""
    return tier in {SubscriptionTier.MYSTIC, SubscriptionTier.ORACLE}


def compare_tiers(current: SubscriptionTier, target: SubscriptionTier) -> ChangeType:
    """Compare two tiers to determine change type."""
    current_rank = TierRank.from_tier(current)
    target_rank = TierRank.from_tier(target)

    if target_rank.value > current_rank.value:
        return ChangeType.UPGRADE
    elif target_rank.value < current_rank.value:
        return ChangeType.DOWNGRADE
    else:
        return ChangeType.SAME


def quota_covers(higher: Optional[int], lower: Optional[int]) -> bool:
    """Return True if quota ``higher`` grants at least as much as ``lower``."""
    if higher is None:
        return True
    if lower is None:
        return False
    return higher >= lower


def quota_exceeds(higher: Optional[int], lower: Optional[int]) -> bool:
    """Return True if quota ``higher`` grants strictly more than ``lower``."""
    return quota_covers(higher, lower) and higher != lower


def validate_entitlement_table(table: Mapping[SubscriptionTier, Entitlement]) -> None:
    """Ensure every tier is present and grants never shrink as tier rises.

    Raises InconsistentPolicyError describing the first violation found.
    """
    missing = [tier.value for tier in TIERS_ASCENDING if tier not in table]
    if missing:
        raise InconsistentPolicyError(f"Entitlement table missing tiers: {', '.join(missing)}")

    for lower, higher in zip(TIERS_ASCENDING, TIERS_ASCENDING[1:]):
        low, high = table[lower], table[higher]
        if not low.allowed_spreads <= high.allowed_spreads:
            raise InconsistentPolicyError(
                f"{higher.value} must allow every spread {lower.value} allows"
            )
        if not low.allowed_guides <= high.allowed_guides:
            raise InconsistentPolicyError(
                f"{higher.value} must allow every guide {lower.value} allows"
            )
        for feature, field in QUOTA_FIELDS.items():
            if not quota_covers(getattr(high, field), getattr(low, field)):
                raise InconsistentPolicyError(
                    f"{higher.value} quota for {feature.value} is below {lower.value}'s"
                )
        if high.ads_enabled and not low.ads_enabled:
            raise InconsistentPolicyError(f"{higher.value} shows ads but {lower.value} does not")
