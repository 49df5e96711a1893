"""Subscription catalog enums: tiers, spreads, guides and quota dimensions."""

from enum import Enum


class SubscriptionTier(str, Enum):
    """Subscription tiers, cheapest first.

    Ordering is defined by ``TierRank`` in the entitlements domain, not by
    string comparison of the values.
    """

    SEEKER = "seeker"
    MYSTIC = "mystic"
    ORACLE = "oracle"


class SpreadId(str, Enum):
    """Tarot spreads offered by the app."""

    SINGLE_CARD = "single_card"
    THREE_CARD = "three_card"
    CELTIC_CROSS = "celtic_cross"
    HORSESHOE = "horseshoe"
    RELATIONSHIP = "relationship"
    CAREER = "career"


class GuideId(str, Enum):
    """Reading guide personalities."""

    HEALER = "healer"
    MENTOR = "mentor"
    SAGE = "sage"
    VISIONARY = "visionary"


class FeatureKey(str, Enum):
    """Quota dimensions tracked per billing period."""

    AI_READINGS = "ai_readings"
    MANUAL_INTERPRETATIONS = "manual_interpretations"
    JOURNAL_ENTRIES = "journal_entries"
    AUDIO_READINGS = "audio_readings"
