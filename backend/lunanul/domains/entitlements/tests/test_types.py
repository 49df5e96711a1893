"""Unit tests for entitlement domain types and pure functions."""

from dataclasses import dataclass
from typing import Optional

import pytest

from lunanul.domains.entitlements.exceptions import InconsistentPolicyError, UnknownTierError
from lunanul.domains.entitlements.types import (
    ENTITLEMENTS,
    QUOTA_FIELDS,
    TIERS_ASCENDING,
    ChangeType,
    TierRank,
    coerce_tier,
    compare_tiers,
    is_paid_tier,
    quota_covers,
    quota_exceeds,
    validate_entitlement_table,
)
from lunanul.schemas.subscription import FeatureKey, SpreadId, SubscriptionTier


# ---------------------------------------------------------------------------
# TierRank / ordering
# ---------------------------------------------------------------------------


@dataclass
class RankCase:
    label: str
    tier: SubscriptionTier
    expected: int


RANK_CASES = [
    RankCase("seeker", SubscriptionTier.SEEKER, 0),
    RankCase("mystic", SubscriptionTier.MYSTIC, 1),
    RankCase("oracle", SubscriptionTier.ORACLE, 2),
]


@pytest.mark.parametrize("case", RANK_CASES, ids=lambda c: c.label)
def test_tier_rank_from_tier(case: RankCase):
    assert TierRank.from_tier(case.tier).value == case.expected


def test_tiers_ascending_order():
    assert TIERS_ASCENDING == (
        SubscriptionTier.SEEKER,
        SubscriptionTier.MYSTIC,
        SubscriptionTier.ORACLE,
    )


# ---------------------------------------------------------------------------
# compare_tiers
# ---------------------------------------------------------------------------


@dataclass
class CompareCase:
    label: str
    current: SubscriptionTier
    target: SubscriptionTier
    expected: ChangeType


COMPARE_CASES = [
    CompareCase("seeker_to_mystic", SubscriptionTier.SEEKER, SubscriptionTier.MYSTIC, ChangeType.UPGRADE),
    CompareCase("seeker_to_oracle", SubscriptionTier.SEEKER, SubscriptionTier.ORACLE, ChangeType.UPGRADE),
    CompareCase("oracle_to_mystic", SubscriptionTier.ORACLE, SubscriptionTier.MYSTIC, ChangeType.DOWNGRADE),
    CompareCase("mystic_to_seeker", SubscriptionTier.MYSTIC, SubscriptionTier.SEEKER, ChangeType.DOWNGRADE),
    CompareCase("mystic_to_mystic", SubscriptionTier.MYSTIC, SubscriptionTier.MYSTIC, ChangeType.SAME),
]


@pytest.mark.parametrize("case", COMPARE_CASES, ids=lambda c: c.label)
def test_compare_tiers(case: CompareCase):
    assert compare_tiers(case.current, case.target) == case.expected


@pytest.mark.parametrize(
    "tier,expected",
    [
        (SubscriptionTier.SEEKER, False),
        (SubscriptionTier.MYSTIC, True),
        (SubscriptionTier.ORACLE, True),
    ],
)
def test_is_paid_tier(tier: SubscriptionTier, expected: bool):
    assert is_paid_tier(tier) is expected


# ---------------------------------------------------------------------------
# coerce_tier
# ---------------------------------------------------------------------------


def test_coerce_tier_accepts_string_value():
    assert coerce_tier("oracle") is SubscriptionTier.ORACLE


def test_coerce_tier_passes_enum_through():
    assert coerce_tier(SubscriptionTier.MYSTIC) is SubscriptionTier.MYSTIC


def test_coerce_tier_rejects_unknown():
    with pytest.raises(UnknownTierError) as exc_info:
        coerce_tier("archmage")
    assert exc_info.value.tier == "archmage"


# ---------------------------------------------------------------------------
# quota comparisons (None = unlimited)
# ---------------------------------------------------------------------------


@dataclass
class QuotaCase:
    label: str
    higher: Optional[int]
    lower: Optional[int]
    covers: bool
    exceeds: bool


QUOTA_CASES = [
    QuotaCase("unlimited_vs_int", None, 5, True, True),
    QuotaCase("unlimited_vs_unlimited", None, None, True, False),
    QuotaCase("int_vs_unlimited", 100, None, False, False),
    QuotaCase("bigger_int", 10, 5, True, True),
    QuotaCase("equal_int", 5, 5, True, False),
    QuotaCase("smaller_int", 3, 5, False, False),
    QuotaCase("zero_vs_zero", 0, 0, True, False),
]


@pytest.mark.parametrize("case", QUOTA_CASES, ids=lambda c: c.label)
def test_quota_covers(case: QuotaCase):
    assert quota_covers(case.higher, case.lower) is case.covers


@pytest.mark.parametrize("case", QUOTA_CASES, ids=lambda c: c.label)
def test_quota_exceeds(case: QuotaCase):
    assert quota_exceeds(case.higher, case.lower) is case.exceeds


# ---------------------------------------------------------------------------
# Default table
# ---------------------------------------------------------------------------


def test_quota_fields_cover_every_feature_key():
    assert set(QUOTA_FIELDS) == set(FeatureKey)


def test_default_table_is_valid():
    validate_entitlement_table(ENTITLEMENTS)


def test_default_seeker_limits():
    seeker = ENTITLEMENTS[SubscriptionTier.SEEKER]
    assert seeker.monthly_interpretation_limit == 5
    assert seeker.journal_entry_limit == 3
    assert seeker.ai_reading_limit == 3
    assert seeker.audio_reading_limit == 0
    assert seeker.ads_enabled is True
    assert seeker.allowed_spreads == {SpreadId.SINGLE_CARD, SpreadId.THREE_CARD}


def test_only_oracle_has_audio():
    assert ENTITLEMENTS[SubscriptionTier.MYSTIC].audio_reading_limit == 0
    assert ENTITLEMENTS[SubscriptionTier.ORACLE].audio_reading_limit is None


# ---------------------------------------------------------------------------
# validate_entitlement_table
# ---------------------------------------------------------------------------


def _table_with(tier: SubscriptionTier, **changes):
    table = dict(ENTITLEMENTS)
    table[tier] = table[tier].model_copy(update=changes)
    return table


def test_validate_rejects_missing_tier():
    table = dict(ENTITLEMENTS)
    del table[SubscriptionTier.ORACLE]

    with pytest.raises(InconsistentPolicyError, match="oracle"):
        validate_entitlement_table(table)


def test_validate_rejects_shrinking_spreads():
    table = _table_with(SubscriptionTier.MYSTIC, allowed_spreads=frozenset({SpreadId.SINGLE_CARD}))

    with pytest.raises(InconsistentPolicyError, match="spread"):
        validate_entitlement_table(table)


def test_validate_rejects_shrinking_guides():
    table = _table_with(SubscriptionTier.ORACLE, allowed_guides=frozenset())

    with pytest.raises(InconsistentPolicyError, match="guide"):
        validate_entitlement_table(table)


def test_validate_rejects_lower_quota_at_higher_tier():
    table = _table_with(SubscriptionTier.MYSTIC, journal_entry_limit=2)

    with pytest.raises(InconsistentPolicyError, match="journal_entries"):
        validate_entitlement_table(table)


def test_validate_rejects_ads_returning_at_higher_tier():
    table = _table_with(SubscriptionTier.ORACLE, ads_enabled=True)

    with pytest.raises(InconsistentPolicyError, match="ads"):
        validate_entitlement_table(table)
