"""Pydantic schemas shared across domains."""

from lunanul.schemas.entitlement import Entitlement
from lunanul.schemas.gating import GateDecision
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier
from lunanul.schemas.usage import LedgerState, UsageCounter, UsageDecision, UsageSnapshotEntry

__all__ = [
    "Entitlement",
    "FeatureKey",
    "GateDecision",
    "GuideId",
    "LedgerState",
    "SpreadId",
    "SubscriptionTier",
    "UsageCounter",
    "UsageDecision",
    "UsageSnapshotEntry",
]
