"""Usage domain protocols, split into the ledger and its persistence hook.

UsageLedgerProtocol: Singleton that owns per-feature counters and decides allow/deny.
UsageStoreProtocol: Load/save hook for the ledger state, awaited at startup and shutdown.
"""

from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from lunanul.schemas.subscription import FeatureKey, SubscriptionTier
from lunanul.schemas.usage import LedgerState, UsageCounter, UsageDecision, UsageSnapshotEntry


@runtime_checkable
class UsageStoreProtocol(Protocol):
    """Durable storage for the ledger state."""

    async def load(self) -> Optional[LedgerState]:
        """Return the persisted state, or None when nothing was saved yet."""
        ...

    async def save(self, state: LedgerState) -> None:
        """Persist ``state``, replacing whatever was stored."""
        ...


@runtime_checkable
class UsageLedgerProtocol(Protocol):
    """Authoritative per-period usage counts and allow/deny decisions.

    Every call takes the tier explicitly; the ledger never reads an ambient
    "current subscription".
    """

    async def check_allowed(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> UsageDecision:
        """Preview whether one more unit is allowed. Never increments."""
        ...

    async def record_usage(self, feature_key: Union[FeatureKey, str], amount: int = 1) -> int:
        """Unconditionally record ``amount`` units; return the new count."""
        ...

    async def try_consume(
        self,
        tier: Union[SubscriptionTier, str],
        feature_key: Union[FeatureKey, str],
        amount: int = 1,
    ) -> UsageDecision:
        """Atomically check and consume ``amount`` units."""
        ...

    async def reset_feature(self, feature_key: Union[FeatureKey, str]) -> UsageCounter:
        """Force an immediate rollover of one feature's counter."""
        ...

    async def current_usage_snapshot(
        self, tier: Union[SubscriptionTier, str]
    ) -> dict[FeatureKey, UsageSnapshotEntry]:
        """Read-only view of every feature for display."""
        ...

    async def reconcile(self, remote: Mapping[FeatureKey, UsageCounter]) -> None:
        """Merge counters from an authoritative remote source."""
        ...
