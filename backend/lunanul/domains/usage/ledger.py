"""Usage ledger: singleton service owning per-feature usage counters.

One instance lives in the container. Callers ask ``try_consume()`` (or the
``check_allowed()`` / ``record_usage()`` pair for previews) with the tier
and feature; the ledger resolves the quota from the tier policy, rolls the
counter into the current calendar month if needed and answers allow/deny.

State is in memory. ``load()`` and ``flush()`` are the only calls that touch
the injected store.
"""

import asyncio
import logging
from datetime import datetime
from typing import Mapping, Optional, Union

from lunanul.domains.entitlements.protocols import TierPolicyProtocol
from lunanul.domains.usage.protocols import UsageLedgerProtocol, UsageStoreProtocol
from lunanul.domains.usage.store import NullUsageStore
from lunanul.domains.usage.types import (
    DEFAULT_APPROACHING_RATIO,
    DEFAULT_HISTORY_PERIODS,
    Clock,
    coerce_feature_key,
    is_expired,
    new_counter,
    normalize_now,
    remaining_quota,
    skipped_periods,
    usage_percentage,
    utc_now,
    validate_amount,
)
from lunanul.schemas.subscription import FeatureKey, SubscriptionTier
from lunanul.schemas.usage import LedgerState, UsageCounter, UsageDecision, UsageSnapshotEntry

logger = logging.getLogger(__name__)


class UsageLedger(UsageLedgerProtocol):
    """In-memory counter store with calendar-month rollover.

    Safe under concurrent callers via per-feature locks: every read-modify
    of a feature's counter (rollover, record, reset, try_consume) runs
    under that feature's lock, so unrelated features never serialize.
    """

    def __init__(
        self,
        policy: TierPolicyProtocol,
        store: Optional[UsageStoreProtocol] = None,
        clock: Clock = utc_now,
        history_periods: int = DEFAULT_HISTORY_PERIODS,
        approaching_ratio: float = DEFAULT_APPROACHING_RATIO,
    ) -> None:
        """Initialize the ledger with its policy, store and clock."""
        self._policy = policy
        self._store = store or NullUsageStore()
        self._clock = clock
        self._history_periods = history_periods
        self._approaching_ratio = approaching_ratio

        self._counters: dict[FeatureKey, UsageCounter] = {}
        self._history: dict[FeatureKey, list[int]] = {}
        self._locks: dict[FeatureKey, asyncio.Lock] = {}

    def _get_lock(self, feature: FeatureKey) -> asyncio.Lock:
        if feature not in self._locks:
            self._locks[feature] = asyncio.Lock()
        return self._locks[feature]

    # ------------------------------------------------------------------
    # Queries and consumption
    # ------------------------------------------------------------------

    async def check_allowed(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> UsageDecision:
        """Preview whether one more unit of ``feature_key`` is allowed.

        Unlimited features answer immediately without touching the counter.
        Otherwise the counter is rolled over if its period ended, then
        compared against the limit. Never increments.
        """
        limit = self._policy.limit_for(tier, feature_key)
        feature = coerce_feature_key(feature_key)
        if limit is None:
            return UsageDecision(allowed=True, remaining=None)

        async with self._get_lock(feature):
            counter = self._current(feature)
            return UsageDecision(
                allowed=counter.count < limit,
                remaining=remaining_quota(limit, counter.count),
                count=counter.count,
            )

    async def record_usage(self, feature_key: Union[FeatureKey, str], amount: int = 1) -> int:
        """Record ``amount`` units of ``feature_key`` and return the new count.

        Does not enforce the limit. Callers record only after the gated
        action actually succeeded.
        """
        feature = coerce_feature_key(feature_key)
        validate_amount(amount)

        async with self._get_lock(feature):
            counter = self._increment(self._current(feature), amount)
            return counter.count

    async def try_consume(
        self,
        tier: Union[SubscriptionTier, str],
        feature_key: Union[FeatureKey, str],
        amount: int = 1,
    ) -> UsageDecision:
        """Check and consume ``amount`` units in one critical section.

        ``remaining`` reflects the quota left after this call. A denied
        call leaves the count unchanged. Unlimited features are always
        allowed and still counted.
        """
        validate_amount(amount)
        limit = self._policy.limit_for(tier, feature_key)
        feature = coerce_feature_key(feature_key)

        async with self._get_lock(feature):
            counter = self._current(feature)
            if limit is not None and counter.count + amount > limit:
                logger.debug(
                    "Denied %s x%d: %d/%d used", feature.value, amount, counter.count, limit
                )
                return UsageDecision(
                    allowed=False,
                    remaining=remaining_quota(limit, counter.count),
                    count=counter.count,
                )
            counter = self._increment(counter, amount)
            return UsageDecision(
                allowed=True,
                remaining=remaining_quota(limit, counter.count),
                count=counter.count,
            )

    async def reset_feature(self, feature_key: Union[FeatureKey, str]) -> UsageCounter:
        """Force an immediate rollover of ``feature_key``, regardless of expiry."""
        feature = coerce_feature_key(feature_key)

        async with self._get_lock(feature):
            previous = self._counters.get(feature)
            if previous is not None:
                self._archive(feature, previous.count)
            fresh = new_counter(feature, self._now())
            self._counters[feature] = fresh
            logger.info("Reset usage for %s", feature.value)
            return fresh

    async def current_usage_snapshot(
        self, tier: Union[SubscriptionTier, str]
    ) -> dict[FeatureKey, UsageSnapshotEntry]:
        """Build a display view of every feature for ``tier``.

        Existing counters are rolled over first. Features never used in
        the period report zero usage without creating a counter.
        """
        snapshot: dict[FeatureKey, UsageSnapshotEntry] = {}
        for feature in FeatureKey:
            limit = self._policy.limit_for(tier, feature)
            async with self._get_lock(feature):
                counter = self._counters.get(feature)
                if counter is not None and is_expired(counter, self._now()):
                    counter = self._rollover(counter)
            snapshot[feature] = self._snapshot_entry(counter, limit)
        return snapshot

    def usage_history(self, feature_key: Union[FeatureKey, str]) -> list[int]:
        """Counts of past periods for ``feature_key``, oldest first."""
        feature = coerce_feature_key(feature_key)
        return list(self._history.get(feature, []))

    def peek_counter(self, feature_key: Union[FeatureKey, str]) -> Optional[UsageCounter]:
        """Return the stored counter as-is, without rollover."""
        return self._counters.get(coerce_feature_key(feature_key))

    async def clear(self) -> None:
        """Drop all counters and history."""
        for feature in FeatureKey:
            async with self._get_lock(feature):
                self._counters.pop(feature, None)
                self._history.pop(feature, None)
        logger.info("Cleared all usage")

    # ------------------------------------------------------------------
    # Persistence and sync
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Replace in-memory state with what the store holds, if anything."""
        state = await self._store.load()
        if state is None:
            logger.debug("No persisted usage state")
            return
        for feature in FeatureKey:
            async with self._get_lock(feature):
                counter = state.counters.get(feature)
                if counter is None:
                    self._counters.pop(feature, None)
                else:
                    self._counters[feature] = counter
                self._history.pop(feature, None)
                for count in state.history.get(feature, []):
                    self._archive(feature, count)
        logger.info("Loaded usage state for %d features", len(state.counters))

    async def flush(self) -> None:
        """Persist the current state through the store."""
        await self._store.save(self.export_state())

    def export_state(self) -> LedgerState:
        """Copy of the ledger state in its persisted form."""
        return LedgerState(
            counters=dict(self._counters),
            history={feature: list(counts) for feature, counts in self._history.items()},
        )

    async def reconcile(self, remote: Mapping[FeatureKey, UsageCounter]) -> None:
        """Merge counters from an authoritative remote source.

        A remote counter for the same period as the local one replaces it,
        even when its count is lower. A remote counter for a later period
        replaces it too, archiving the local count. Remote counters for an
        older period are stale and ignored.
        """
        for key, remote_counter in remote.items():
            feature = coerce_feature_key(key)
            if remote_counter.feature != feature:
                remote_counter = remote_counter.model_copy(update={"feature": feature})

            async with self._get_lock(feature):
                local = self._counters.get(feature)
                if local is not None and remote_counter.period_start < local.period_start:
                    logger.info(
                        "Ignored stale remote counter for %s (period %s)",
                        feature.value,
                        remote_counter.period_start.isoformat(),
                    )
                    continue
                if local is not None and remote_counter.period_start > local.period_start:
                    self._archive(
                        feature,
                        local.count,
                        skipped=skipped_periods(local.period_end, remote_counter.period_start),
                    )
                self._counters[feature] = remote_counter
                logger.info(
                    "Adopted remote counter for %s: count=%d (local=%s)",
                    feature.value,
                    remote_counter.count,
                    local.count if local is not None else None,
                )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _now(self) -> datetime:
        return normalize_now(self._clock())

    def _current(self, feature: FeatureKey) -> UsageCounter:
        """Return the live counter for ``feature``. Must be called under lock."""
        now = self._now()
        counter = self._counters.get(feature)
        if counter is None:
            counter = new_counter(feature, now)
            self._counters[feature] = counter
            return counter
        if is_expired(counter, now):
            return self._rollover(counter)
        return counter

    def _rollover(self, counter: UsageCounter) -> UsageCounter:
        """Replace an expired counter. Must be called under lock."""
        fresh = new_counter(counter.feature, self._now())
        self._archive(
            counter.feature,
            counter.count,
            skipped=skipped_periods(counter.period_end, fresh.period_start),
        )
        self._counters[counter.feature] = fresh
        logger.debug(
            "Rolled over %s: %d used in period ending %s",
            counter.feature.value,
            counter.count,
            counter.period_end.isoformat(),
        )
        return fresh

    def _increment(self, counter: UsageCounter, amount: int) -> UsageCounter:
        """Store ``counter`` plus ``amount``. Must be called under lock."""
        updated = counter.model_copy(update={"count": counter.count + amount})
        self._counters[counter.feature] = updated
        return updated

    def _archive(self, feature: FeatureKey, count: int, skipped: int = 0) -> None:
        """Append ``count`` plus a zero for each of ``skipped`` idle months."""
        if self._history_periods <= 0:
            return
        history = self._history.setdefault(feature, [])
        history.append(count)
        history.extend([0] * min(skipped, self._history_periods))
        del history[: -self._history_periods]

    def _snapshot_entry(
        self, counter: Optional[UsageCounter], limit: Optional[int]
    ) -> UsageSnapshotEntry:
        count = counter.count if counter is not None else 0
        percentage = usage_percentage(limit, count)
        return UsageSnapshotEntry(
            count=count,
            limit=limit,
            remaining=remaining_quota(limit, count),
            percentage=percentage,
            approaching_limit=limit is not None and percentage >= self._approaching_ratio,
            reached_limit=limit is not None and count >= limit,
            period_start=counter.period_start if counter is not None else None,
            period_end=counter.period_end if counter is not None else None,
        )
