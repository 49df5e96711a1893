"""Usage domain test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Optional

import pytest

from lunanul.domains.entitlements.policy import TierPolicy
from lunanul.domains.usage.fakes.clock import FakeClock
from lunanul.domains.usage.fakes.store import FakeUsageStore
from lunanul.domains.usage.ledger import UsageLedger
from lunanul.schemas.subscription import FeatureKey
from lunanul.schemas.usage import UsageCounter

JAN_START = datetime(2025, 1, 1, tzinfo=timezone.utc)
FEB_START = datetime(2025, 2, 1, tzinfo=timezone.utc)
MAR_START = datetime(2025, 3, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_counter(
    feature: FeatureKey = FeatureKey.MANUAL_INTERPRETATIONS,
    count: int = 0,
    period_start: datetime = JAN_START,
    period_end: datetime = FEB_START,
) -> UsageCounter:
    return UsageCounter(
        feature=feature, count=count, period_start=period_start, period_end=period_end
    )


def _make_ledger(
    *,
    clock: Optional[FakeClock] = None,
    store: Optional[FakeUsageStore] = None,
    history_periods: int = 12,
) -> tuple[UsageLedger, FakeClock, FakeUsageStore]:
    """Build a UsageLedger wired to fakes. Returns (ledger, clock, store)."""
    clock = clock or FakeClock()
    store = store or FakeUsageStore()
    ledger = UsageLedger(
        policy=TierPolicy(),
        store=store,
        clock=clock,
        history_periods=history_periods,
    )
    return ledger, clock, store


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ledger_env():
    return _make_ledger()
