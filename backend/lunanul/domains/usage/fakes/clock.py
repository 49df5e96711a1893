"""Controllable clock for ledger tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional


class FakeClock:
    """Callable clock that only moves when told to.

    Usage:
        clock = FakeClock(datetime(2025, 3, 31, 23, 59, tzinfo=timezone.utc))
        ledger = UsageLedger(policy=TierPolicy(), clock=clock)

        clock.advance(minutes=1)  # now in April
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        """Start at ``now`` (default: 2025-01-15 12:00 UTC)."""
        self.now = now or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        """Return the current fake time."""
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by ``timedelta(**kwargs)`` and return the new time."""
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> None:
        """Jump to ``now``."""
        self.now = now
