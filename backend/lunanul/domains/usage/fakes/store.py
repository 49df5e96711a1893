"""Fake usage store for testing.

Keeps the saved state in memory and records calls for assertions.
"""

from __future__ import annotations

from typing import Optional

from lunanul.domains.usage.protocols import UsageStoreProtocol
from lunanul.schemas.usage import LedgerState


class FakeUsageStore(UsageStoreProtocol):
    """In-memory fake for UsageStoreProtocol.

    Usage:
        store = FakeUsageStore()
        store.seed(LedgerState(counters={...}))
        await ledger.load()

        await ledger.flush()
        assert store.saved[-1].counters[FeatureKey.JOURNAL_ENTRIES].count == 2
    """

    def __init__(self) -> None:
        """Initialize empty state and call log."""
        self._state: Optional[LedgerState] = None
        self.saved: list[LedgerState] = []
        self._calls: list[str] = []

    def seed(self, state: LedgerState) -> None:
        """Set the state returned by the next ``load()``."""
        self._state = state

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name in self._calls if name == method)

    async def load(self) -> Optional[LedgerState]:
        """Return a copy of the seeded or last saved state."""
        self._calls.append("load")
        return self._state.model_copy(deep=True) if self._state is not None else None

    async def save(self, state: LedgerState) -> None:
        """Keep ``state`` and make it the next load result."""
        self._calls.append("save")
        self._state = state.model_copy(deep=True)
        self.saved.append(self._state)
