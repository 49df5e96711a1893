"""Fake implementations for usage domain testing."""

from lunanul.domains.usage.fakes.clock import FakeClock
from lunanul.domains.usage.fakes.store import FakeUsageStore

__all__ = ["FakeClock", "FakeUsageStore"]
