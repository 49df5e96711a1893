"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and lunanul/domains/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any lunanul module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def policy():
    """Default TierPolicy over the product tier table."""
    from lunanul.domains.entitlements.policy import TierPolicy

    return TierPolicy()


@pytest.fixture
def fake_clock():
    """FakeClock pinned mid-January 2025 UTC."""
    from lunanul.domains.usage.fakes.clock import FakeClock

    return FakeClock()


@pytest.fixture
def fake_usage_store():
    """In-memory usage store that records calls."""
    from lunanul.domains.usage.fakes.store import FakeUsageStore

    return FakeUsageStore()
