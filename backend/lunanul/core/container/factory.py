"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container with environment-appropriate implementations.
"""

from typing import Optional

from lunanul.core.config import Settings, settings as default_settings
from lunanul.core.container.container import Container
from lunanul.core.logging import logger
from lunanul.domains.entitlements.policy import TierPolicy
from lunanul.domains.gating.service import FeatureGateService
from lunanul.domains.usage.ledger import UsageLedger
from lunanul.domains.usage.protocols import UsageStoreProtocol
from lunanul.domains.usage.store import JsonFileUsageStore, NullUsageStore
from lunanul.domains.usage.types import Clock, utc_now


def create_container(settings: Optional[Settings] = None, clock: Clock = utc_now) -> Container:
    """Build a fully wired container from ``settings``.

    Does not load persisted usage; callers await ``container.ledger.load()``
    once at startup and ``container.ledger.flush()`` at shutdown.
    """
    settings = settings or default_settings

    policy = TierPolicy()
    store = _create_usage_store(settings)
    ledger = UsageLedger(
        policy=policy,
        store=store,
        clock=clock,
        history_periods=settings.USAGE_HISTORY_PERIODS,
        approaching_ratio=settings.APPROACHING_LIMIT_RATIO,
    )
    gate = FeatureGateService(
        policy=policy,
        ledger=ledger,
        logger=logger.with_context(component="feature_gate"),
        fail_closed=settings.fail_closed,
    )
    return Container(policy=policy, usage_store=store, ledger=ledger, gate=gate)


def _create_usage_store(settings: Settings) -> UsageStoreProtocol:
    if settings.USAGE_STORE_PATH is None:
        logger.info("USAGE_STORE_PATH not set; usage is kept in memory only")
        return NullUsageStore()
    logger.info("Using JSON usage store at %s", settings.USAGE_STORE_PATH)
    return JsonFileUsageStore(settings.USAGE_STORE_PATH)
