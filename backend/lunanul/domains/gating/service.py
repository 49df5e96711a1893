"""Feature gate service: composes tier policy and usage ledger into UI-facing answers.

Configuration errors (unknown quota dimension, catalog entry or tier) are
programming errors. In development they propagate; with ``fail_closed``
(the default in production) they are logged and answered with "deny".
"""

from typing import Optional, Union

from lunanul.core.config import settings
from lunanul.core.exceptions import ConfigurationError, NotFoundException
from lunanul.core.logging import ContextualLogger
from lunanul.core.logging import logger as default_logger
from lunanul.domains.entitlements.protocols import TierPolicyProtocol
from lunanul.domains.gating.protocols import FeatureGateServiceProtocol
from lunanul.domains.usage.exceptions import UsageLimitExceededError
from lunanul.domains.usage.protocols import UsageLedgerProtocol
from lunanul.schemas.gating import GateDecision
from lunanul.schemas.subscription import FeatureKey, GuideId, SpreadId, SubscriptionTier

_DENIED = GateDecision(allowed=False, remaining=0)


class FeatureGateService(FeatureGateServiceProtocol):
    """Gate queries over a TierPolicy and a UsageLedger."""

    def __init__(
        self,
        policy: TierPolicyProtocol,
        ledger: UsageLedgerProtocol,
        logger: Optional[ContextualLogger] = None,
        fail_closed: Optional[bool] = None,
    ) -> None:
        """Initialize the gate.

        Args:
            policy: Tier-to-entitlement lookup.
            ledger: Usage counters.
            logger: Logger to report degraded decisions on.
            fail_closed: Deny instead of raising on configuration errors.
                Defaults to ``settings.fail_closed``.
        """
        self._policy = policy
        self._ledger = ledger
        self._logger = logger or default_logger.with_context(component="feature_gate")
        self._fail_closed = settings.fail_closed if fail_closed is None else fail_closed

    async def can_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> bool:
        """Preview whether ``tier`` may use one more unit of ``feature_key``."""
        try:
            decision = await self._ledger.check_allowed(tier, feature_key)
        except ConfigurationError as e:
            self._degrade(e, tier=tier, feature_key=feature_key)
            return False
        return decision.allowed

    async def try_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> GateDecision:
        """Consume one unit if allowed; otherwise name the tier to upgrade to."""
        try:
            decision = await self._ledger.try_consume(tier, feature_key)
            if decision.allowed:
                return GateDecision(allowed=True, remaining=decision.remaining)
            return GateDecision(
                allowed=False,
                remaining=decision.remaining,
                upgrade_tier=self._policy.upgrade_tier_for(tier, feature_key),
            )
        except ConfigurationError as e:
            self._degrade(e, tier=tier, feature_key=feature_key)
            return _DENIED

    async def ensure_can_perform(
        self, tier: Union[SubscriptionTier, str], feature_key: Union[FeatureKey, str]
    ) -> None:
        """Raise UsageLimitExceededError if ``tier`` has no quota left for ``feature_key``.

        When failing closed, a configuration error is logged and reported as
        an exhausted quota of zero.
        """
        feature_name = str(getattr(feature_key, "value", feature_key))
        try:
            decision = await self._ledger.check_allowed(tier, feature_key)
            if decision.allowed:
                return
            limit = self._policy.limit_for(tier, feature_key)
            upgrade = self._policy.upgrade_tier_for(tier, feature_key)
        except ConfigurationError as e:
            self._degrade(e, tier=tier, feature_key=feature_key)
            raise UsageLimitExceededError(
                feature_key=feature_name, limit=0, current_usage=0
            ) from e

        raise UsageLimitExceededError(
            feature_key=feature_name,
            limit=limit,
            current_usage=decision.count or 0,
            upgrade_tier=upgrade.value if upgrade is not None else None,
        )

    def check_spread(
        self, tier: Union[SubscriptionTier, str], spread_id: Union[SpreadId, str]
    ) -> GateDecision:
        """Gate access to a spread; on denial name the lowest tier granting it."""
        try:
            if self._policy.is_spread_allowed(tier, spread_id):
                return GateDecision(allowed=True)
            return GateDecision(
                allowed=False, upgrade_tier=self._policy.required_tier_for(spread_id)
            )
        except (ConfigurationError, NotFoundException) as e:
            self._degrade(e, tier=tier, spread_id=spread_id)
            return GateDecision(allowed=False)

    def check_guide(
        self, tier: Union[SubscriptionTier, str], guide_id: Union[GuideId, str]
    ) -> GateDecision:
        """Gate access to a guide; on denial name the lowest tier granting it."""
        try:
            if self._policy.is_guide_allowed(tier, guide_id):
                return GateDecision(allowed=True)
            return GateDecision(
                allowed=False, upgrade_tier=self._policy.required_tier_for_guide(guide_id)
            )
        except (ConfigurationError, NotFoundException) as e:
            self._degrade(e, tier=tier, guide_id=guide_id)
            return GateDecision(allowed=False)

    def ads_enabled(self, tier: Union[SubscriptionTier, str]) -> bool:
        """Whether ads are shown to ``tier``.

        When failing closed, an unknown tier gets no ad-free benefit.
        """
        try:
            return self._policy.entitlement_for(tier).ads_enabled
        except ConfigurationError as e:
            self._degrade(e, tier=tier)
            return True

    def _degrade(self, error: Exception, **dimensions: object) -> None:
        """Re-raise ``error`` unless failing closed, in which case log it."""
        if not self._fail_closed:
            raise error
        context = {k: str(getattr(v, "value", v)) for k, v in dimensions.items()}
        self._logger.with_context(**context).error(
            "Gate denied due to configuration error: %s", error, exc_info=error
        )
