"""Gating domain: the composed allow/deny query consumed by the UI layer.

When a gate denies an action, ``upgrade_tier`` on the decision names the
tier to offer in the upgrade prompt; presenting it is up to the caller.
"""

from lunanul.domains.gating.protocols import FeatureGateServiceProtocol
from lunanul.domains.gating.service import FeatureGateService

__all__ = ["FeatureGateService", "FeatureGateServiceProtocol"]
