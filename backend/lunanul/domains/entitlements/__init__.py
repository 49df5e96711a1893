"""Entitlements domain: the static tier-to-benefit table and its queries.

TierPolicy is pure and stateless; every call takes the tier explicitly.
"""

from lunanul.domains.entitlements.policy import TierPolicy
from lunanul.domains.entitlements.protocols import TierPolicyProtocol

__all__ = ["TierPolicy", "TierPolicyProtocol"]
