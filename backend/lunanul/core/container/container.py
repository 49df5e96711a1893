"""Dependency Injection Container.

The container is a simple immutable dataclass that holds protocol implementations.
It has no construction logic; that belongs in the factory.

Testing: construct directly with fakes, or use ``replace()`` for partial overrides.
"""

from dataclasses import dataclass, replace
from typing import Any

from lunanul.domains.entitlements.protocols import TierPolicyProtocol
from lunanul.domains.gating.protocols import FeatureGateServiceProtocol
from lunanul.domains.usage.ledger import UsageLedger
from lunanul.domains.usage.protocols import UsageStoreProtocol


@dataclass(frozen=True)
class Container:
    """Immutable container holding the engine's components."""

    policy: TierPolicyProtocol
    usage_store: UsageStoreProtocol
    ledger: UsageLedger
    gate: FeatureGateServiceProtocol

    def replace(self, **changes: Any) -> "Container":
        """Return a copy with some dependencies replaced."""
        return replace(self, **changes)
