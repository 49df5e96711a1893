"""Dependency injection container.

Usage:
    from lunanul.core.container import create_container

    container = create_container()
    await container.ledger.load()
    allowed = await container.gate.can_perform(tier, FeatureKey.JOURNAL_ENTRIES)
"""

from lunanul.core.container.container import Container
from lunanul.core.container.factory import create_container

__all__ = ["Container", "create_container"]
