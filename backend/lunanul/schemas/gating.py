"""Gate decision schema returned to the UI layer."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from lunanul.schemas.subscription import SubscriptionTier


class GateDecision(BaseModel):
    """Outcome of a gated action.

    ``upgrade_tier`` names the lowest tier that would allow the action when
    it was denied, so the UI can phrase an upgrade prompt.
    """

    model_config = ConfigDict(frozen=True)

    allowed: bool
    remaining: Optional[int] = None
    upgrade_tier: Optional[SubscriptionTier] = None
