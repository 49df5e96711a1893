"""Entitlement schema: what a single subscription tier grants."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from lunanul.schemas.subscription import GuideId, SpreadId


class Entitlement(BaseModel):
    """Static, per-tier grant record.

    Quota fields use ``None`` for unlimited. A quota of 0 means the feature
    is not available on the tier at all.
    """

    model_config = ConfigDict(frozen=True)

    allowed_spreads: frozenset[SpreadId] = Field(default_factory=frozenset)
    allowed_guides: frozenset[GuideId] = Field(default_factory=frozenset)
    ai_reading_limit: Optional[int] = Field(None, ge=0, description="AI readings per month")
    monthly_interpretation_limit: Optional[int] = Field(
        None, ge=0, description="Manual interpretations per month"
    )
    journal_entry_limit: Optional[int] = Field(None, ge=0, description="Journal entries per month")
    audio_reading_limit: Optional[int] = Field(None, ge=0, description="Audio readings per month")
    ads_enabled: bool = True
