"""Usage schemas: counters, decisions, snapshots and the persisted ledger state."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lunanul.schemas.subscription import FeatureKey


class UsageCounter(BaseModel):
    """Consumption count for one feature within one billing period.

    ``period_start`` is inclusive and ``period_end`` exclusive. Both are
    stored in UTC; naive values are read as UTC.
    """

    model_config = ConfigDict(frozen=True)

    feature: FeatureKey
    count: int = Field(0, ge=0)
    period_start: datetime
    period_end: datetime

    @field_validator("period_start", "period_end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_period(self) -> "UsageCounter":
        if self.period_end <= self.period_start:
            raise ValueError("period_end must be after period_start")
        return self


class UsageDecision(BaseModel):
    """Allow/deny answer with the remaining quota (``None`` = unlimited).

    ``count`` is the period's usage the answer was based on. It is ``None``
    when an unlimited feature was answered without reading its counter.
    """

    model_config = ConfigDict(frozen=True)

    allowed: bool
    remaining: Optional[int] = None
    count: Optional[int] = None


class UsageSnapshotEntry(BaseModel):
    """Display record for one feature in the current period."""

    count: int = 0
    limit: Optional[int] = None
    remaining: Optional[int] = None
    percentage: float = 0.0
    approaching_limit: bool = False
    reached_limit: bool = False
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None


class LedgerState(BaseModel):
    """Persisted form of the usage ledger."""

    counters: dict[FeatureKey, UsageCounter] = Field(default_factory=dict)
    history: dict[FeatureKey, list[int]] = Field(default_factory=dict)
