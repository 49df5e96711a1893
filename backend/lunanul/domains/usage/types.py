"""Usage domain types and pure business logic.

Period arithmetic and argument validation used by the ledger. No IO.
Everything here is deterministic given the ``now`` passed in.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Union

from lunanul.core.exceptions import InvalidArgumentError
from lunanul.domains.usage.exceptions import InvalidFeatureKeyError
from lunanul.schemas.subscription import FeatureKey
from lunanul.schemas.usage import UsageCounter

Clock = Callable[[], datetime]

DEFAULT_HISTORY_PERIODS = 12
DEFAULT_APPROACHING_RATIO = 0.8


def utc_now() -> datetime:
    """Default ledger clock."""
    return datetime.now(timezone.utc)


def normalize_now(now: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Return the [start, end) calendar month in UTC containing ``now``.

    Usage resets on the 1st of each month at 00:00 UTC.
    """
    now = normalize_now(now)
    start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)
    return start, end


def new_counter(feature: FeatureKey, now: datetime) -> UsageCounter:
    """Fresh zero counter for the period containing ``now``."""
    start, end = month_bounds(now)
    return UsageCounter(feature=feature, count=0, period_start=start, period_end=end)


def is_expired(counter: UsageCounter, now: datetime) -> bool:
    """A counter expires at ``period_end``; the boundary belongs to the next period."""
    return normalize_now(now) >= counter.period_end


def skipped_periods(previous_end: datetime, next_start: datetime) -> int:
    """Number of whole months between two periods with no counter at all."""
    months = (next_start.year - previous_end.year) * 12 + next_start.month - previous_end.month
    return max(0, months)


def coerce_feature_key(value: Union[FeatureKey, str]) -> FeatureKey:
    """Accept a FeatureKey or its string value."""
    if isinstance(value, FeatureKey):
        return value
    try:
        return FeatureKey(value)
    except ValueError:
        raise InvalidFeatureKeyError(str(value)) from None


def validate_amount(amount: int) -> int:
    """Usage only moves forward: amounts must be positive integers."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidArgumentError(f"Usage amount must be a positive integer, got {amount!r}")
    return amount


def remaining_quota(limit: Optional[int], count: int) -> Optional[int]:
    """Units left in the period (None = unlimited)."""
    if limit is None:
        return None
    return max(0, limit - count)


def usage_percentage(limit: Optional[int], count: int) -> float:
    """Fraction of the quota used, clamped to [0, 1]; 0.0 when unlimited."""
    if limit is None:
        return 0.0
    if limit == 0:
        return 1.0
    return min(1.0, max(0.0, count / limit))
