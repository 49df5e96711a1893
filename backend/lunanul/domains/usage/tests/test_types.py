"""Unit tests for usage domain pure functions."""

from datetime import datetime, timedelta, timezone

import pytest

from lunanul.core.exceptions import InvalidArgumentError
from lunanul.domains.usage.exceptions import InvalidFeatureKeyError
from lunanul.domains.usage.types import (
    coerce_feature_key,
    is_expired,
    month_bounds,
    new_counter,
    normalize_now,
    remaining_quota,
    usage_percentage,
    validate_amount,
)
from lunanul.schemas.subscription import FeatureKey


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# month_bounds
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "now,start,end",
    [
        (_utc(2025, 1, 15, 12), _utc(2025, 1, 1), _utc(2025, 2, 1)),
        (_utc(2025, 1, 1), _utc(2025, 1, 1), _utc(2025, 2, 1)),
        (_utc(2025, 1, 31, 23, 59, 59), _utc(2025, 1, 1), _utc(2025, 2, 1)),
        (_utc(2024, 12, 31, 18), _utc(2024, 12, 1), _utc(2025, 1, 1)),
        (_utc(2024, 2, 29), _utc(2024, 2, 1), _utc(2024, 3, 1)),
    ],
    ids=["mid_month", "first_instant", "last_second", "december_wraps_year", "leap_day"],
)
def test_month_bounds(now, start, end):
    assert month_bounds(now) == (start, end)


def test_month_bounds_naive_is_utc():
    assert month_bounds(datetime(2025, 6, 10)) == (_utc(2025, 6, 1), _utc(2025, 7, 1))


def test_month_bounds_converts_offset_to_utc():
    # 00:30 on March 1st at UTC+2 is still February in UTC
    now = datetime(2025, 3, 1, 0, 30, tzinfo=timezone(timedelta(hours=2)))
    assert month_bounds(now) == (_utc(2025, 2, 1), _utc(2025, 3, 1))


def test_normalize_now_keeps_instant():
    now = datetime(2025, 3, 1, 0, 30, tzinfo=timezone(timedelta(hours=2)))
    assert normalize_now(now) == now
    assert normalize_now(now).tzinfo == timezone.utc


# ---------------------------------------------------------------------------
# is_expired
# ---------------------------------------------------------------------------


def test_counter_not_expired_before_end():
    counter = new_counter(FeatureKey.AI_READINGS, _utc(2025, 1, 10))
    assert not is_expired(counter, _utc(2025, 1, 31, 23, 59, 59))


def test_counter_expired_at_exact_end():
    counter = new_counter(FeatureKey.AI_READINGS, _utc(2025, 1, 10))
    assert is_expired(counter, _utc(2025, 2, 1))


def test_new_counter_starts_at_zero():
    counter = new_counter(FeatureKey.JOURNAL_ENTRIES, _utc(2025, 5, 20))
    assert counter.count == 0
    assert counter.feature is FeatureKey.JOURNAL_ENTRIES
    assert counter.period_start == _utc(2025, 5, 1)
    assert counter.period_end == _utc(2025, 6, 1)


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


def test_coerce_feature_key_from_string():
    assert coerce_feature_key("audio_readings") is FeatureKey.AUDIO_READINGS


def test_coerce_feature_key_unknown():
    with pytest.raises(InvalidFeatureKeyError) as exc_info:
        coerce_feature_key("crystal_balls")
    assert exc_info.value.feature_key == "crystal_balls"
    assert isinstance(exc_info.value, InvalidArgumentError)


@pytest.mark.parametrize("amount", [0, -1, -100, True, 1.5, "2"])
def test_validate_amount_rejects(amount):
    with pytest.raises(InvalidArgumentError):
        validate_amount(amount)


def test_validate_amount_accepts_positive():
    assert validate_amount(3) == 3


# ---------------------------------------------------------------------------
# remaining / percentage
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "limit,count,expected",
    [(None, 10_000, None), (5, 0, 5), (5, 4, 1), (5, 5, 0), (5, 9, 0), (0, 0, 0)],
)
def test_remaining_quota(limit, count, expected):
    assert remaining_quota(limit, count) == expected


@pytest.mark.parametrize(
    "limit,count,expected",
    [(None, 50, 0.0), (5, 0, 0.0), (5, 4, 0.8), (5, 5, 1.0), (5, 7, 1.0), (0, 0, 1.0)],
)
def test_usage_percentage(limit, count, expected):
    assert usage_percentage(limit, count) == pytest.approx(expected)
