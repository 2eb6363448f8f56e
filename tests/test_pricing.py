from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from marketplace.domain.pricing import (
    InvalidInterval,
    calculate_price,
    duration_hours,
    is_public_holiday,
    is_weekend,
    pricing_info,
)


def test_weekday_same_day_booking_has_no_adjustments():
    now = datetime(2024, 6, 3, 7, 0)  # Monday
    price = calculate_price(Decimal("25.00"), datetime(2024, 6, 3, 9), datetime(2024, 6, 3, 11), now).as_dict()

    assert price["base_amount"] == 50.00
    assert price["premium"] == 0
    assert price["discount"] == 0
    assert price["final_amount"] == 50.00
    assert price["commission"] == 7.50
    assert price["premium_reason"] is None
    assert price["discount_reason"] is None


def test_weekend_booking_ten_days_ahead_gets_premium_and_discount():
    now = datetime(2024, 6, 5, 8, 0)
    start = datetime(2024, 6, 15, 9)  # Saturday
    price = calculate_price(Decimal("30.00"), start, datetime(2024, 6, 15, 13), now).as_dict()

    assert price["base_amount"] == 120.00
    assert price["premium"] == 18.00
    assert price["discount"] == 12.00
    assert price["final_amount"] == 126.00
    assert price["commission"] == 18.90
    assert price["premium_reason"] == "weekend"
    assert price["discount_reason"] == "early_bird"


def test_final_amount_is_exact_sum_of_parts():
    now = datetime(2024, 6, 1, 8, 0)
    price = calculate_price("33.33", datetime(2024, 6, 15, 9), datetime(2024, 6, 15, 10, 20), now)

    assert price.final_amount == price.base_amount + price.premium - price.discount
    assert price.commission == price.final_amount * Decimal("0.15")


def test_public_holiday_on_weekday_gets_holiday_premium():
    now = datetime(2024, 12, 15, 8, 0)
    start = datetime(2024, 12, 16, 9)  # Day of Reconciliation, a Monday
    price = calculate_price(100, start, datetime(2024, 12, 16, 10), now).as_dict()

    assert price["premium"] == 25.00
    assert price["premium_reason"] == "holiday"


def test_weekend_premium_wins_over_holiday():
    now = datetime(2023, 12, 15, 8, 0)
    start = datetime(2023, 12, 16, 9)  # Day of Reconciliation, a Saturday
    assert is_weekend(start.date()) and is_public_holiday(start.date())

    price = calculate_price(100, start, datetime(2023, 12, 16, 10), now).as_dict()

    assert price["premium"] == 15.00
    assert price["premium_reason"] == "weekend"


def test_early_bird_applies_from_exactly_seven_days():
    start = datetime(2024, 6, 10, 9)
    on_boundary = calculate_price(10, start, datetime(2024, 6, 10, 10), datetime(2024, 6, 3, 9))
    just_short = calculate_price(10, start, datetime(2024, 6, 10, 10), datetime(2024, 6, 3, 9, 1))

    assert on_boundary.discount == Decimal("1.0")
    assert just_short.discount == 0


def test_duration_counts_whole_minutes():
    assert duration_hours(datetime(2024, 6, 3, 9), datetime(2024, 6, 3, 10, 30)) == Decimal("1.5")


@pytest.mark.parametrize(
    "start,end",
    [
        (datetime(2024, 6, 3, 11), datetime(2024, 6, 3, 9)),
        (datetime(2024, 6, 3, 9), datetime(2024, 6, 3, 9)),
    ],
)
def test_end_not_after_start_is_invalid_interval(start, end):
    with pytest.raises(InvalidInterval):
        calculate_price(25, start, end, datetime(2024, 6, 1))


def test_pricing_info_describes_rate_card():
    info = pricing_info(SimpleNamespace(base_rate=Decimal("25.00"), min_hours=2, max_hours=6))

    assert info["base_rate"] == 25.00
    assert info["minimum_hours"] == 2
    assert info["maximum_hours"] == 6
    assert info["premium_rates"]["weekends"] == "15% extra"
    assert info["premium_rates"]["holidays"] == "25% extra"
    assert info["commission_rate"] == 0.15
