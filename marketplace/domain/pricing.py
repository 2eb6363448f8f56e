"""Pricing engine.

Computes the price breakdown for a service interval:

    base      = hourly rate x duration in hours
    premium   = 15% of base on weekends, else 25% of base on public holidays
    discount  = 10% of base when the job starts 7 or more days from now
    final     = base + premium - discount
    commission = 15% of final (platform cut, reported alongside)

All arithmetic is done in ``Decimal``; values are rounded to cents only when
the breakdown is presented with :meth:`PriceBreakdown.as_dict`.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union
from zoneinfo import ZoneInfo

from marketplace.core.config import CURRENCY, MARKETPLACE_TIMEZONE, PLATFORM_COMMISSION_RATE

WEEKEND_PREMIUM_RATE = Decimal("0.15")
HOLIDAY_PREMIUM_RATE = Decimal("0.25")
EARLY_BIRD_DISCOUNT_RATE = Decimal("0.10")
EARLY_BIRD_MIN_DAYS = 7
COMMISSION_RATE = Decimal(PLATFORM_COMMISSION_RATE)

CENT = Decimal("0.01")

# South African public holidays, (month, day), applied every year
PUBLIC_HOLIDAYS = frozenset(
    {
        (1, 1),    # New Year's Day
        (3, 21),   # Human Rights Day
        (4, 18),   # Good Friday
        (4, 21),   # Family Day
        (4, 27),   # Freedom Day
        (5, 1),    # Workers' Day
        (6, 16),   # Youth Day
        (8, 9),    # National Women's Day
        (9, 24),   # Heritage Day
        (12, 16),  # Day of Reconciliation
        (12, 25),  # Christmas Day
        (12, 26),  # Day of Goodwill
    }
)

Number = Union[Decimal, int, float, str]


class InvalidInterval(ValueError):
    """Raised when an interval does not end after it starts."""


def local_tz() -> ZoneInfo:
    return ZoneInfo(MARKETPLACE_TIMEZONE)


def to_local(dt: datetime) -> datetime:
    """Naive wall-clock time in the marketplace calendar.

    Aware datetimes are converted; naive ones are already local.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(local_tz()).replace(tzinfo=None)
    return dt


def local_now() -> datetime:
    return datetime.now(local_tz()).replace(tzinfo=None)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_public_holiday(day: date) -> bool:
    return (day.month, day.day) in PUBLIC_HOLIDAYS


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PriceBreakdown:
    base_amount: Decimal
    premium: Decimal
    discount: Decimal
    final_amount: Decimal
    commission: Decimal
    hours: Decimal
    hourly_rate: Decimal
    premium_reason: Optional[str] = None
    discount_reason: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "base_amount": _money(self.base_amount),
            "premium": _money(self.premium),
            "discount": _money(self.discount),
            "final_amount": _money(self.final_amount),
            "commission": _money(self.commission),
            "hours": _money(self.hours),
            "hourly_rate": _money(self.hourly_rate),
            "premium_reason": self.premium_reason,
            "discount_reason": self.discount_reason,
            "currency": CURRENCY,
        }


def duration_hours(start: datetime, end: datetime) -> Decimal:
    start, end = to_local(start), to_local(end)
    if end <= start:
        raise InvalidInterval("end_time must be after start_time")
    minutes = int((end - start).total_seconds() // 60)
    return Decimal(minutes) / Decimal(60)


def calculate_price(base_rate: Number, start: datetime, end: datetime, now: datetime) -> PriceBreakdown:
    hours = duration_hours(start, end)
    rate = Decimal(str(base_rate))
    base_amount = rate * hours

    start_local = to_local(start)
    premium = Decimal(0)
    premium_reason = None
    if is_weekend(start_local.date()):
        premium = base_amount * WEEKEND_PREMIUM_RATE
        premium_reason = "weekend"
    elif is_public_holiday(start_local.date()):
        premium = base_amount * HOLIDAY_PREMIUM_RATE
        premium_reason = "holiday"

    discount = Decimal(0)
    discount_reason = None
    if start_local - to_local(now) >= timedelta(days=EARLY_BIRD_MIN_DAYS):
        discount = base_amount * EARLY_BIRD_DISCOUNT_RATE
        discount_reason = "early_bird"

    final_amount = base_amount + premium - discount

    return PriceBreakdown(
        base_amount=base_amount,
        premium=premium,
        discount=discount,
        final_amount=final_amount,
        commission=final_amount * COMMISSION_RATE,
        hours=hours,
        hourly_rate=rate,
        premium_reason=premium_reason,
        discount_reason=discount_reason,
    )


def pricing_info(service) -> dict:
    """Rate card shown before booking."""
    return {
        "base_rate": _money(Decimal(str(service.base_rate))),
        "currency": CURRENCY,
        "minimum_hours": service.min_hours,
        "maximum_hours": service.max_hours,
        "premium_rates": {
            "weekends": f"{WEEKEND_PREMIUM_RATE * 100:.0f}% extra",
            "holidays": f"{HOLIDAY_PREMIUM_RATE * 100:.0f}% extra",
        },
        "discounts": {
            "early_bird": f"{EARLY_BIRD_DISCOUNT_RATE * 100:.0f}% off ({EARLY_BIRD_MIN_DAYS}+ days in advance)",
        },
        "commission_rate": float(COMMISSION_RATE),
    }
