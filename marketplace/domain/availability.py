"""Provider availability resolution.

A provider works on the weekdays listed in ``provider.availability`` inside the
daily window ``work_day_start``..``work_day_end``. Open windows for a date are
that daily window minus existing bookings and time off. Intervals are
half-open, so back-to-back bookings do not collide.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

WEEKDAY_TOKENS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

Interval = tuple[datetime, datetime]


def weekday_token(day: date) -> str:
    return WEEKDAY_TOKENS[day.weekday()]


def normalize_weekdays(tokens: Optional[Iterable[str]]) -> set[str]:
    # accepts "Mon", "monday", "MON"
    return {str(t).strip().lower()[:3] for t in tokens or ()}


def overlaps(start1, end1, start2, end2) -> bool:
    return max(start1, start2) < min(end1, end2)


@dataclass
class TimeWindow:
    start: datetime
    end: datetime

    def as_dict(self) -> dict:
        return {"start": self.start.time().isoformat(), "end": self.end.time().isoformat()}


@dataclass
class Availability:
    available: bool
    windows: list[TimeWindow] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "available": self.available,
            "available_times": [w.as_dict() for w in self.windows],
        }


def works_on(provider, day: date) -> bool:
    return weekday_token(day) in normalize_weekdays(provider.availability)


def working_window(provider, day: date) -> Interval:
    return datetime.combine(day, provider.work_day_start), datetime.combine(day, provider.work_day_end)


def timeoff_blocks(timeoffs, day: date) -> list[Interval]:
    """Blocked intervals on ``day`` from the provider's time off entries."""
    blocks = []
    for t in timeoffs:
        if not (t.start_date <= day <= t.end_date):
            continue
        if t.start_time and t.end_time:
            blocks.append((datetime.combine(day, t.start_time), datetime.combine(day, t.end_time)))
        else:
            # full day block
            blocks.append((datetime.combine(day, time.min), datetime.combine(day + timedelta(days=1), time.min)))
    return blocks


def subtract(window: Interval, blocks: Iterable[Interval]) -> list[TimeWindow]:
    open_start, open_end = window
    free = []
    cursor = open_start
    for b_start, b_end in sorted(blocks):
        if b_end <= cursor or b_start >= open_end:
            continue
        if b_start > cursor:
            free.append(TimeWindow(cursor, b_start))
        cursor = max(cursor, b_end)
        if cursor >= open_end:
            break
    if cursor < open_end:
        free.append(TimeWindow(cursor, open_end))
    return free


def resolve(provider, day: date, busy: Iterable[Interval], timeoffs=()) -> Availability:
    if not works_on(provider, day):
        return Availability(available=False)
    blocks = list(busy) + timeoff_blocks(timeoffs, day)
    return Availability(available=True, windows=subtract(working_window(provider, day), blocks))


def unavailable_reason(provider, start: datetime, end: datetime, busy: Iterable[Interval], timeoffs=()) -> Optional[str]:
    """Why the provider cannot take ``start``..``end``, or None when bookable."""
    day = start.date()
    if not works_on(provider, day):
        return f"Provider is not available on {weekday_token(day)}"

    window_start, window_end = working_window(provider, day)
    if start < window_start or end > window_end:
        return "Requested time is outside provider working hours"

    for b_start, b_end in busy:
        if overlaps(b_start, b_end, start, end):
            return "Requested time overlaps an existing booking"

    for b_start, b_end in timeoff_blocks(timeoffs, day):
        if overlaps(b_start, b_end, start, end):
            return "Requested time falls during provider time off"

    return None
