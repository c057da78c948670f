from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List

from core.domain import DateRangePreset
from core.exceptions import ValidationError
from core.services.analytics.date_range import DateRange, add_months
from core.services.analytics.models import Bucket

MAX_TREND_BUCKETS = 8
# a three-month preset spans up to 92 days, which needs 14 weekly windows
MAX_WEEKLY_ROLLUP_BUCKETS = 14
MAX_MONTHLY_ROLLUP_BUCKETS = 12

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

Labeler = Callable[[int, datetime], str]


def week_label(index: int, start: datetime) -> str:
    return f"W{index}"


def month_label(index: int, start: datetime) -> str:
    return MONTH_LABELS[start.month - 1]


def _windows(
    start: datetime,
    end: datetime,
    boundary: Callable[[datetime, int], datetime],
    max_buckets: int,
    labeler: Labeler,
) -> List[Bucket]:
    if start > end:
        raise ValidationError("Cannot bucket a range that ends before it starts.", code="INVALID_DATE_RANGE")
    if start == end:
        return [Bucket(start=start, end=end, label=labeler(1, start), closed=True)]

    buckets: List[Bucket] = []
    current = start
    # longer ranges are truncated at the cap, not resampled
    while current < end and len(buckets) < max_buckets:
        index = len(buckets) + 1
        nxt = boundary(start, index)
        buckets.append(Bucket(start=current, end=min(nxt, end), label=labeler(index, current)))
        current = nxt

    last = buckets[-1]
    buckets[-1] = Bucket(start=last.start, end=last.end, label=last.label, closed=True)
    return buckets


def weekly_buckets(
    start: datetime,
    end: datetime,
    *,
    max_buckets: int = MAX_TREND_BUCKETS,
    labeler: Labeler = week_label,
) -> List[Bucket]:
    """
    Consecutive 7-day windows from ``start``; the final window is clamped to ``end``.
    At most ``max_buckets`` windows are produced.
    """
    return _windows(start, end, lambda origin, k: origin + timedelta(days=7 * k), max_buckets, labeler)


def monthly_buckets(
    start: datetime,
    end: datetime,
    *,
    max_buckets: int = MAX_MONTHLY_ROLLUP_BUCKETS,
) -> List[Bucket]:
    return _windows(start, end, lambda origin, k: add_months(origin, k), max_buckets, month_label)


def rollup_buckets(date_range: DateRange) -> List[Bucket]:
    """Interval scheme used by the performance overview, chosen by preset."""
    if date_range.preset == DateRangePreset.LAST_YEAR:
        return monthly_buckets(date_range.start, date_range.end)
    if date_range.preset == DateRangePreset.LAST_3_MONTHS:
        return weekly_buckets(date_range.start, date_range.end, max_buckets=MAX_WEEKLY_ROLLUP_BUCKETS)
    return weekly_buckets(date_range.start, date_range.end)


__all__ = [
    "MAX_TREND_BUCKETS",
    "MONTH_LABELS",
    "week_label",
    "month_label",
    "weekly_buckets",
    "monthly_buckets",
    "rollup_buckets",
]
