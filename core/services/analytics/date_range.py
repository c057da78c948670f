from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from core.domain import DateRangePreset
from core.exceptions import ValidationError


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime
    preset: Optional[DateRangePreset] = None

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(
                f"Date range ends before it starts ({self.start.isoformat()} > {self.end.isoformat()}).",
                code="INVALID_DATE_RANGE",
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        return self.start <= moment <= self.end

    def previous(self) -> "DateRange":
        """The window of identical length immediately preceding ``start``."""
        return DateRange(start=self.start - self.duration, end=self.start, preset=self.preset)

    def contains_previous(self, moment: datetime | None) -> bool:
        # previous window is half-open so a timestamp equal to start counts once
        if moment is None:
            return False
        prev = self.previous()
        return prev.start <= moment < prev.end

    @staticmethod
    def for_preset(preset: DateRangePreset | str, now: datetime) -> "DateRange":
        preset = DateRangePreset(preset)
        if preset == DateRangePreset.LAST_7_DAYS:
            start = now - timedelta(days=7)
        elif preset == DateRangePreset.LAST_30_DAYS:
            start = now - timedelta(days=30)
        elif preset == DateRangePreset.LAST_3_MONTHS:
            start = add_months(now, -3)
        else:
            start = add_months(now, -12)
        return DateRange(start=start, end=now, preset=preset)


__all__ = ["DateRange", "add_months"]
