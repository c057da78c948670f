from __future__ import annotations

from typing import Iterable, List, Tuple

from core.domain import Task
from core.services.analytics.date_range import DateRange
from core.services.analytics.models import Delta, Direction


def delta(current: float, previous: float) -> Delta:
    # previous == 0 is reported flat rather than as an unbounded swing
    if previous <= 0:
        return Delta(pct=0.0, direction=Direction.FLAT)
    pct = 100.0 * (current - previous) / previous
    if pct > 0:
        direction = Direction.UP
    elif pct < 0:
        direction = Direction.DOWN
    else:
        direction = Direction.FLAT
    return Delta(pct=pct, direction=direction)


def split_periods(tasks: Iterable[Task], date_range: DateRange) -> Tuple[List[Task], List[Task]]:
    """
    Split one aggregated task set into (current, previous) windows by ``created_at``.
    Both windows read from the same snapshot.
    """
    current: List[Task] = []
    previous: List[Task] = []
    for task in tasks:
        if date_range.contains(task.created_at):
            current.append(task)
        elif date_range.contains_previous(task.created_at):
            previous.append(task)
    return current, previous


__all__ = ["delta", "split_periods"]
