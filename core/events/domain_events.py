"""Analytics lifecycle events: published results, load failures, per-workspace fetch failures."""
from __future__ import annotations

from typing import Any

from core.events.signal import Signal


class AnalyticsEvents:
    def __init__(self) -> None:
        self.result_published: Signal[Any] = Signal("result_published")  # AnalyticsResult
        self.load_failed: Signal[Any] = Signal("load_failed")            # AnalyticsFailure
        self.fetch_failed: Signal[Any] = Signal("fetch_failed")          # FetchFailure


# SINGLE global instance
analytics_events = AnalyticsEvents()


__all__ = ["AnalyticsEvents", "analytics_events"]
