from .analytics import (
    AnalyticsCoordinator,
    AnalyticsQuery,
    AnalyticsResult,
    AnalyticsService,
    BranchMetricsData,
    MemberStatsData,
    PerformanceData,
    ProductivityTrendData,
    StatsData,
)

__all__ = [
    "AnalyticsService",
    "AnalyticsCoordinator",
    "AnalyticsQuery",
    "AnalyticsResult",
    "StatsData",
    "BranchMetricsData",
    "ProductivityTrendData",
    "MemberStatsData",
    "PerformanceData",
]
