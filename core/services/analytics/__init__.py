from .access import AccessPolicy, ReadPorts, access_policy_for
from .aggregator import AggregateResult, Aggregator, FetchCall, merge_unique
from .buckets import monthly_buckets, rollup_buckets, weekly_buckets
from .coordinator import AnalyticsCoordinator, ComputationRequest
from .date_range import DateRange
from .models import (
    AnalyticsFailure,
    AnalyticsQuery,
    AnalyticsResult,
    BranchMetricsData,
    Bucket,
    Delta,
    Direction,
    MemberStatsData,
    PerformanceData,
    ProductivityTrendData,
    StatsData,
)
from .scope import AnalyticsScope, resolve_scope
from .service import AnalyticsService
from .trend import delta, split_periods

__all__ = [
    "AnalyticsService",
    "AnalyticsCoordinator",
    "ComputationRequest",
    "AnalyticsQuery",
    "AnalyticsResult",
    "AnalyticsFailure",
    "StatsData",
    "BranchMetricsData",
    "ProductivityTrendData",
    "MemberStatsData",
    "PerformanceData",
    "DateRange",
    "Bucket",
    "Delta",
    "Direction",
    "AnalyticsScope",
    "resolve_scope",
    "AccessPolicy",
    "ReadPorts",
    "access_policy_for",
    "Aggregator",
    "AggregateResult",
    "FetchCall",
    "merge_unique",
    "weekly_buckets",
    "monthly_buckets",
    "rollup_buckets",
    "delta",
    "split_periods",
]
