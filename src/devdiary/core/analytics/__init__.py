"""
Productivity analytics for devdiary.

Computes totals, distributions, a rolling 30-day activity rate, daily
trend and insights from the log collection. Reports are recomputed on
every request and never persisted.
"""

from devdiary.core.analytics.aggregator import (
    ROLLING_WINDOW_DAYS,
    AnalyticsAggregator,
    compute_analytics,
)
from devdiary.core.analytics.models import (
    AnalyticsInsight,
    AnalyticsReport,
    DailyActivity,
    InsightKind,
)

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsInsight",
    "AnalyticsReport",
    "DailyActivity",
    "InsightKind",
    "ROLLING_WINDOW_DAYS",
    "compute_analytics",
]
