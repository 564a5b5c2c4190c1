"""
Analytics aggregator for devdiary.

Derives an AnalyticsReport from a log collection and an explicit current
time. The rolling window is the trailing 30 days ending at ``now``.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from devdiary.core.analytics.models import (
    AnalyticsInsight,
    AnalyticsReport,
    DailyActivity,
    InsightKind,
)
from devdiary.core.logs.models import LogEntry, ensure_utc
from devdiary.core.suggestions.models import Priority

ROLLING_WINDOW_DAYS = 30

# High-priority completion above this percentage counts as success
HIGH_PRIORITY_SUCCESS_THRESHOLD = 70.0


class AnalyticsAggregator:
    """Computes rolling productivity metrics.

    Example:
        >>> aggregator = AnalyticsAggregator()
        >>> report = aggregator.compute([], now=datetime(2026, 10, 19, 14, 0))
        >>> report.total_tasks
        0
    """

    def __init__(self, window_days: int = ROLLING_WINDOW_DAYS) -> None:
        if window_days < 1:
            raise ValueError(f"window_days must be >= 1, got {window_days}")
        self.window_days = window_days

    def compute(self, logs: Sequence[LogEntry], now: datetime) -> AnalyticsReport:
        """
        Compute the analytics report.

        Args:
            logs: Full log collection
            now: Current time; naive values are treated as UTC

        Returns:
            AnalyticsReport (all-zero for an empty collection)
        """
        if not logs:
            return AnalyticsReport()

        now_utc = ensure_utc(now)
        window_start = now_utc - timedelta(days=self.window_days)
        recent = [entry for entry in logs if window_start <= entry.timestamp <= now_utc]

        return AnalyticsReport(
            total_tasks=len(logs),
            completed_tasks=sum(1 for entry in logs if entry.completed),
            category_distribution=_count_by(entry.category.value for entry in logs),
            priority_distribution=_count_by(entry.priority.value for entry in logs),
            average_tasks_per_day=len(recent) / self.window_days,
            recent_activity=len(recent),
            insights=self._insights(logs),
            productivity_trend=self._trend(logs, now),
        )

    def _insights(self, logs: Sequence[LogEntry]) -> list[AnalyticsInsight]:
        insights: list[AnalyticsInsight] = []

        high_priority = [entry for entry in logs if entry.priority == Priority.HIGH]
        if high_priority:
            completed = sum(1 for entry in high_priority if entry.completed)
            completion = (completed / len(high_priority)) * 100
            insights.append(
                AnalyticsInsight(
                    type=(
                        InsightKind.SUCCESS
                        if completion > HIGH_PRIORITY_SUCCESS_THRESHOLD
                        else InsightKind.WARNING
                    ),
                    title="High Priority Completion",
                    content=f"You've completed {completion:.1f}% of high-priority tasks.",
                    priority=Priority.HIGH,
                )
            )

        return insights

    def _trend(self, logs: Sequence[LogEntry], now: datetime) -> list[DailyActivity]:
        # Bucket by calendar day in the caller's timezone
        tz = now.tzinfo
        per_day: dict[date, int] = {}
        for entry in logs:
            day = entry.timestamp.astimezone(tz).date() if tz else entry.timestamp.date()
            per_day[day] = per_day.get(day, 0) + 1
        return [DailyActivity(date=day, tasks=count) for day, count in sorted(per_day.items())]


def _count_by(values: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def compute_analytics(logs: Sequence[LogEntry], now: datetime) -> AnalyticsReport:
    """Compute the analytics report with the default 30-day window."""
    return AnalyticsAggregator().compute(logs, now)
