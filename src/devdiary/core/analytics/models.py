"""
Data models for productivity analytics.

AnalyticsReport is derived from the log collection on demand and is never
persisted.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from devdiary.core.suggestions.models import Priority


class InsightKind(str, Enum):
    """Classification of an analytics insight."""

    SUCCESS = "success"
    WARNING = "warning"


class AnalyticsInsight(BaseModel):
    """A single observation about the collection."""

    model_config = ConfigDict(frozen=True)

    type: InsightKind
    title: str
    content: str
    priority: Priority = Priority.MEDIUM


class DailyActivity(BaseModel):
    """Number of tasks logged on one day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    tasks: int = Field(..., ge=0)


class AnalyticsReport(BaseModel):
    """
    Rolling productivity metrics for a log collection.

    Example:
        >>> report = AnalyticsReport()
        >>> report.total_tasks, report.average_tasks_per_day
        (0, 0.0)
        >>> report.model_dump(by_alias=True)["categoryDistribution"]
        {}
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    total_tasks: int = Field(default=0, ge=0, description="Collection size")
    completed_tasks: int = Field(default=0, ge=0, description="Entries marked completed")
    category_distribution: dict[str, int] = Field(
        default_factory=dict,
        description="Entry count per category (only categories present)",
    )
    priority_distribution: dict[str, int] = Field(
        default_factory=dict,
        description="Entry count per priority (only priorities present)",
    )
    average_tasks_per_day: float = Field(
        default=0.0,
        ge=0.0,
        description="Entries in the rolling window divided by its length in days",
    )
    recent_activity: int = Field(default=0, ge=0, description="Entries in the rolling window")
    insights: list[AnalyticsInsight] = Field(default_factory=list)
    productivity_trend: list[DailyActivity] = Field(
        default_factory=list,
        description="Entries per day across the whole collection, oldest day first",
    )

    @property
    def completion_rate(self) -> float:
        """Percentage of all tasks that are completed."""
        if self.total_tasks == 0:
            return 0.0
        return (self.completed_tasks / self.total_tasks) * 100.0
