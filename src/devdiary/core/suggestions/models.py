"""
Data models for the suggestion system.

Defines the Suggestion model attached to each log entry, plus the
priority and type enumerations shared with the rest of devdiary.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    """Priority levels used by log entries, suggestions and insights."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Numeric rank for ordering (high sorts first when descending)."""
        return {
            Priority.LOW: 1,
            Priority.MEDIUM: 2,
            Priority.HIGH: 3,
        }[self]


class SuggestionType(str, Enum):
    """Kinds of advice a suggestion can carry."""

    TOOL = "tool"  # A tool or technique to try
    TIP = "tip"  # A working practice
    INSIGHT = "insight"  # An observation about the user's own patterns

    @property
    def emoji(self) -> str:
        """Get emoji icon for this suggestion type."""
        return {
            SuggestionType.TOOL: "🛠️",
            SuggestionType.TIP: "💡",
            SuggestionType.INSIGHT: "🧠",
        }[self]


class Suggestion(BaseModel):
    """A piece of generated advice attached to a log entry.

    Suggestions are computed once when an entry is created and are
    immutable afterwards.

    Example:
        >>> suggestion = Suggestion(
        ...     type=SuggestionType.TIP,
        ...     title="Debugging Methodology",
        ...     content="Hypothesize, test, observe, repeat.",
        ...     priority=Priority.HIGH,
        ... )
        >>> suggestion.formatted_title
        '💡 Debugging Methodology'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    type: SuggestionType = Field(..., description="Kind of suggestion (tool, tip, insight)")
    title: str = Field(..., min_length=1, description="Short title summarizing the advice")
    content: str = Field(..., min_length=1, description="The advice itself")
    priority: Priority = Field(
        default=Priority.MEDIUM,
        description="How strongly the suggestion is recommended",
    )

    @property
    def formatted_title(self) -> str:
        """Get title with type emoji prefix."""
        return f"{self.type.emoji} {self.title}"
