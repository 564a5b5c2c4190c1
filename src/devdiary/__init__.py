"""
DevDiary - development task log with contextual suggestions.

Records short task-log entries, annotates each with rule-based suggestions
derived from the entry and recent history, and computes rolling
productivity analytics over the stored collection.
"""

__version__ = "0.3.0"

# Re-export core models for convenience (suggestions first: log models depend on them)
from devdiary.core.suggestions.models import Priority, Suggestion, SuggestionType
from devdiary.core.logs.models import Category, LogDraft, LogEntry

__all__ = [
    "Category",
    "LogDraft",
    "LogEntry",
    "Priority",
    "Suggestion",
    "SuggestionType",
    "__version__",
]
