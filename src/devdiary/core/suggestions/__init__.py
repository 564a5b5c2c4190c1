"""
Suggestion system for devdiary.

Produces contextual advice for a new log entry from a declarative,
ordered rule table evaluated against the task text, its category and
priority, the current hour and the user's recent history.
"""

from devdiary.core.suggestions.engine import SuggestionEngine, generate_suggestions
from devdiary.core.suggestions.models import Priority, Suggestion, SuggestionType
from devdiary.core.suggestions.rules import (
    FALLBACK_SUGGESTIONS,
    RULES,
    KeywordFollowup,
    Rule,
    RuleContext,
    dominant_category,
    keyword_rule,
)

__all__ = [
    # Models
    "Priority",
    "Suggestion",
    "SuggestionType",
    # Rules
    "FALLBACK_SUGGESTIONS",
    "KeywordFollowup",
    "RULES",
    "Rule",
    "RuleContext",
    "dominant_category",
    "keyword_rule",
    # Engine
    "SuggestionEngine",
    "generate_suggestions",
]
