"""
Suggestion engine for devdiary.

Evaluates the ordered rule table against a task and the user's history,
falls back to generic advice when nothing matches, and caps the result.
The engine is pure: the current hour is passed in and it never touches
storage or the clock.
"""

import logging
from collections.abc import Sequence

from devdiary.core.logs.models import MAX_SUGGESTIONS, Category, LogEntry
from devdiary.core.suggestions.models import Priority, Suggestion
from devdiary.core.suggestions.rules import FALLBACK_SUGGESTIONS, RULES, Rule, RuleContext

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Engine for generating suggestions for a new log entry.

    Example:
        >>> engine = SuggestionEngine()
        >>> suggestions = engine.generate(
        ...     "Fixed bug in login", "debugging", "high", history=[], now_hour=14
        ... )
        >>> [s.title for s in suggestions]
        ['Advanced Debugging', 'Debugging Methodology', 'High Priority Task']
    """

    def __init__(
        self,
        rules: Sequence[Rule] = RULES,
        fallback: Sequence[Suggestion] = FALLBACK_SUGGESTIONS,
        limit: int = MAX_SUGGESTIONS,
    ) -> None:
        """
        Initialize suggestion engine.

        Args:
            rules: Ordered rule table
            fallback: Suggestions used when no rule fires
            limit: Maximum suggestions per entry (1 to 4)
        """
        if not 1 <= limit <= MAX_SUGGESTIONS:
            raise ValueError(f"limit must be between 1 and {MAX_SUGGESTIONS}, got {limit}")
        self.rules = tuple(rules)
        self.fallback = tuple(fallback)
        self.limit = limit

    def generate(
        self,
        task: str,
        category: Category | str,
        priority: Priority | str,
        history: Sequence[LogEntry],
        now_hour: int,
    ) -> list[Suggestion]:
        """
        Generate suggestions for a task.

        Args:
            task: Task text as entered
            category: Declared category of the task
            priority: Declared priority of the task
            history: Existing log entries, most recent first
            now_hour: Current local hour (0-23)

        Returns:
            Up to ``limit`` suggestions in rule order

        Raises:
            ValueError: If category, priority or now_hour is out of range
        """
        if not 0 <= now_hour <= 23:
            raise ValueError(f"now_hour must be between 0 and 23, got {now_hour}")

        ctx = RuleContext(
            task=task.lower(),
            category=Category(category),
            priority=Priority(priority),
            history=tuple(history),
            now_hour=now_hour,
        )

        suggestions: list[Suggestion] = []
        for rule in self.rules:
            produced = rule.apply(ctx)
            if produced:
                logger.debug(f"Rule {rule.name} fired with {len(produced)} suggestion(s)")
                suggestions.extend(produced)

        if not suggestions:
            logger.debug("No rule fired, using fallback suggestions")
            suggestions = list(self.fallback)

        return suggestions[: self.limit]


def generate_suggestions(
    task: str,
    category: Category | str,
    priority: Priority | str,
    history: Sequence[LogEntry],
    now_hour: int,
) -> list[Suggestion]:
    """Generate suggestions with the default rule table and cap."""
    return SuggestionEngine().generate(task, category, priority, history, now_hour)
