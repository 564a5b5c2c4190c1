"""
Declarative suggestion rules.

Each rule pairs a predicate over a RuleContext with a factory producing the
suggestions to append when the predicate holds. RULES is evaluated in
order by the engine; every rule is independent, so several can fire on
one entry. FALLBACK_SUGGESTIONS is used only when none fire.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from devdiary.core.logs.models import Category, LogEntry
from devdiary.core.suggestions.models import Priority, Suggestion, SuggestionType

# Recency-pattern rule parameters
RECENT_HISTORY_SIZE = 5
PATTERN_PREFIX_LENGTH = 10

# Temporal rule: hours considered a late session (inclusive bounds)
LATE_SESSION_START_HOUR = 18
LATE_SESSION_END_HOUR = 6

# Frequency rule: dominant category must occur more often than this
DOMINANT_CATEGORY_THRESHOLD = 3
DEFAULT_DOMINANT_CATEGORY = Category.DEVELOPMENT.value


@dataclass(frozen=True)
class RuleContext:
    """Inputs visible to every rule.

    ``task`` is already lowercased. ``history`` is most-recent-first.
    """

    task: str
    category: Category
    priority: Priority
    history: Sequence[LogEntry]
    now_hour: int

    def mentions(self, *keywords: str) -> bool:
        """Check whether any keyword occurs as a substring of the task."""
        return any(keyword in self.task for keyword in keywords)


Predicate = Callable[[RuleContext], bool]
SuggestionFactory = Callable[[RuleContext], list[Suggestion]]


@dataclass(frozen=True)
class Rule:
    """A named predicate/suggestion-factory pair."""

    name: str
    predicate: Predicate
    factory: SuggestionFactory

    def apply(self, ctx: RuleContext) -> list[Suggestion]:
        """Return the rule's suggestions if it fires, else an empty list."""
        if not self.predicate(ctx):
            return []
        return list(self.factory(ctx))


@dataclass(frozen=True)
class KeywordFollowup:
    """Extra suggestion added by a keyword rule when more keywords appear."""

    keywords: tuple[str, ...]
    suggestion: Suggestion


def _suggestion(
    kind: SuggestionType, title: str, content: str, priority: Priority
) -> Suggestion:
    return Suggestion(type=kind, title=title, content=content, priority=priority)


def keyword_rule(
    name: str,
    keywords: tuple[str, ...],
    suggestions: Sequence[Suggestion],
    *,
    category: Category | None = None,
    followups: Sequence[KeywordFollowup] = (),
) -> Rule:
    """
    Build a rule that fires on task keywords or a declared category.

    Args:
        name: Rule name used in debug logging
        keywords: Substrings matched against the lowercased task
        suggestions: Fixed suggestions appended when the rule fires
        category: Category that fires the rule regardless of keywords
        followups: Extra suggestions appended when their own keywords also appear

    Returns:
        Rule evaluating the keyword family
    """

    def predicate(ctx: RuleContext) -> bool:
        return ctx.mentions(*keywords) or (category is not None and ctx.category == category)

    def factory(ctx: RuleContext) -> list[Suggestion]:
        produced = list(suggestions)
        for followup in followups:
            if ctx.mentions(*followup.keywords):
                produced.append(followup.suggestion)
        return produced

    return Rule(name=name, predicate=predicate, factory=factory)


# =============================================================================
# History helpers
# =============================================================================


def matches_recent_pattern(ctx: RuleContext) -> bool:
    """Check the task prefix against the most recent history entries.

    Containment in either direction counts, so a short recent task that is
    a prefix of the new one matches as well as the reverse.
    """
    prefix = ctx.task[:PATTERN_PREFIX_LENGTH]
    for entry in ctx.history[:RECENT_HISTORY_SIZE]:
        recent = entry.task.lower()
        if prefix in recent or recent[:PATTERN_PREFIX_LENGTH] in ctx.task:
            return True
    return False


def category_counts(history: Sequence[LogEntry]) -> dict[str, int]:
    """Count history entries per category, in order of first appearance."""
    counts: dict[str, int] = {}
    for entry in history:
        key = entry.category.value
        counts[key] = counts.get(key, 0) + 1
    return counts


def dominant_category(history: Sequence[LogEntry]) -> tuple[str, int]:
    """
    Find the most frequent category across history.

    Ties go to the tied category that first appeared latest. An empty
    history yields ("development", 0).

    Returns:
        Tuple of (category value, count)
    """
    counts = category_counts(history)
    dominant = DEFAULT_DOMINANT_CATEGORY
    for key, count in counts.items():
        if not counts.get(dominant, 0) > count:
            dominant = key
    return dominant, counts.get(dominant, 0)


def _is_category_shift(ctx: RuleContext) -> bool:
    dominant, count = dominant_category(ctx.history)
    return ctx.category.value != dominant and count > DOMINANT_CATEGORY_THRESHOLD


def _category_shift(ctx: RuleContext) -> list[Suggestion]:
    dominant, _ = dominant_category(ctx.history)
    return [
        _suggestion(
            SuggestionType.INSIGHT,
            "Category Shift",
            f"You usually work on {dominant}. "
            "This change in focus might benefit from extra planning.",
            Priority.LOW,
        )
    ]


def _is_late_session(ctx: RuleContext) -> bool:
    return ctx.now_hour >= LATE_SESSION_START_HOUR or ctx.now_hour <= LATE_SESSION_END_HOUR


# =============================================================================
# Rule table
# =============================================================================

PATTERN_RULE = Rule(
    name="recent-pattern",
    predicate=matches_recent_pattern,
    factory=lambda ctx: [
        _suggestion(
            SuggestionType.INSIGHT,
            "Pattern Detected",
            "You've worked on similar tasks recently. "
            "Consider creating a checklist or template to streamline this work.",
            Priority.HIGH,
        )
    ],
)

DEBUGGING_RULE = keyword_rule(
    "debugging",
    ("debug", "bug", "error"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "Advanced Debugging",
            "Use browser DevTools Sources tab for breakpoints, or try VS Code's "
            "integrated debugger for better inspection.",
            Priority.MEDIUM,
        ),
        _suggestion(
            SuggestionType.TIP,
            "Debugging Methodology",
            "Follow the scientific method: hypothesize, test, observe, repeat. "
            "Document your findings.",
            Priority.HIGH,
        ),
    ],
    category=Category.DEBUGGING,
    followups=[
        KeywordFollowup(
            ("frontend", "ui"),
            _suggestion(
                SuggestionType.TOOL,
                "Frontend Debugging",
                "Try React Developer Tools profiler or Vue.js devtools for "
                "component-specific issues.",
                Priority.MEDIUM,
            ),
        )
    ],
)

TESTING_RULE = keyword_rule(
    "testing",
    ("test", "testing"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "Testing Strategy",
            "Consider the testing pyramid: more unit tests, fewer integration tests, "
            "minimal e2e tests.",
            Priority.HIGH,
        ),
        _suggestion(
            SuggestionType.TIP,
            "Test-Driven Development",
            "Write failing tests first, then implement code to make them pass "
            "for better design.",
            Priority.MEDIUM,
        ),
    ],
    category=Category.TESTING,
    followups=[
        KeywordFollowup(
            ("api", "backend"),
            _suggestion(
                SuggestionType.TOOL,
                "API Testing",
                "Use Postman collections or Newman for automated API testing "
                "in CI/CD pipelines.",
                Priority.MEDIUM,
            ),
        )
    ],
)

PERFORMANCE_RULE = keyword_rule(
    "performance",
    ("performance", "optimize", "slow"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "Performance Analysis",
            "Use Chrome DevTools Performance tab and Lighthouse CI for comprehensive "
            "performance auditing.",
            Priority.HIGH,
        ),
        _suggestion(
            SuggestionType.TIP,
            "Performance Budget",
            "Set performance budgets: <3s load time, <100ms response time, "
            "<50KB critical resources.",
            Priority.HIGH,
        ),
        _suggestion(
            SuggestionType.INSIGHT,
            "Optimization Priority",
            "Focus on Core Web Vitals: LCP, FID, and CLS for user experience improvements.",
            Priority.MEDIUM,
        ),
    ],
)

API_RULE = keyword_rule(
    "api",
    ("api", "backend", "server"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "API Development",
            "Implement OpenAPI/Swagger for documentation and use tools like Insomnia "
            "or Thunder Client.",
            Priority.MEDIUM,
        ),
        _suggestion(
            SuggestionType.TIP,
            "API Security",
            "Implement rate limiting, input validation, authentication, and CORS properly.",
            Priority.HIGH,
        ),
    ],
)

UI_FRAMEWORK_RULE = keyword_rule(
    "ui-framework",
    ("react", "component", "jsx"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "React Development",
            "Use React DevTools Profiler and consider React.memo, useMemo, and "
            "useCallback for optimization.",
            Priority.MEDIUM,
        ),
        _suggestion(
            SuggestionType.TIP,
            "React Best Practices",
            "Follow the single responsibility principle and keep components under 200 lines.",
            Priority.MEDIUM,
        ),
    ],
)

STYLING_RULE = keyword_rule(
    "styling",
    ("css", "style", "design"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "CSS Development",
            "Use CSS custom properties for themes and consider CSS Grid with Flexbox "
            "for robust layouts.",
            Priority.MEDIUM,
        ),
        _suggestion(
            SuggestionType.TIP,
            "Design System",
            "Create a consistent spacing scale (4px base) and color palette for "
            "better design consistency.",
            Priority.MEDIUM,
        ),
    ],
)

DATABASE_RULE = keyword_rule(
    "database",
    ("database", "sql", "query"),
    [
        _suggestion(
            SuggestionType.TOOL,
            "Database Optimization",
            "Use EXPLAIN ANALYZE for query optimization and consider indexing "
            "frequently queried columns.",
            Priority.HIGH,
        ),
        _suggestion(
            SuggestionType.TIP,
            "Database Design",
            "Normalize to 3NF for consistency, denormalize carefully for performance "
            "where needed.",
            Priority.MEDIUM,
        ),
    ],
)

HIGH_PRIORITY_RULE = Rule(
    name="high-priority",
    predicate=lambda ctx: ctx.priority == Priority.HIGH,
    factory=lambda ctx: [
        _suggestion(
            SuggestionType.INSIGHT,
            "High Priority Task",
            "Break this into smaller subtasks and tackle the riskiest parts first. "
            "Consider pair programming.",
            Priority.HIGH,
        )
    ],
)

LATE_SESSION_RULE = Rule(
    name="late-session",
    predicate=_is_late_session,
    factory=lambda ctx: [
        _suggestion(
            SuggestionType.TIP,
            "Late Work Session",
            "Take regular breaks and ensure good lighting. "
            "Consider tackling easier tasks when tired.",
            Priority.MEDIUM,
        )
    ],
)

CATEGORY_SHIFT_RULE = Rule(
    name="category-shift",
    predicate=_is_category_shift,
    factory=_category_shift,
)

RULES: tuple[Rule, ...] = (
    PATTERN_RULE,
    DEBUGGING_RULE,
    TESTING_RULE,
    PERFORMANCE_RULE,
    API_RULE,
    UI_FRAMEWORK_RULE,
    STYLING_RULE,
    DATABASE_RULE,
    HIGH_PRIORITY_RULE,
    LATE_SESSION_RULE,
    CATEGORY_SHIFT_RULE,
)

FALLBACK_SUGGESTIONS: tuple[Suggestion, ...] = (
    _suggestion(
        SuggestionType.TIP,
        "General Productivity",
        "Use the Pomodoro Technique: 25 minutes focused work, 5 minute break "
        "for sustained productivity.",
        Priority.MEDIUM,
    ),
    _suggestion(
        SuggestionType.TOOL,
        "Code Quality",
        "Set up ESLint, Prettier, and Husky pre-commit hooks for consistent code quality.",
        Priority.MEDIUM,
    ),
    _suggestion(
        SuggestionType.INSIGHT,
        "Documentation",
        "Document your decisions and code. Your future self will thank you.",
        Priority.LOW,
    ),
)

__all__ = [
    "FALLBACK_SUGGESTIONS",
    "KeywordFollowup",
    "RULES",
    "Rule",
    "RuleContext",
    "category_counts",
    "dominant_category",
    "keyword_rule",
    "matches_recent_pattern",
]
