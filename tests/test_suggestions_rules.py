"""
Unit tests for the suggestion rule helpers.
"""

from devdiary.core.logs.models import Category
from devdiary.core.suggestions.models import Priority, Suggestion, SuggestionType
from devdiary.core.suggestions.rules import (
    KeywordFollowup,
    RuleContext,
    category_counts,
    dominant_category,
    keyword_rule,
    matches_recent_pattern,
)


def make_context(task: str, history=(), category=Category.DEVELOPMENT) -> RuleContext:
    return RuleContext(
        task=task.lower(),
        category=category,
        priority=Priority.MEDIUM,
        history=tuple(history),
        now_hour=12,
    )


class TestDominantCategory:
    """Test frequency helpers."""

    def test_empty_history(self) -> None:
        """Test an empty history defaults to development with no occurrences."""
        assert dominant_category([]) == ("development", 0)

    def test_most_frequent_wins(self, make_entry) -> None:
        """Test the most frequent category is dominant."""
        history = [
            make_entry(category="testing"),
            make_entry(category="debugging"),
            make_entry(category="debugging"),
        ]

        assert dominant_category(history) == ("debugging", 2)

    def test_tie_goes_to_latest_first_appearance(self, make_entry) -> None:
        """Test a tie resolves to the tied category that first appeared last."""
        history = [make_entry(category="development"), make_entry(category="testing")]

        assert dominant_category(history) == ("testing", 1)

    def test_counts_preserve_first_appearance_order(self, make_entry) -> None:
        """Test counts keep categories in order of first appearance."""
        history = [
            make_entry(category="testing"),
            make_entry(category="development"),
            make_entry(category="testing"),
        ]

        assert list(category_counts(history).items()) == [("testing", 2), ("development", 1)]


class TestRecentPattern:
    """Test the recency pattern predicate."""

    def test_new_task_prefix_in_recent(self, make_entry) -> None:
        """Test the new task's first ten characters found in a recent task."""
        ctx = make_context("Update docs for CLI", [make_entry("Update docs for API")])

        assert matches_recent_pattern(ctx)

    def test_short_recent_task_contained_in_new(self, make_entry) -> None:
        """Test a short recent task contained in the new one also matches."""
        ctx = make_context("Triage inbox and reply", [make_entry("Triage")])

        assert matches_recent_pattern(ctx)

    def test_no_history(self) -> None:
        """Test no history never matches."""
        assert not matches_recent_pattern(make_context("Update docs"))


class TestKeywordRule:
    """Test the keyword rule builder."""

    def test_fires_on_keyword_or_category(self) -> None:
        """Test a keyword rule fires on its keywords or its category."""
        tip = Suggestion(type=SuggestionType.TIP, title="Tip", content="Do it")
        rule = keyword_rule("sample", ("alpha",), [tip], category=Category.RESEARCH)

        assert rule.apply(make_context("alpha release")) == [tip]
        assert rule.apply(make_context("beta", category=Category.RESEARCH)) == [tip]
        assert rule.apply(make_context("beta")) == []

    def test_followup_appended_when_its_keywords_match(self) -> None:
        """Test follow-ups are added after the fixed suggestions."""
        tip = Suggestion(type=SuggestionType.TIP, title="Tip", content="Do it")
        extra = Suggestion(type=SuggestionType.TOOL, title="Extra", content="More")
        rule = keyword_rule(
            "sample", ("alpha",), [tip], followups=[KeywordFollowup(("gamma",), extra)]
        )

        assert rule.apply(make_context("alpha gamma")) == [tip, extra]
        assert rule.apply(make_context("alpha")) == [tip]
