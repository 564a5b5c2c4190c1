"""
Unit tests for log data models.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from devdiary.core.errors import ValidationError
from devdiary.core.logs.models import (
    MAX_TASK_LENGTH,
    Category,
    ExportArtifact,
    LogDraft,
    LogEntry,
)
from devdiary.core.suggestions.models import Priority, Suggestion, SuggestionType


class TestLogDraft:
    """Test submit input validation."""

    def test_defaults(self) -> None:
        """Test category and priority defaults."""
        draft = LogDraft.from_input({"task": "Wrote docs"})

        assert draft.category == Category.DEVELOPMENT
        assert draft.priority == Priority.MEDIUM
        assert draft.time_spent is None
        assert draft.tags == []

    def test_task_is_trimmed(self) -> None:
        """Test surrounding whitespace is removed."""
        draft = LogDraft.from_input({"task": "   Fixed bug in login  "})

        assert draft.task == "Fixed bug in login"

    @pytest.mark.parametrize("task", ["", "   "])
    def test_empty_task_rejected(self, task: str) -> None:
        """Test empty and whitespace-only tasks are rejected."""
        with pytest.raises(ValidationError):
            LogDraft.from_input({"task": task})

    def test_task_length_limit(self) -> None:
        """Test the maximum task length is enforced after trimming."""
        assert LogDraft.from_input({"task": "x" * MAX_TASK_LENGTH}).task == "x" * 500

        with pytest.raises(ValidationError):
            LogDraft.from_input({"task": "x" * (MAX_TASK_LENGTH + 1)})

    def test_unknown_category_rejected(self) -> None:
        """Test categories outside the fixed set are rejected."""
        with pytest.raises(ValidationError, match="category"):
            LogDraft.from_input({"task": "Wrote docs", "category": "gardening"})

    def test_camel_case_time_spent(self) -> None:
        """Test the wire name timeSpent is accepted."""
        draft = LogDraft.from_input({"task": "Wrote docs", "timeSpent": 45})

        assert draft.time_spent == 45

    @pytest.mark.parametrize("value", [0, "", None])
    def test_blank_time_spent_is_absent(self, value) -> None:
        """Test blank or zero minutes mean no time recorded."""
        draft = LogDraft.from_input({"task": "Wrote docs", "timeSpent": value})

        assert draft.time_spent is None

    def test_negative_time_spent_rejected(self) -> None:
        """Test negative minutes are rejected."""
        with pytest.raises(ValidationError):
            LogDraft.from_input({"task": "Wrote docs", "timeSpent": -5})

    def test_tags_from_comma_string(self) -> None:
        """Test a comma-separated tag string is split and trimmed."""
        draft = LogDraft.from_input({"task": "Wrote docs", "tags": " api, backend ,,"})

        assert draft.tags == ["api", "backend"]

    def test_draft_passes_through(self) -> None:
        """Test an existing draft is returned unchanged."""
        draft = LogDraft(task="Wrote docs")

        assert LogDraft.from_input(draft) is draft


class TestLogEntry:
    """Test the persisted entry model."""

    def test_wire_shape(self, fixed_now: datetime) -> None:
        """Test serialization uses camelCase names."""
        entry = LogEntry(id=1, task="Wrote docs", time_spent=30, timestamp=fixed_now)

        wire = entry.to_wire()

        assert set(wire) == {
            "id",
            "task",
            "category",
            "priority",
            "timeSpent",
            "tags",
            "suggestions",
            "timestamp",
            "completed",
        }
        assert wire["timeSpent"] == 30
        assert wire["category"] == "development"
        assert wire["completed"] is False

    def test_naive_timestamp_treated_as_utc(self) -> None:
        """Test naive timestamps are stored as UTC."""
        entry = LogEntry(id=1, task="Wrote docs", timestamp=datetime(2026, 10, 19, 9, 30))

        assert entry.timestamp == datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)

    def test_offset_timestamp_converted_to_utc(self) -> None:
        """Test aware timestamps are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        entry = LogEntry(
            id=1, task="Wrote docs", timestamp=datetime(2026, 10, 19, 16, 0, tzinfo=plus_two)
        )

        assert entry.timestamp.tzinfo == timezone.utc
        assert entry.timestamp.hour == 14

    def test_null_lists_default_to_empty(self, fixed_now: datetime) -> None:
        """Test null tags and suggestions from older snapshots become empty lists."""
        entry = LogEntry.model_validate(
            {
                "id": 1,
                "task": "Wrote docs",
                "tags": None,
                "suggestions": None,
                "timestamp": fixed_now.isoformat(),
            }
        )

        assert entry.tags == []
        assert entry.suggestions == []

    def test_at_most_four_suggestions(self, fixed_now: datetime) -> None:
        """Test more than four suggestions are rejected."""
        tip = Suggestion(type=SuggestionType.TIP, title="Tip", content="Do it")

        with pytest.raises(PydanticValidationError):
            LogEntry(id=1, task="Wrote docs", suggestions=[tip] * 5, timestamp=fixed_now)

    def test_unknown_fields_ignored(self, fixed_now: datetime) -> None:
        """Test extra fields from other schema versions are dropped."""
        entry = LogEntry.model_validate(
            {"id": 1, "task": "Wrote docs", "timestamp": fixed_now.isoformat(), "mood": "ok"}
        )

        assert "mood" not in entry.to_wire()


class TestExportArtifact:
    """Test the export envelope."""

    def test_filename_includes_export_date(self, fixed_now: datetime) -> None:
        """Test the suggested filename carries the export date."""
        artifact = ExportArtifact(logs=[], export_date=fixed_now)

        assert artifact.filename == "devdiary-export-2026-10-19.json"

    def test_json_shape(self, fixed_now: datetime) -> None:
        """Test the export JSON has logs, exportDate and version."""
        import json

        artifact = ExportArtifact(logs=[], export_date=fixed_now)

        data = json.loads(artifact.to_json())

        assert data["logs"] == []
        assert data["version"] == "2.0"
        assert data["exportDate"].startswith("2026-10-19T14:00:00")
