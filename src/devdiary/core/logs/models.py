"""
Log data models for devdiary.

Defines the LogEntry model (one recorded task with its attached
suggestions), the LogDraft submit input, and the persisted Snapshot and
ExportArtifact envelopes. Wire names are camelCase (``timeSpent``,
``lastUpdated``, ``exportDate``); Python attributes are snake_case and
either form is accepted as input.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from devdiary.core.errors import ValidationError
from devdiary.core.suggestions.models import Priority, Suggestion

MAX_TASK_LENGTH = 500
MAX_SUGGESTIONS = 4
SNAPSHOT_VERSION = "2.0"


class Category(str, Enum):
    """Fixed set of work categories a log entry can belong to."""

    DEVELOPMENT = "development"
    DEBUGGING = "debugging"
    TESTING = "testing"
    PLANNING = "planning"
    LEARNING = "learning"
    MEETING = "meeting"
    RESEARCH = "research"
    DOCUMENTATION = "documentation"
    DEPLOYMENT = "deployment"
    REFACTORING = "refactoring"


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime (naive values are treated as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def describe_validation_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic error into a single readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def _blank_minutes_to_none(value: Any) -> Any:
    # The entry form submits 0 or "" when no time was recorded
    if value in (None, "", 0):
        return None
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON-compatible shape."""
        return self.model_dump(by_alias=True, mode="json")


class LogDraft(_WireModel):
    """Validated input for creating a log entry.

    Example:
        >>> draft = LogDraft.from_input({"task": "  Fixed bug in login  ", "category": "debugging"})
        >>> draft.task
        'Fixed bug in login'
        >>> draft.priority
        <Priority.MEDIUM: 'medium'>
    """

    task: str = Field(..., min_length=1, max_length=MAX_TASK_LENGTH)
    category: Category = Field(default=Category.DEVELOPMENT)
    priority: Priority = Field(default=Priority.MEDIUM)
    time_spent: int | None = Field(default=None, gt=0, description="Minutes spent")
    tags: list[str] = Field(default_factory=list)

    @field_validator("task", mode="before")
    @classmethod
    def strip_task(cls, v: Any) -> Any:
        """Trim surrounding whitespace before length checks."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("time_spent", mode="before")
    @classmethod
    def blank_time_spent(cls, v: Any) -> Any:
        """Treat blank or zero minutes as absent."""
        return _blank_minutes_to_none(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        """Accept a comma-separated string; trim tags and drop empty ones."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            return [str(tag).strip() for tag in v if str(tag).strip()]
        return v

    @classmethod
    def from_input(cls, data: "LogDraft | dict[str, Any]") -> "LogDraft":
        """
        Build a draft from raw submit input.

        Args:
            data: A LogDraft (returned as-is) or a mapping of submit fields

        Returns:
            Validated LogDraft

        Raises:
            ValidationError: If the task is empty or too long, or any field is invalid
        """
        if isinstance(data, LogDraft):
            return data
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e)) from e


class LogEntry(_WireModel):
    """
    A single recorded task.

    Entries are created by the repository with suggestions computed once
    at creation time. Only ``completed`` and the descriptive fields are
    expected to change afterwards; ``id``, ``timestamp`` and
    ``suggestions`` are fixed.

    Example:
        >>> entry = LogEntry(
        ...     id=1760882400000,
        ...     task="Wrote unit tests for API endpoints",
        ...     category=Category.TESTING,
        ...     timestamp=datetime(2026, 10, 19, 14, 0, tzinfo=timezone.utc),
        ... )
        >>> entry.completed
        False
        >>> entry.to_wire()["timeSpent"] is None
        True
    """

    id: int = Field(..., description="Unique, creation-ordered identifier")
    task: str = Field(..., min_length=1, max_length=MAX_TASK_LENGTH)
    category: Category = Field(default=Category.DEVELOPMENT)
    priority: Priority = Field(default=Priority.MEDIUM)
    time_spent: int | None = Field(default=None, gt=0, description="Minutes spent")
    tags: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list, max_length=MAX_SUGGESTIONS)
    timestamp: datetime = Field(..., description="Creation instant (UTC)")
    completed: bool = Field(default=False)

    @field_validator("task", mode="before")
    @classmethod
    def strip_task(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("time_spent", mode="before")
    @classmethod
    def blank_time_spent(cls, v: Any) -> Any:
        return _blank_minutes_to_none(v)

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("suggestions", mode="before")
    @classmethod
    def default_suggestions(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Store every timestamp as aware UTC."""
        return ensure_utc(v)


class Snapshot(_WireModel):
    """The single persisted unit holding the whole log collection."""

    logs: list[LogEntry] = Field(default_factory=list)
    last_updated: datetime
    version: str = Field(default=SNAPSHOT_VERSION)


class ExportArtifact(_WireModel):
    """Downloadable export of the log collection."""

    logs: list[LogEntry] = Field(default_factory=list)
    export_date: datetime
    version: str = Field(default=SNAPSHOT_VERSION)

    @property
    def filename(self) -> str:
        """Suggested filename, e.g. ``devdiary-export-2026-10-19.json``."""
        return f"devdiary-export-{self.export_date.date().isoformat()}.json"

    def to_json(self) -> str:
        """Render as pretty-printed JSON."""
        return json.dumps(self.to_wire(), indent=2, ensure_ascii=False)
