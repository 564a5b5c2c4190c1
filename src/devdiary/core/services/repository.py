"""
Log repository: the service API over suggestions, storage and analytics.

Wraps the suggestion engine, a LogStore and the analytics aggregator into
a service that any interface (CLI, scripts, tests) can call. Every
operation is a coroutine that settles with an OperationResult; validation
problems are raised as ValidationError before the store is touched.

Each mutation is an unguarded read-modify-write (load, change in memory,
save), so overlapping calls race and the last save wins. Pass
``serialize_mutations=True`` to apply them one at a time instead.

Usage:
    >>> from devdiary.core.services.repository import LogRepository
    >>> repository = LogRepository.from_config()
    >>> result = await repository.submit_log({"task": "Fixed bug in login"})
    >>> entry = result.unwrap()
    >>> [s.title for s in entry.suggestions]
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from devdiary.core.analytics.aggregator import AnalyticsAggregator
from devdiary.core.analytics.models import AnalyticsReport
from devdiary.core.config.loader import load_config
from devdiary.core.config.models import DiaryConfig, LatencyConfig
from devdiary.core.errors import (
    DiaryError,
    FormatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from devdiary.core.logs.models import (
    SNAPSHOT_VERSION,
    ExportArtifact,
    LogDraft,
    LogEntry,
    describe_validation_error,
    ensure_utc,
)
from devdiary.core.logs.store import JsonLogStore, LoadResult, LogStore, default_snapshot_path
from devdiary.core.suggestions.engine import SuggestionEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]

# Fields fixed at creation; update_log rejects changes to them
PROTECTED_FIELDS = frozenset({"id", "timestamp", "suggestions"})


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Outcome of a repository operation.

    Holds either a value or a typed error. ``changed`` reports whether the
    stored collection was modified, so callers can tell "nothing changed,
    error reported" from "changed".
    """

    value: T | None = None
    error: DiaryError | None = None
    changed: bool = False

    @property
    def ok(self) -> bool:
        """Check if the operation succeeded."""
        return self.error is None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return self.error is not None

    def unwrap(self) -> T:
        """
        Return the value or raise the carried error.

        Raises:
            DiaryError: The error the operation settled with
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T, *, changed: bool = False) -> OperationResult[T]:
        return cls(value=value, changed=changed)

    @classmethod
    def failure(cls, error: DiaryError) -> OperationResult[T]:
        return cls(error=error)


# ============================================================================
# Helpers
# ============================================================================


def next_log_id(logs: Sequence[LogEntry], now: datetime) -> int:
    """
    Generate a unique, creation-ordered id.

    Uses the current time in milliseconds, bumped past the largest existing
    id so ids stay unique and increasing even within the same millisecond.
    """
    candidate = int(now.timestamp() * 1000)
    if logs:
        candidate = max(candidate, max(entry.id for entry in logs) + 1)
    return candidate


def normalize_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map update keys (snake_case or camelCase) onto LogEntry field names.

    Raises:
        ValidationError: If a key is unknown or names a protected field
    """
    by_key = {}
    for name in LogEntry.model_fields:
        by_key[name] = name
        by_key[to_camel(name)] = name

    normalized: dict[str, Any] = {}
    for key, value in changes.items():
        name = by_key.get(key)
        if name is None:
            raise ValidationError(f"Unknown log field: {key}")
        if name in PROTECTED_FIELDS:
            raise ValidationError(f"Field '{key}' cannot be changed after creation")
        normalized[name] = value
    return normalized


def parse_import(raw: str | bytes | Mapping[str, Any]) -> list[LogEntry]:
    """
    Parse import data into log entries.

    Args:
        raw: JSON text, JSON bytes, or an already-parsed mapping

    Returns:
        Validated entries in file order

    Raises:
        FormatError: If the data is not JSON, lacks a ``logs`` list, or holds invalid entries
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FormatError(f"Failed to parse file: {e}") from e
    else:
        data = raw

    if not isinstance(data, Mapping) or not isinstance(data.get("logs"), list):
        raise FormatError("Invalid file format: expected an object with a 'logs' list")

    entries: list[LogEntry] = []
    seen_ids: set[int] = set()
    for index, raw_entry in enumerate(data["logs"]):
        try:
            entry = LogEntry.model_validate(raw_entry)
        except PydanticValidationError as e:
            raise FormatError(
                f"Invalid log at index {index}: {describe_validation_error(e)}"
            ) from e
        if entry.id in seen_ids:
            raise FormatError(f"Duplicate log id {entry.id} at index {index}")
        seen_ids.add(entry.id)
        entries.append(entry)
    return entries


# ============================================================================
# LogRepository
# ============================================================================


class LogRepository:
    """
    Orchestrates log creation, listing, updates, deletion, export/import
    and analytics over an injected LogStore.

    Example:
        >>> repository = LogRepository(InMemoryLogStore())
        >>> created = (await repository.submit_log({"task": "Wrote unit tests"})).unwrap()
        >>> logs = (await repository.list_logs()).unwrap()
        >>> logs[0] == created
        True
    """

    def __init__(
        self,
        store: LogStore,
        *,
        engine: SuggestionEngine | None = None,
        aggregator: AnalyticsAggregator | None = None,
        clock: Clock | None = None,
        latency: LatencyConfig | None = None,
        serialize_mutations: bool = False,
    ) -> None:
        """
        Initialize repository.

        Args:
            store: Persistence port holding the snapshot
            engine: Suggestion engine (defaults to the standard rule table)
            aggregator: Analytics aggregator (defaults to a 30-day window)
            clock: Source of the current time (defaults to local now)
            latency: Simulated per-operation latency (defaults to none)
            serialize_mutations: Apply overlapping mutations one at a time
        """
        self.store = store
        self._engine = engine or SuggestionEngine()
        self._aggregator = aggregator or AnalyticsAggregator()
        self._clock = clock or local_now
        self._latency = latency or LatencyConfig()
        self._lock = asyncio.Lock() if serialize_mutations else None

    @classmethod
    def from_config(cls, config: DiaryConfig | None = None) -> LogRepository:
        """
        Create a repository backed by the configured snapshot file.

        Args:
            config: Configuration (loaded from disk/env if None)

        Returns:
            Configured LogRepository instance
        """
        if config is None:
            config = load_config()

        path = config.storage.path or default_snapshot_path()
        return cls(
            JsonLogStore(path),
            engine=SuggestionEngine(limit=config.suggestions.limit),
            latency=config.latency,
            serialize_mutations=config.storage.serialize_mutations,
        )

    @property
    def serializes_mutations(self) -> bool:
        """Check if overlapping mutations are applied one at a time."""
        return self._lock is not None

    # ============================================================================
    # Operations
    # ============================================================================

    async def submit_log(self, draft: LogDraft | Mapping[str, Any]) -> OperationResult[LogEntry]:
        """
        Create a log entry with freshly generated suggestions.

        Args:
            draft: LogDraft or raw submit fields (task, category, priority,
                timeSpent, tags)

        Returns:
            Result holding the new entry, or a PersistenceError failure

        Raises:
            ValidationError: If the draft is invalid (nothing is loaded or saved)
        """
        validated = LogDraft.from_input(dict(draft) if isinstance(draft, Mapping) else draft)

        async with self._mutation():
            await self._simulate_latency("submit")

            loaded = await self._load()
            if loaded.failed:
                return self._load_failure("submit", loaded)

            now = self._clock()
            history = loaded.logs
            suggestions = self._engine.generate(
                validated.task,
                validated.category,
                validated.priority,
                history,
                now.hour,
            )

            entry = LogEntry(
                id=next_log_id(history, now),
                task=validated.task,
                category=validated.category,
                priority=validated.priority,
                time_spent=validated.time_spent,
                tags=validated.tags,
                suggestions=suggestions,
                timestamp=ensure_utc(now),
                completed=False,
            )

            saved = await self._save([entry, *history])
            if saved is not None:
                return OperationResult.failure(saved)

        logger.info(f"Logged task {entry.id} with {len(suggestions)} suggestion(s)")
        return OperationResult.success(entry, changed=True)

    async def list_logs(self) -> OperationResult[list[LogEntry]]:
        """
        Return the stored collection, most recent first.

        Returns:
            Result holding the logs (empty if never written), or a
            PersistenceError failure if the snapshot could not be read
        """
        await self._simulate_latency("list_logs")

        loaded = await self._load()
        if loaded.failed:
            return self._load_failure("list", loaded)
        return OperationResult.success(loaded.logs)

    async def update_log(
        self, log_id: int, changes: Mapping[str, Any]
    ) -> OperationResult[LogEntry]:
        """
        Merge field changes into an existing entry.

        Args:
            log_id: Id of the entry to update
            changes: Fields to change (snake_case or camelCase keys)

        Returns:
            Result holding the updated entry, or a NotFoundError /
            PersistenceError failure

        Raises:
            ValidationError: If a key is unknown or protected, or the merged
                entry is invalid (nothing is saved)
        """
        normalized = normalize_changes(changes)

        async with self._mutation():
            await self._simulate_latency("update")

            loaded = await self._load()
            if loaded.failed:
                return self._load_failure("update", loaded)

            logs = list(loaded.logs)
            index = _find_index(logs, log_id)
            if index is None:
                logger.warning(f"Cannot update log {log_id}: not found")
                return OperationResult.failure(NotFoundError(log_id))

            merged = {**logs[index].model_dump(), **normalized}
            try:
                updated = LogEntry.model_validate(merged)
            except PydanticValidationError as e:
                raise ValidationError(describe_validation_error(e)) from e

            logs[index] = updated
            saved = await self._save(logs)
            if saved is not None:
                return OperationResult.failure(saved)

        logger.debug(f"Updated log {log_id}: {sorted(normalized)}")
        return OperationResult.success(updated, changed=True)

    async def delete_log(self, log_id: int) -> OperationResult[list[LogEntry]]:
        """
        Remove an entry.

        Args:
            log_id: Id of the entry to delete

        Returns:
            Result holding the remaining collection, or a NotFoundError /
            PersistenceError failure
        """
        async with self._mutation():
            await self._simulate_latency("delete")

            loaded = await self._load()
            if loaded.failed:
                return self._load_failure("delete", loaded)

            remaining = [entry for entry in loaded.logs if entry.id != log_id]
            if len(remaining) == len(loaded.logs):
                logger.warning(f"Cannot delete log {log_id}: not found")
                return OperationResult.failure(NotFoundError(log_id))

            saved = await self._save(remaining)
            if saved is not None:
                return OperationResult.failure(saved)

        logger.debug(f"Deleted log {log_id}")
        return OperationResult.success(remaining, changed=True)

    async def export_snapshot(self) -> OperationResult[ExportArtifact]:
        """
        Produce a downloadable export of the collection.

        Returns:
            Result holding the ExportArtifact, or a PersistenceError failure
        """
        loaded = await self._load()
        if loaded.failed:
            return self._load_failure("export", loaded)

        artifact = ExportArtifact(
            logs=loaded.logs,
            export_date=ensure_utc(self._clock()),
            version=SNAPSHOT_VERSION,
        )
        return OperationResult.success(artifact)

    async def import_snapshot(
        self, raw: str | bytes | Mapping[str, Any]
    ) -> OperationResult[list[LogEntry]]:
        """
        Replace the stored collection with imported data.

        Args:
            raw: Export JSON text/bytes or an already-parsed mapping

        Returns:
            Result holding the imported collection, or a FormatError /
            PersistenceError failure
        """
        try:
            logs = parse_import(raw)
        except FormatError as e:
            logger.warning(f"Import rejected: {e}")
            return OperationResult.failure(e)

        async with self._mutation():
            saved = await self._save(logs)
            if saved is not None:
                return OperationResult.failure(saved)

        logger.info(f"Imported {len(logs)} log(s)")
        return OperationResult.success(logs, changed=True)

    async def analytics(self) -> OperationResult[AnalyticsReport]:
        """
        Compute analytics over the stored collection.

        Returns:
            Result holding the AnalyticsReport, or a PersistenceError failure
        """
        await self._simulate_latency("analytics")

        loaded = await self._load()
        if loaded.failed:
            return self._load_failure("analytics", loaded)
        return OperationResult.success(self._aggregator.compute(loaded.logs, self._clock()))

    # ============================================================================
    # Internals
    # ============================================================================

    def _mutation(self) -> contextlib.AbstractAsyncContextManager[Any]:
        if self._lock is not None:
            return self._lock
        return contextlib.nullcontext()

    async def _simulate_latency(self, operation: str) -> None:
        delay = self._latency.delay_for(operation)
        if delay > 0:
            await asyncio.sleep(delay)

    async def _load(self) -> LoadResult:
        return await asyncio.to_thread(self.store.load)

    async def _save(self, logs: list[LogEntry]) -> PersistenceError | None:
        result = await asyncio.to_thread(self.store.save, logs)
        if result.failed:
            error = result.error or PersistenceError("Failed to save snapshot")
            logger.warning(f"Save failed, collection unchanged: {error}")
            return error
        return None

    def _load_failure(self, operation: str, loaded: LoadResult) -> OperationResult[Any]:
        error = loaded.error or PersistenceError("Failed to load snapshot")
        logger.warning(f"Cannot {operation}: {error}")
        return OperationResult.failure(error)


def _find_index(logs: Sequence[LogEntry], log_id: int) -> int | None:
    for index, entry in enumerate(logs):
        if entry.id == log_id:
            return index
    return None
