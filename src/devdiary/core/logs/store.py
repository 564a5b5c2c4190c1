"""
Snapshot storage layer for the log collection.

The whole collection is persisted as one JSON snapshot::

    {"logs": [...], "lastUpdated": "2026-10-19T14:00:00Z", "version": "2.0"}

and is rewritten in full on every save. LogStore is the persistence port the
repository depends on; JsonLogStore keeps the snapshot in a single file
(~/.local/share/devdiary/logs.json by default) and InMemoryLogStore keeps the
serialized snapshot in memory.

Neither load() nor save() raises. Failures are logged and reported through
LoadResult / SaveResult so callers can tell "never written" from "failed".
"""

import json
import logging
import os
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from devdiary.core.errors import PersistenceError
from devdiary.core.logs.models import (
    SNAPSHOT_VERSION,
    LogEntry,
    Snapshot,
    describe_validation_error,
)

logger = logging.getLogger(__name__)

# Version assigned to snapshots stored as a bare array of entries
LEGACY_SNAPSHOT_VERSION = "1.0"


def utc_now() -> datetime:
    """Current time as aware UTC."""
    return datetime.now(timezone.utc)


class LoadStatus(str, Enum):
    """Outcome of reading the snapshot."""

    LOADED = "loaded"
    MISSING = "missing"  # Never written
    FAILED = "failed"  # Present but unreadable


@dataclass
class LoadResult:
    """Result of LogStore.load().

    ``logs`` is empty for both MISSING and FAILED; ``status`` tells them apart.
    """

    status: LoadStatus
    logs: list[LogEntry] = field(default_factory=list)
    version: str | None = None
    error: PersistenceError | None = None
    skipped: int = 0

    @property
    def failed(self) -> bool:
        """Check if the snapshot could not be read."""
        return self.status == LoadStatus.FAILED

    @classmethod
    def missing(cls) -> "LoadResult":
        return cls(status=LoadStatus.MISSING)

    @classmethod
    def failure(cls, error: PersistenceError) -> "LoadResult":
        return cls(status=LoadStatus.FAILED, error=error)


@dataclass
class SaveResult:
    """Result of LogStore.save()."""

    success: bool
    last_updated: datetime | None = None
    error: PersistenceError | None = None

    @property
    def failed(self) -> bool:
        """Check if the snapshot could not be written."""
        return not self.success


@runtime_checkable
class LogStore(Protocol):
    """
    Persistence port for the log collection.

    Implementations read and write the full collection as one snapshot.
    save() must replace the previous snapshot atomically from the caller's
    point of view.
    """

    def load(self) -> LoadResult:
        """
        Read the persisted collection.

        Returns:
            LoadResult with the logs (most recent first) and load status
        """
        ...

    def save(self, logs: Sequence[LogEntry]) -> SaveResult:
        """
        Replace the persisted collection.

        Args:
            logs: Full collection, most recent first

        Returns:
            SaveResult describing success or failure
        """
        ...


def encode_snapshot(logs: Sequence[LogEntry], last_updated: datetime) -> str:
    """
    Serialize a collection into snapshot JSON.

    Args:
        logs: Full collection
        last_updated: Timestamp recorded in the snapshot

    Returns:
        JSON text with trailing newline
    """
    snapshot = Snapshot(logs=list(logs), last_updated=last_updated, version=SNAPSHOT_VERSION)
    return json.dumps(snapshot.to_wire(), indent=2, ensure_ascii=False) + "\n"


def decode_snapshot(text: str) -> LoadResult:
    """
    Parse snapshot JSON into a LoadResult.

    Tolerates other schema versions: unknown fields are ignored, missing
    optional fields take defaults, a bare array is read as a legacy
    snapshot, and individual entries that fail validation or repeat an
    earlier id are skipped.

    Args:
        text: Snapshot JSON text

    Returns:
        LoadResult with status LOADED, or FAILED if the text is unusable
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return LoadResult.failure(PersistenceError(f"Snapshot is not valid JSON: {e}"))

    if isinstance(data, list):
        raw_logs = data
        version = LEGACY_SNAPSHOT_VERSION
    elif isinstance(data, dict):
        raw_logs = data.get("logs") or []
        version = str(data.get("version", SNAPSHOT_VERSION))
        if not isinstance(raw_logs, list):
            return LoadResult.failure(PersistenceError("Snapshot 'logs' must be a list"))
    else:
        return LoadResult.failure(
            PersistenceError(f"Snapshot must be a JSON object, got {type(data).__name__}")
        )

    if version != SNAPSHOT_VERSION:
        logger.debug(f"Reading snapshot version {version} (current {SNAPSHOT_VERSION})")

    logs: list[LogEntry] = []
    seen_ids: set[int] = set()
    skipped = 0
    for index, raw in enumerate(raw_logs):
        try:
            entry = LogEntry.model_validate(raw)
        except PydanticValidationError as e:
            # Skip malformed entries but keep the rest of the collection
            skipped += 1
            logger.warning(
                f"Skipping malformed log entry at index {index}: {describe_validation_error(e)}"
            )
            continue
        if entry.id in seen_ids:
            # First occurrence wins; ids must stay unique for update and delete
            skipped += 1
            logger.warning(f"Skipping duplicate log id {entry.id} at index {index}")
            continue
        seen_ids.add(entry.id)
        logs.append(entry)

    return LoadResult(status=LoadStatus.LOADED, logs=logs, version=version, skipped=skipped)


class JsonLogStore:
    """
    File-backed LogStore.

    Example:
        >>> store = JsonLogStore(Path("/tmp/devdiary/logs.json"))
        >>> result = store.load()
        >>> result.status
        <LoadStatus.MISSING: 'missing'>
        >>> store.save(result.logs).success
        True
    """

    SNAPSHOT_FILE = "logs.json"

    def __init__(self, path: Path, clock: Callable[[], datetime] | None = None) -> None:
        """
        Initialize store with a snapshot file path.

        Args:
            path: Snapshot file (parent directories are created on save)
            clock: Source of the ``lastUpdated`` timestamp (defaults to UTC now)
        """
        self._path = Path(path)
        self._clock = clock or utc_now

    @property
    def path(self) -> Path:
        """Get the path to the snapshot file."""
        return self._path

    def exists(self) -> bool:
        """Check if a snapshot has been written."""
        return self._path.exists()

    def load(self) -> LoadResult:
        if not self._path.exists():
            return LoadResult.missing()

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            error = PersistenceError(f"Failed to read {self._path}: {e}")
            logger.warning(str(error))
            return LoadResult.failure(error)

        result = decode_snapshot(text)
        if result.failed:
            logger.warning(f"Failed to load {self._path}: {result.error}")
        return result

    def save(self, logs: Sequence[LogEntry]) -> SaveResult:
        last_updated = self._clock()
        try:
            content = encode_snapshot(logs, last_updated)
        except (TypeError, ValueError) as e:
            error = PersistenceError(f"Failed to serialize snapshot: {e}")
            logger.warning(str(error))
            return SaveResult(success=False, error=error)

        try:
            self._write_atomic(content)
        except OSError as e:
            error = PersistenceError(f"Failed to write {self._path}: {e}")
            logger.warning(str(error))
            return SaveResult(success=False, error=error)

        logger.debug(f"Saved {len(logs)} log(s) to {self._path}")
        return SaveResult(success=True, last_updated=last_updated)

    def _write_atomic(self, content: str) -> None:
        """Write content via a temp file and atomic rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=".logs_",
            suffix=".json.tmp",
        )

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)

            # Atomic rename (replaces existing file)
            os.replace(temp_path, self._path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    @classmethod
    def default(cls) -> "JsonLogStore":
        """
        Create a store at the default data location.

        Uses $XDG_DATA_HOME/devdiary/logs.json, falling back to
        ~/.local/share/devdiary/logs.json.

        Returns:
            JsonLogStore for the user's log collection
        """
        return cls(default_snapshot_path())


def default_snapshot_path() -> Path:
    """Get the default snapshot file path."""
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if not xdg_data_home:
        xdg_data_home = os.path.expanduser("~/.local/share")
    return Path(xdg_data_home) / "devdiary" / JsonLogStore.SNAPSHOT_FILE


class InMemoryLogStore:
    """
    LogStore holding the serialized snapshot in memory.

    Stores the same JSON text JsonLogStore would write, so reads go through
    the same decoding path.
    """

    def __init__(
        self, raw: str | None = None, clock: Callable[[], datetime] | None = None
    ) -> None:
        """
        Initialize store.

        Args:
            raw: Initial snapshot text (None means never written)
            clock: Source of the ``lastUpdated`` timestamp (defaults to UTC now)
        """
        self.raw = raw
        self._clock = clock or utc_now
        self.save_count = 0

    def load(self) -> LoadResult:
        if self.raw is None:
            return LoadResult.missing()
        result = decode_snapshot(self.raw)
        if result.failed:
            logger.warning(f"Failed to load in-memory snapshot: {result.error}")
        return result

    def save(self, logs: Sequence[LogEntry]) -> SaveResult:
        last_updated = self._clock()
        try:
            self.raw = encode_snapshot(logs, last_updated)
        except (TypeError, ValueError) as e:
            error = PersistenceError(f"Failed to serialize snapshot: {e}")
            logger.warning(str(error))
            return SaveResult(success=False, error=error)
        self.save_count += 1
        return SaveResult(success=True, last_updated=last_updated)
