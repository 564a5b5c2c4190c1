"""
Log models, snapshot storage and list queries for devdiary.

The whole collection is stored as a single JSON snapshot that is
rewritten on every change:
1. Default: ~/.local/share/devdiary/logs.json (or $XDG_DATA_HOME)
2. Configured: storage.path in config or DEVDIARY_STORAGE_PATH
"""

from devdiary.core.logs.models import (
    MAX_SUGGESTIONS,
    MAX_TASK_LENGTH,
    SNAPSHOT_VERSION,
    Category,
    ExportArtifact,
    LogDraft,
    LogEntry,
    Snapshot,
)
from devdiary.core.logs.query import LogView, SortOrder, query_logs
from devdiary.core.logs.store import (
    InMemoryLogStore,
    JsonLogStore,
    LoadResult,
    LoadStatus,
    LogStore,
    SaveResult,
    default_snapshot_path,
)

__all__ = [
    "Category",
    "ExportArtifact",
    "InMemoryLogStore",
    "JsonLogStore",
    "LoadResult",
    "LoadStatus",
    "LogDraft",
    "LogEntry",
    "LogStore",
    "LogView",
    "MAX_SUGGESTIONS",
    "MAX_TASK_LENGTH",
    "SNAPSHOT_VERSION",
    "SaveResult",
    "Snapshot",
    "SortOrder",
    "default_snapshot_path",
    "query_logs",
]
