"""
Service layer for devdiary.

Services are the clean API between interfaces (CLI, scripts, tests) and
the core domain logic. They compose the suggestion engine, the snapshot
store and the analytics aggregator into async operations.
"""

from devdiary.core.services.repository import (
    LogRepository,
    OperationResult,
    local_now,
)

__all__ = [
    "LogRepository",
    "OperationResult",
    "local_now",
]
