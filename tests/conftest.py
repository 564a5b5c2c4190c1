"""
Pytest configuration and shared fixtures.

Provides an in-memory store, a fixed clock, a repository wired to both,
a LogEntry factory, and isolation from the user's real config and data.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from devdiary.core.config import clear_cache
from devdiary.core.logs.models import Category, LogEntry
from devdiary.core.logs.store import InMemoryLogStore
from devdiary.core.services import LogRepository
from devdiary.core.suggestions.models import Priority

# Mid-afternoon, so the late-session rule stays quiet unless a test asks for it
FIXED_NOW = datetime(2026, 10, 19, 14, 0, 0, tzinfo=timezone.utc)

DEVDIARY_ENV_VARS = (
    "DEVDIARY_STORAGE_PATH",
    "DEVDIARY_SERIALIZE_MUTATIONS",
    "DEVDIARY_SUGGESTION_LIMIT",
    "DEVDIARY_LATENCY_SCALE",
)


# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point XDG dirs at tmp_path, drop DEVDIARY_* vars and reset the config cache."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for name in DEVDIARY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Clock and Store Fixtures
# ==============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """The instant every fixed clock returns."""
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store(clock) -> InMemoryLogStore:
    """Empty in-memory store (never written)."""
    return InMemoryLogStore(clock=clock)


@pytest.fixture
def repository(memory_store, clock) -> LogRepository:
    """Repository over the in-memory store with the fixed clock and no latency."""
    return LogRepository(memory_store, clock=clock)


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    """
    Factory for LogEntry objects.

    Ids count up from 1 and timestamps step back one hour per entry from
    FIXED_NOW, so entries built in order are most-recent-first.
    """
    counter = {"n": 0}

    def _make(
        task: str = "Implement feature",
        category: Category | str = Category.DEVELOPMENT,
        priority: Priority | str = Priority.MEDIUM,
        **overrides: Any,
    ) -> LogEntry:
        counter["n"] += 1
        n = counter["n"]
        fields: dict[str, Any] = {
            "id": n,
            "task": task,
            "category": category,
            "priority": priority,
            "timestamp": FIXED_NOW - timedelta(hours=n),
        }
        fields.update(overrides)
        return LogEntry(**fields)

    return _make
