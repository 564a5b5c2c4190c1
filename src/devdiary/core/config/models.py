"""
Configuration data models for devdiary.

These models define the structure of .devdiary.json and
~/.config/devdiary/config.json files, with validation via Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

LATENCY_OPERATIONS = ("submit", "list_logs", "update", "delete", "analytics")


class StorageConfig(BaseModel):
    """
    Snapshot storage settings.

    Controls where the log collection lives and how overlapping
    mutations are handled.
    """
    path: Optional[Path] = Field(
        default=None,
        description="Snapshot file (defaults to $XDG_DATA_HOME/devdiary/logs.json)"
    )
    serialize_mutations: bool = Field(
        default=False,
        description=(
            "Apply overlapping mutations one at a time. When false, concurrent "
            "read-modify-write calls race and the last save wins"
        )
    )


class SuggestionsConfig(BaseModel):
    """Suggestion engine settings."""
    limit: int = Field(
        default=4,
        ge=1,
        le=4,
        description="Maximum suggestions attached to a new entry"
    )


class LatencyConfig(BaseModel):
    """
    Simulated round-trip latency for repository operations.

    Each operation sleeps for its base delay multiplied by ``scale``.
    The default scale of 0 disables the delay.
    """
    scale: float = Field(
        default=0.0,
        ge=0.0,
        description="Multiplier applied to every base delay (0 disables latency)"
    )
    submit: float = Field(default=1.2, ge=0.0, description="Base delay for submit (seconds)")
    list_logs: float = Field(default=0.3, ge=0.0, description="Base delay for list (seconds)")
    update: float = Field(default=0.5, ge=0.0, description="Base delay for update (seconds)")
    delete: float = Field(default=0.5, ge=0.0, description="Base delay for delete (seconds)")
    analytics: float = Field(default=0.4, ge=0.0, description="Base delay for analytics (seconds)")

    def delay_for(self, operation: str) -> float:
        """
        Get the effective delay for an operation.

        Args:
            operation: Operation name (submit, list_logs, update, delete, analytics)

        Returns:
            Delay in seconds (0.0 for unknown operations)
        """
        if operation not in LATENCY_OPERATIONS:
            return 0.0
        return float(getattr(self, operation)) * self.scale


class DiaryConfig(BaseModel):
    """
    Top-level devdiary configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = DiaryConfig(
        ...     storage=StorageConfig(serialize_mutations=True),
        ...     suggestions=SuggestionsConfig(limit=3),
        ... )
        >>> config.suggestions.limit
        3
    """
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Snapshot storage"
    )
    suggestions: SuggestionsConfig = Field(
        default_factory=SuggestionsConfig,
        description="Suggestion engine"
    )
    latency: LatencyConfig = Field(
        default_factory=LatencyConfig,
        description="Simulated operation latency"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )
