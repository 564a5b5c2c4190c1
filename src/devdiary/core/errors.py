"""
Error taxonomy for devdiary.

Validation errors are raised synchronously where input is rejected.
Persistence, not-found and format errors are carried back to callers
inside repository results rather than thrown.
"""


class DiaryError(Exception):
    """Base exception for all devdiary errors."""


class ValidationError(DiaryError):
    """Input rejected before the suggestion engine or store is touched.

    Raised for an empty or oversized task, an unknown category or priority,
    or an update that tries to change a protected field.
    """


class PersistenceError(DiaryError):
    """Snapshot could not be read, decoded, encoded or written."""


class NotFoundError(DiaryError):
    """Update or delete referenced a log id that is not in the collection."""

    def __init__(self, log_id: int) -> None:
        self.log_id = log_id
        super().__init__(f"Log not found: {log_id}")


class FormatError(DiaryError):
    """Imported data could not be parsed or has the wrong shape."""
