"""Core logic for devdiary: suggestions, persistence, analytics and the log repository."""
