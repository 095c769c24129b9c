"""
Error types raised by the stores and resource handlers.

Every error carries the HTTP status and the message that is safe to return
to the caller; the app renders them as ``{"error": message}``.
"""

from __future__ import annotations


class FieldReportsError(Exception):
    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(FieldReportsError):
    """A required field is missing or empty."""

    status_code = 400


class StorageError(FieldReportsError):
    """The record store or file store failed. Detail stays in the logs."""

    status_code = 500

    def __init__(self, detail: str | None = None):
        super().__init__()
        self.detail = detail


class StartupError(FieldReportsError):
    """The database could not be reached while the app was starting."""
