"""Exception hierarchy for the job tracker.

Store operations raise a StoreError subclass; reading malformed stored text
raises DecodeError; building a record from free-text input raises
ValidationError.
"""

from __future__ import annotations


class JobTrackerError(Exception):
    """Base class for every error raised by job_tracker."""


class StoreError(JobTrackerError):
    """A store operation failed."""


class StoreConnectionError(StoreError):
    """The database could not be opened, reached, or queried."""


class NotFoundError(StoreError):
    """No job application exists with the requested id."""

    def __init__(self, app_id: int):
        super().__init__(f"Job application not found with id: {app_id}")
        self.app_id = app_id


class SchemaMismatchError(StoreError):
    """A stored row does not have the columns or types the schema defines."""


class DecodeError(JobTrackerError, ValueError):
    """Stored date or status text does not match the expected encoding."""

    def __init__(self, message: str, text: str):
        super().__init__(message)
        self.text = text


class ValidationError(JobTrackerError, ValueError):
    """A free-text form field could not be converted."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
