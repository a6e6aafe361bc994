"""Error taxonomy shared by services, storage and the state container."""
from __future__ import annotations


class JobScoutError(Exception):
    """Base class for every expected failure in the client core."""


class ValidationError(JobScoutError):
    """Bad credentials or form input. Recovered locally and shown to the user."""


class StorageError(JobScoutError):
    """Persisted read/write failure. Reads treat it as absent data."""


class NotFoundError(JobScoutError):
    """Unknown job or application id."""


class ServiceError(JobScoutError):
    """Backend answered with a non-retryable error or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientServiceError(ServiceError):
    """Timeout, connection failure or 5xx from a real backend; safe to retry."""
