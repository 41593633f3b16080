"""Application-wide exception classes."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class ServiceError(ApplicationError):
    """Base exception for service-level errors."""
    pass


class DispatchError(ServiceError):
    """Raised when a finished submission could not be delivered."""

    def __init__(self, submitter_id: int, message: str):
        super().__init__(f"Dispatch for user {submitter_id} failed: {message}")
        self.submitter_id = submitter_id
