"""Upbound Cloud API exceptions."""

from __future__ import annotations


class CloudError(Exception):
    """Base exception for Upbound Cloud errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class CloudConnectionError(CloudError):
    """Raised when the Upbound Cloud API cannot be reached."""


class CloudAuthError(CloudError):
    """Raised when the token is rejected."""


class CloudAPIError(CloudError):
    """Raised when the API returns an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class CloudNotFoundError(CloudAPIError):
    """Raised when a resource is not found."""


class CloudConfigError(CloudError):
    """Raised when cloud settings are missing, e.g. no account or token."""
