"""Errors raised by the UXP installer.

Every error carries a static, human-readable message describing the
operation that failed and, optionally, the underlying cause. ``str()``
renders the chain the way it is shown to users: ``message: cause``.
"""

from __future__ import annotations

from up_cli.integrations.helm.exceptions import ReleaseNotFoundError


class InstallerError(Exception):
    """Base exception for UXP installer operations.

    Attributes:
        message: Static description of the failed operation.
        cause: The underlying error, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class InvalidVersionError(InstallerError, ValueError):
    """Raised when a version string is not a valid semantic version."""

    def __init__(self, version: str) -> None:
        super().__init__(f"invalid semantic version: {version!r}")
        self.version = version


class VerificationFailedError(InstallerError):
    """Raised when the installed release cannot be verified."""


class AlreadyInstalledError(InstallerError):
    """Raised when install finds an existing release in the namespace."""

    def __init__(self, current_version: str) -> None:
        super().__init__(f"chart already installed with version {current_version}")
        self.current_version = current_version


class UpgradeVersionMismatchError(InstallerError):
    """Raised when a legacy release would be upgraded across versions without force."""

    def __init__(self, current_version: str, target_version: str) -> None:
        super().__init__("cannot upgrade crossplane to universal-crossplane with version mismatch")
        self.current_version = current_version
        self.target_version = target_version


class ChartCacheError(InstallerError):
    """Raised when the local chart cache cannot be read or written."""


class CorruptCacheStateError(ChartCacheError):
    """Raised when a latest-version pull leaves other than one file behind.

    The cache has to be removed by hand before trying again.
    """

    def __init__(self, cache_dir: str, entries: list[str] | None = None) -> None:
        super().__init__(f"corrupt chart tmp directory, consider removing cache ({cache_dir})")
        self.cache_dir = cache_dir
        self.entries = entries or []


class CacheWriteFailedError(ChartCacheError):
    """Raised when a pulled chart cannot be moved into the cache."""


class PullFailedError(InstallerError):
    """Raised when a chart cannot be pulled from the repository."""


class ChartLoadError(InstallerError):
    """Raised when a chart archive cannot be loaded."""


class RollbackFailedError(InstallerError):
    """Raised when a failed upgrade could not be rolled back.

    The release is in an unknown state and needs manual intervention.
    """

    def __init__(
        self,
        upgrade_error: BaseException | None,
        rollback_error: BaseException,
    ) -> None:
        super().__init__("failed upgrade resulted in a failed rollback", cause=rollback_error)
        self.upgrade_error = upgrade_error
        self.rollback_error = rollback_error

    def __str__(self) -> str:
        if self.upgrade_error is None:
            return super().__str__()
        return f"{self.message}: {self.rollback_error} (upgrade error: {self.upgrade_error})"


class UpgradeRolledBackError(InstallerError):
    """Raised when a failed upgrade was rolled back to the previous release."""

    def __init__(self, upgrade_error: BaseException) -> None:
        super().__init__("failed upgrade was rolled back", cause=upgrade_error)
        self.upgrade_error = upgrade_error


class ParameterParseError(InstallerError):
    """Raised when install parameters cannot be assembled."""


__all__ = [
    "AlreadyInstalledError",
    "CacheWriteFailedError",
    "ChartCacheError",
    "ChartLoadError",
    "CorruptCacheStateError",
    "InstallerError",
    "InvalidVersionError",
    "ParameterParseError",
    "PullFailedError",
    "ReleaseNotFoundError",
    "RollbackFailedError",
    "UpgradeRolledBackError",
    "UpgradeVersionMismatchError",
    "VerificationFailedError",
]
