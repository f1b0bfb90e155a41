"""Helm integration exceptions."""

from __future__ import annotations


class HelmError(Exception):
    """Base exception for Helm operations.

    Attributes:
        message: Human-readable error message.
        stderr: Captured stderr of the failed helm invocation, if any.
    """

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr

    def __str__(self) -> str:
        return self.message


class HelmBinaryNotFoundError(HelmError):
    """Raised when the helm binary cannot be located."""

    def __init__(self) -> None:
        super().__init__(
            message=(
                "helm binary not found in PATH. Install from: https://helm.sh/docs/intro/install/"
            ),
        )


class HelmCommandError(HelmError):
    """Raised when a helm command exits non-zero."""


class ReleaseNotFoundError(HelmError):
    """Raised when the release-state store has no release under a name.

    Callers use this as a control-flow signal during legacy-name lookup
    and to detect an empty namespace before install.
    """

    def __init__(
        self,
        message: str = "release: not found",
        release_name: str | None = None,
        namespace: str | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message=message, stderr=stderr)
        self.release_name = release_name
        self.namespace = namespace
