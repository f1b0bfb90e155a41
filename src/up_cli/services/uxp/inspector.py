"""Release lookup across the canonical and legacy chart names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from up_cli.integrations.helm.exceptions import ReleaseNotFoundError
from up_cli.services.uxp.config import CANONICAL_CHART_NAME, LEGACY_CHART_NAME
from up_cli.services.uxp.exceptions import VerificationFailedError

if TYPE_CHECKING:
    from up_cli.integrations.helm.models import ReleaseInfo
    from up_cli.services.uxp.interfaces import ReleaseStore

logger = structlog.get_logger()

ERR_GET_INSTALLED_RELEASE = (
    "could not identify installed release for crossplane or universal-crossplane in namespace {}"
)
ERR_VERIFY_INSTALLED_VERSION = "could not identify current version"


@dataclass(frozen=True)
class InstalledRelease:
    """The authoritative release in a namespace."""

    version: str
    resolved_name: str

    @property
    def is_legacy(self) -> bool:
        return self.resolved_name == LEGACY_CHART_NAME


class ReleaseInspector:
    """Finds the installed release, canonical name first, legacy name second."""

    def __init__(
        self,
        store: ReleaseStore,
        canonical_name: str = CANONICAL_CHART_NAME,
        legacy_name: str = LEGACY_CHART_NAME,
        log: structlog.BoundLogger | None = None,
    ) -> None:
        self._store = store
        self.canonical_name = canonical_name
        self.legacy_name = legacy_name
        self._log = log or logger

    def current_version(self, namespace: str) -> InstalledRelease:
        """Look up the installed version and the name it is installed under.

        Raises:
            ReleaseNotFoundError: Neither name is installed.
            VerificationFailedError: The lookup failed for another reason, or
                the release carries no chart version.
        """
        try:
            release = self._store.get(self.canonical_name)
            resolved_name = self.canonical_name
        except ReleaseNotFoundError:
            self._log.debug(
                "release_not_found_trying_legacy_name",
                namespace=namespace,
                release=self.canonical_name,
                legacy=self.legacy_name,
            )
            release = self._get_legacy(namespace)
            resolved_name = self.legacy_name
        except Exception as e:
            raise VerificationFailedError(
                ERR_GET_INSTALLED_RELEASE.format(namespace), e
            ) from e

        version = release.version if release is not None else None
        if not version:
            raise VerificationFailedError(ERR_VERIFY_INSTALLED_VERSION)

        self._log.debug(
            "found_installed_release",
            namespace=namespace,
            release=resolved_name,
            version=version,
        )
        return InstalledRelease(version=version, resolved_name=resolved_name)

    def _get_legacy(self, namespace: str) -> ReleaseInfo:
        try:
            return self._store.get(self.legacy_name)
        except ReleaseNotFoundError as e:
            raise ReleaseNotFoundError(
                message=f"{ERR_GET_INSTALLED_RELEASE.format(namespace)}: {e}",
                namespace=namespace,
                stderr=e.stderr,
            ) from e
        except Exception as e:
            raise VerificationFailedError(
                ERR_GET_INSTALLED_RELEASE.format(namespace), e
            ) from e
