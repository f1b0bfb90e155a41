"""Release-state store backed by the helm CLI.

Adapts :class:`HelmClient` to the get/install/upgrade/rollback/uninstall
primitives the UXP installer drives. Install parameters are handed to helm
as a temporary values file.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import structlog
import yaml

if TYPE_CHECKING:
    from up_cli.integrations.helm.helm_client import HelmClient
    from up_cli.integrations.helm.models import ChartArchive, HelmCommandResult, ReleaseInfo

logger = structlog.get_logger()


@contextlib.contextmanager
def values_file(parameters: dict[str, Any] | None) -> Iterator[list[str]]:
    """Write parameters to a temporary YAML file for ``--values``.

    Yields an empty list when there is nothing to write.
    """
    if not parameters:
        yield []
        return

    fd, path = tempfile.mkstemp(prefix="up-values-", suffix=".yaml")
    try:
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(parameters, f, default_flow_style=False)
        yield [path]
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(path)


class HelmReleaseStore:
    """Release-state store for one namespace.

    ``install_name`` is the release name used for fresh installs; upgrades,
    rollbacks and uninstalls name the release explicitly.
    """

    def __init__(self, helm: HelmClient, namespace: str, install_name: str) -> None:
        self._helm = helm
        self.namespace = namespace
        self.install_name = install_name
        self._log = logger.bind(namespace=namespace)

    def get(self, name: str) -> ReleaseInfo:
        return self._helm.get_metadata(name, namespace=self.namespace)

    def install(self, chart: ChartArchive, parameters: dict[str, Any]) -> HelmCommandResult:
        self._log.debug("store_install", release=self.install_name, chart=str(chart.path))
        with values_file(parameters) as files:
            return self._helm.install(
                self.install_name,
                str(chart.path),
                namespace=self.namespace,
                values_files=files,
            )

    def upgrade(
        self, name: str, chart: ChartArchive, parameters: dict[str, Any]
    ) -> HelmCommandResult:
        self._log.debug("store_upgrade", release=name, chart=str(chart.path))
        with values_file(parameters) as files:
            return self._helm.upgrade(
                name,
                str(chart.path),
                namespace=self.namespace,
                values_files=files,
            )

    def rollback(self, name: str) -> None:
        self._helm.rollback(name, namespace=self.namespace)

    def uninstall(self, name: str) -> HelmCommandResult:
        return self._helm.uninstall(name, namespace=self.namespace)
