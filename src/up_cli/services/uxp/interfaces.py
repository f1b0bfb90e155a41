"""Capabilities the UXP installer depends on.

The installer never constructs these itself; callers hand it an
:class:`InstallerClients` bundle (see ``default_clients`` for the helm
backed one).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from up_cli.integrations.helm.models import ChartArchive, ReleaseInfo


class ChartPuller(Protocol):
    """Downloads chart archives from the configured repository."""

    def set_dest_dir(self, path: str) -> None: ...

    def set_version(self, version: str) -> None: ...

    def run(self, chart_name: str) -> str: ...


class ChartLoader(Protocol):
    """Turns a chart archive on disk into a chart object."""

    def load(self, path: str | Path) -> ChartArchive: ...


class ReleaseStore(Protocol):
    """Cluster-side release state for the target namespace.

    ``get`` raises ``ReleaseNotFoundError`` when no release exists under
    the name.
    """

    def get(self, name: str) -> ReleaseInfo: ...

    def install(self, chart: ChartArchive, parameters: dict[str, Any]) -> Any: ...

    def upgrade(self, name: str, chart: ChartArchive, parameters: dict[str, Any]) -> Any: ...

    def rollback(self, name: str) -> None: ...

    def uninstall(self, name: str) -> Any: ...


class Filesystem(Protocol):
    """The filesystem operations the chart cache performs."""

    def stat(self, path: str | Path) -> os.stat_result: ...

    def mkdir_all(self, path: str | Path, mode: int = 0o755) -> None: ...

    def rename(self, src: str | Path, dst: str | Path) -> None: ...

    def remove_all(self, path: str | Path) -> None: ...

    def read_dir(self, path: str | Path) -> list[str]: ...

    def temp_dir(self, parent: str | Path, prefix: str = "") -> str: ...


HomeDirFn = Callable[[], Path]


@dataclass
class InstallerClients:
    """Explicit bundle of the capabilities an installer drives."""

    puller: ChartPuller
    loader: ChartLoader
    store: ReleaseStore
    fs: Filesystem
