"""Shared fixtures for UXP installer tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from up_cli.integrations.helm.exceptions import ReleaseNotFoundError
from up_cli.integrations.helm.models import ChartArchive, ChartMetadata, ReleaseInfo
from up_cli.services.uxp.config import InstallerConfig
from up_cli.services.uxp.interfaces import InstallerClients

CACHE_DIR = Path("/cache/up/charts")


@pytest.fixture
def cache_dir() -> Path:
    return CACHE_DIR


@pytest.fixture
def installer_config() -> InstallerConfig:
    """Installer config with a fixed cache directory."""
    return InstallerConfig.create(cache_dir=CACHE_DIR)


@pytest.fixture
def chart() -> ChartArchive:
    return ChartArchive(
        path=CACHE_DIR / "universal-crossplane-1.3.1-up.1.tgz",
        metadata=ChartMetadata(name="universal-crossplane", version="1.3.1-up.1"),
    )


@pytest.fixture
def mock_puller() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_loader(chart: ChartArchive) -> MagicMock:
    loader = MagicMock()
    loader.load.return_value = chart
    return loader


@pytest.fixture
def mock_store() -> MagicMock:
    """Release store with nothing installed."""
    store = MagicMock()
    store.get.side_effect = ReleaseNotFoundError()
    return store


@pytest.fixture
def mock_fs() -> MagicMock:
    """Filesystem where every stat succeeds (cache dir and archives exist)."""
    return MagicMock()


@pytest.fixture
def clients(
    mock_puller: MagicMock,
    mock_loader: MagicMock,
    mock_store: MagicMock,
    mock_fs: MagicMock,
) -> InstallerClients:
    return InstallerClients(puller=mock_puller, loader=mock_loader, store=mock_store, fs=mock_fs)


@pytest.fixture
def installed() -> Callable[..., Callable[[str], ReleaseInfo]]:
    """Build a ``store.get`` side effect from a name -> version mapping.

    Names missing from the mapping raise ReleaseNotFoundError.
    """

    def _installed(**releases: str) -> Callable[[str], ReleaseInfo]:
        by_name = {name.replace("_", "-"): version for name, version in releases.items()}

        def _get(name: str) -> ReleaseInfo:
            if name not in by_name:
                raise ReleaseNotFoundError(release_name=name)
            return ReleaseInfo(
                name=name,
                namespace="upbound-system",
                revision=1,
                status="deployed",
                chart=ChartMetadata(name=name, version=by_name[name]),
            )

        return _get

    return _installed
