"""Unit tests for LifecycleManager."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from up_cli.integrations.filesystem import OsFilesystem
from up_cli.integrations.helm.exceptions import HelmCommandError, ReleaseNotFoundError
from up_cli.integrations.helm.loader import ArchiveLoader
from up_cli.integrations.helm.models import ChartArchive, ReleaseInfo
from up_cli.integrations.helm.puller import HelmPuller
from up_cli.integrations.helm.release_store import HelmReleaseStore
from up_cli.services.uxp.config import InstallerConfig
from up_cli.services.uxp.exceptions import (
    AlreadyInstalledError,
    PullFailedError,
    RollbackFailedError,
    UpgradeRolledBackError,
    UpgradeVersionMismatchError,
    VerificationFailedError,
)
from up_cli.services.uxp.installer import LifecycleManager, default_clients
from up_cli.services.uxp.interfaces import InstallerClients

Installed = Callable[..., Callable[[str], ReleaseInfo]]

PARAMS = {"replicas": 2, "leaderElection": True}


@pytest.fixture
def manager(installer_config: InstallerConfig, clients: InstallerClients) -> LifecycleManager:
    return LifecycleManager(installer_config, clients)


def _config(**overrides: Any) -> InstallerConfig:
    return InstallerConfig.create(cache_dir=Path("/cache/up/charts"), **overrides)


def _assert_no_chart_work(clients: InstallerClients) -> None:
    clients.puller.run.assert_not_called()  # type: ignore[attr-defined]
    clients.loader.load.assert_not_called()  # type: ignore[attr-defined]
    clients.store.install.assert_not_called()  # type: ignore[attr-defined]
    clients.store.upgrade.assert_not_called()  # type: ignore[attr-defined]


# ===========================================================================
# TestInit
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestInit:
    """Tests for LifecycleManager construction."""

    def test_creates_missing_cache_dir(
        self, installer_config: InstallerConfig, clients: InstallerClients, mock_fs: MagicMock
    ) -> None:
        mock_fs.stat.side_effect = FileNotFoundError()

        LifecycleManager(installer_config, clients)

        mock_fs.mkdir_all.assert_called_once_with(installer_config.cache_dir, 0o755)

    def test_existing_cache_dir_is_not_recreated(
        self, manager: LifecycleManager, mock_fs: MagicMock
    ) -> None:
        mock_fs.mkdir_all.assert_not_called()

    def test_injected_logger_is_bound(
        self, installer_config: InstallerConfig, clients: InstallerClients
    ) -> None:
        log = MagicMock()

        LifecycleManager(installer_config, clients, log=log)

        log.bind.assert_called_once_with(
            component="uxp-installer",
            namespace="upbound-system",
            chart="universal-crossplane",
        )


# ===========================================================================
# TestGetCurrentVersion
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestGetCurrentVersion:
    """Tests for LifecycleManager.get_current_version."""

    def test_returns_canonical_version(
        self, manager: LifecycleManager, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(universal_crossplane="1.3.1-up.1")

        assert manager.get_current_version() == "1.3.1-up.1"

    def test_returns_legacy_version(
        self, manager: LifecycleManager, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(crossplane="1.2.1")

        assert manager.get_current_version() == "1.2.1"

    def test_not_installed(self, manager: LifecycleManager) -> None:
        with pytest.raises(ReleaseNotFoundError):
            manager.get_current_version()


# ===========================================================================
# TestInstall
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestInstall:
    """Tests for LifecycleManager.install."""

    def test_installs_into_empty_namespace(
        self,
        manager: LifecycleManager,
        clients: InstallerClients,
        mock_store: MagicMock,
        mock_loader: MagicMock,
        chart: ChartArchive,
    ) -> None:
        manager.install("1.3.1-up.1", PARAMS)

        mock_loader.load.assert_called_once_with(chart.path)
        mock_store.install.assert_called_once_with(chart, PARAMS)
        mock_store.upgrade.assert_not_called()

    @pytest.mark.parametrize(
        "releases",
        [{"universal_crossplane": "1.3.1-up.1"}, {"crossplane": "1.2.1"}],
        ids=["canonical", "legacy"],
    )
    def test_refuses_when_present(
        self,
        manager: LifecycleManager,
        clients: InstallerClients,
        mock_store: MagicMock,
        mock_fs: MagicMock,
        installed: Installed,
        releases: dict[str, str],
    ) -> None:
        mock_store.get.side_effect = installed(**releases)
        stat_calls = mock_fs.stat.call_count

        with pytest.raises(AlreadyInstalledError) as exc_info:
            manager.install("1.3.1-up.1", PARAMS)

        assert exc_info.value.current_version == next(iter(releases.values()))
        assert "chart already installed with version" in str(exc_info.value)
        _assert_no_chart_work(clients)
        clients.puller.set_version.assert_not_called()  # type: ignore[attr-defined]
        assert mock_fs.stat.call_count == stat_calls

    def test_unverifiable_namespace(
        self, manager: LifecycleManager, clients: InstallerClients, mock_store: MagicMock
    ) -> None:
        mock_store.get.side_effect = HelmCommandError("Helm command failed: unauthorized")

        with pytest.raises(VerificationFailedError) as exc_info:
            manager.install("", PARAMS)

        assert exc_info.value.message == "could not verify that chart is not already installed"
        assert isinstance(exc_info.value.cause, VerificationFailedError)
        _assert_no_chart_work(clients)

    def test_pull_failure_stops_install(
        self,
        manager: LifecycleManager,
        mock_puller: MagicMock,
        mock_store: MagicMock,
        mock_fs: MagicMock,
    ) -> None:
        mock_fs.stat.side_effect = FileNotFoundError()
        mock_puller.run.side_effect = RuntimeError("404")

        with pytest.raises(PullFailedError):
            manager.install("9.9.9", PARAMS)
        mock_store.install.assert_not_called()

    def test_store_install_error_propagates(
        self, manager: LifecycleManager, mock_store: MagicMock
    ) -> None:
        error = HelmCommandError("Helm command failed: cannot re-use a name")
        mock_store.install.side_effect = error

        with pytest.raises(HelmCommandError) as exc_info:
            manager.install("1.3.1-up.1", PARAMS)
        assert exc_info.value is error


# ===========================================================================
# TestUpgrade
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestUpgrade:
    """Tests for LifecycleManager.upgrade."""

    def test_not_installed(self, manager: LifecycleManager, clients: InstallerClients) -> None:
        with pytest.raises(ReleaseNotFoundError):
            manager.upgrade("1.3.1-up.1", PARAMS)
        _assert_no_chart_work(clients)

    def test_upgrades_canonical_release(
        self,
        manager: LifecycleManager,
        mock_store: MagicMock,
        installed: Installed,
        chart: ChartArchive,
    ) -> None:
        mock_store.get.side_effect = installed(universal_crossplane="1.2.0-up.1")

        manager.upgrade("1.3.1-up.1", PARAMS)

        mock_store.upgrade.assert_called_once_with("universal-crossplane", chart, PARAMS)
        mock_store.rollback.assert_not_called()

    def test_canonical_release_ignores_version_gate(
        self, manager: LifecycleManager, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(universal_crossplane="1.0.0")

        manager.upgrade("2.0.0", PARAMS)

        mock_store.upgrade.assert_called_once()

    def test_legacy_release_with_equivalent_version(
        self,
        manager: LifecycleManager,
        mock_store: MagicMock,
        installed: Installed,
        chart: ChartArchive,
    ) -> None:
        mock_store.get.side_effect = installed(crossplane="1.3.1")

        manager.upgrade("1.3.1-up.1", PARAMS)

        mock_store.upgrade.assert_called_once_with("crossplane", chart, PARAMS)

    @pytest.mark.parametrize("target", ["1.3.2-up.1", "1.4.1", "2.3.1", ""])
    def test_legacy_release_version_mismatch(
        self,
        manager: LifecycleManager,
        clients: InstallerClients,
        mock_store: MagicMock,
        installed: Installed,
        target: str,
    ) -> None:
        mock_store.get.side_effect = installed(crossplane="1.3.1")

        with pytest.raises(UpgradeVersionMismatchError) as exc_info:
            manager.upgrade(target, PARAMS)

        assert exc_info.value.current_version == "1.3.1"
        assert exc_info.value.target_version == target
        _assert_no_chart_work(clients)

    def test_force_bypasses_version_gate(
        self,
        clients: InstallerClients,
        mock_store: MagicMock,
        installed: Installed,
        chart: ChartArchive,
    ) -> None:
        mock_store.get.side_effect = installed(crossplane="1.3.1")
        manager = LifecycleManager(_config(force=True), clients)

        manager.upgrade("1.4.0-up.1", PARAMS)

        mock_store.upgrade.assert_called_once_with("crossplane", chart, PARAMS)

    def test_failure_without_rollback_propagates(
        self, manager: LifecycleManager, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(universal_crossplane="1.2.0")
        error = HelmCommandError("Helm command failed: timed out")
        mock_store.upgrade.side_effect = error

        with pytest.raises(HelmCommandError) as exc_info:
            manager.upgrade("1.3.1-up.1", PARAMS)

        assert exc_info.value is error
        mock_store.rollback.assert_not_called()

    def test_failure_with_successful_rollback(
        self, clients: InstallerClients, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(crossplane="1.3.1")
        error = HelmCommandError("Helm command failed: timed out")
        mock_store.upgrade.side_effect = error
        manager = LifecycleManager(_config(rollback_on_error=True), clients)

        with pytest.raises(UpgradeRolledBackError) as exc_info:
            manager.upgrade("1.3.1-up.1", PARAMS)

        assert exc_info.value.upgrade_error is error
        assert exc_info.value.__cause__ is error
        assert str(exc_info.value) == (
            "failed upgrade was rolled back: Helm command failed: timed out"
        )
        mock_store.rollback.assert_called_once_with("crossplane")

    def test_failure_with_failed_rollback(
        self, clients: InstallerClients, mock_store: MagicMock, installed: Installed
    ) -> None:
        mock_store.get.side_effect = installed(universal_crossplane="1.2.0")
        upgrade_error = HelmCommandError("Helm command failed: timed out")
        rollback_error = HelmCommandError("Helm command failed: no revision")
        mock_store.upgrade.side_effect = upgrade_error
        mock_store.rollback.side_effect = rollback_error
        manager = LifecycleManager(_config(rollback_on_error=True), clients)

        with pytest.raises(RollbackFailedError) as exc_info:
            manager.upgrade("1.3.1-up.1", PARAMS)

        assert exc_info.value.upgrade_error is upgrade_error
        assert exc_info.value.rollback_error is rollback_error
        assert mock_store.rollback.call_count == 1


# ===========================================================================
# TestUninstall
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestUninstall:
    """Tests for LifecycleManager.uninstall."""

    def test_uninstalls_canonical_name(
        self, manager: LifecycleManager, mock_store: MagicMock
    ) -> None:
        manager.uninstall()

        mock_store.uninstall.assert_called_once_with("universal-crossplane")
        mock_store.get.assert_not_called()

    def test_not_found_propagates(self, manager: LifecycleManager, mock_store: MagicMock) -> None:
        """A legacy-only installation is not looked up."""
        mock_store.uninstall.side_effect = ReleaseNotFoundError()

        with pytest.raises(ReleaseNotFoundError):
            manager.uninstall()
        mock_store.uninstall.assert_called_once_with("universal-crossplane")


# ===========================================================================
# TestDefaultClients
# ===========================================================================


@pytest.mark.unit
@pytest.mark.uxp
class TestDefaultClients:
    """Tests for default_clients."""

    def test_builds_helm_backed_bundle(self) -> None:
        helm = MagicMock()
        config = _config(unstable=True, namespace="crossplane-system")

        bundle = default_clients(config, helm)

        assert isinstance(bundle.puller, HelmPuller)
        assert bundle.puller.repo_url == "https://charts.upbound.io/main"
        assert bundle.puller.devel is True
        assert isinstance(bundle.loader, ArchiveLoader)
        assert isinstance(bundle.store, HelmReleaseStore)
        assert bundle.store.namespace == "crossplane-system"
        assert bundle.store.install_name == "universal-crossplane"
        assert isinstance(bundle.fs, OsFilesystem)

    def test_full_install_through_helm(
        self, tmp_path: Path, make_chart_archive: Callable[..., Path]
    ) -> None:
        """Install drives helm get metadata, pull and install in order."""
        cache_dir = tmp_path / "charts"
        config = InstallerConfig.create(cache_dir=cache_dir)
        helm = MagicMock()
        helm.get_metadata.side_effect = ReleaseNotFoundError()

        def _pull(chart: str, *, repo_url: str, destination: str, **kwargs: object) -> None:
            make_chart_archive(
                Path(destination) / f"{chart}-1.3.1-up.1.tgz",
                {"apiVersion": "v2", "name": chart, "version": "1.3.1-up.1"},
            )

        helm.pull.side_effect = _pull
        manager = LifecycleManager(config, default_clients(config, helm))

        with patch("up_cli.integrations.helm.release_store.values_file") as mock_values:
            mock_values.return_value.__enter__.return_value = ["/tmp/up-values.yaml"]
            manager.install("1.3.1-up.1", PARAMS)

        assert cache_dir.is_dir()
        helm.pull.assert_called_once_with(
            "universal-crossplane",
            repo_url="https://charts.upbound.io/stable",
            destination=str(cache_dir),
            version="1.3.1-up.1",
            devel=False,
        )
        helm.install.assert_called_once_with(
            "universal-crossplane",
            str(cache_dir / "universal-crossplane-1.3.1-up.1.tgz"),
            namespace="upbound-system",
            values_files=["/tmp/up-values.yaml"],
        )
        mock_values.assert_called_once_with(PARAMS)
