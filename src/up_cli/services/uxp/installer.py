"""UXP lifecycle manager.

Installs, upgrades and uninstalls the single UXP release in a namespace.
The installation may exist under the canonical ``universal-crossplane``
chart name or the legacy ``crossplane`` name; the release inspector decides
which one is authoritative and the resolved name is threaded through the
rest of the operation explicitly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from up_cli.integrations.filesystem import OsFilesystem
from up_cli.integrations.helm.exceptions import ReleaseNotFoundError
from up_cli.integrations.helm.loader import ArchiveLoader
from up_cli.integrations.helm.puller import HelmPuller
from up_cli.integrations.helm.release_store import HelmReleaseStore
from up_cli.services.uxp.cache import ChartCache
from up_cli.services.uxp.config import CANONICAL_CHART_NAME, LEGACY_CHART_NAME
from up_cli.services.uxp.exceptions import (
    AlreadyInstalledError,
    UpgradeRolledBackError,
    UpgradeVersionMismatchError,
    VerificationFailedError,
)
from up_cli.services.uxp.inspector import InstalledRelease, ReleaseInspector
from up_cli.services.uxp.interfaces import InstallerClients
from up_cli.services.uxp.rollback import RollbackCoordinator
from up_cli.services.uxp.version import equivalent

if TYPE_CHECKING:
    from up_cli.integrations.helm.helm_client import HelmClient
    from up_cli.services.uxp.config import InstallerConfig

logger = structlog.get_logger()

ERR_VERIFY_CHART_NOT_INSTALLED = "could not verify that chart is not already installed"


def default_clients(config: InstallerConfig, helm: HelmClient) -> InstallerClients:
    """Build the helm backed capability bundle for ``config``."""
    return InstallerClients(
        puller=HelmPuller(
            helm,
            config.repo_url,
            dest_dir=str(config.cache_dir),
            devel=config.unstable,
        ),
        loader=ArchiveLoader(),
        store=HelmReleaseStore(helm, config.namespace, install_name=config.chart_name),
        fs=OsFilesystem(),
    )


class LifecycleManager:
    """Drives install, upgrade and uninstall of UXP in one namespace.

    Example:
        >>> config = InstallerConfig.create(namespace="upbound-system")
        >>> manager = LifecycleManager(config, default_clients(config, HelmClient()))
        >>> manager.install("1.3.1-up.1", {})
    """

    def __init__(
        self,
        config: InstallerConfig,
        clients: InstallerClients,
        log: structlog.BoundLogger | None = None,
    ) -> None:
        """Initialize the manager and make sure the chart cache exists.

        Args:
            config: Installer configuration.
            clients: Capabilities to drive.
            log: Optional logger; defaults to the module logger.

        Raises:
            ChartCacheError: If the cache directory cannot be created.
        """
        self.config = config
        self._clients = clients
        self._log = (log or logger).bind(
            component="uxp-installer",
            namespace=config.namespace,
            chart=config.chart_name,
        )
        self._inspector = ReleaseInspector(
            clients.store,
            canonical_name=CANONICAL_CHART_NAME,
            legacy_name=LEGACY_CHART_NAME,
            log=self._log,
        )
        self._rollback = RollbackCoordinator(clients.store, log=self._log)
        self._cache = ChartCache(
            config.cache_dir,
            config.chart_name,
            clients.puller,
            clients.loader,
            clients.fs,
            log=self._log,
        )
        self._cache.ensure_dir()

    @property
    def cache(self) -> ChartCache:
        return self._cache

    def current_release(self) -> InstalledRelease:
        """Return the installed version and the name it is installed under.

        Raises:
            ReleaseNotFoundError: UXP is not installed.
            VerificationFailedError: The installed release cannot be verified.
        """
        return self._inspector.current_version(self.config.namespace)

    def get_current_version(self) -> str:
        """Return the installed UXP version."""
        return self.current_release().version

    def install(self, version: str, parameters: dict[str, Any]) -> None:
        """Install UXP into an empty namespace.

        Args:
            version: Chart version, or empty for the newest release.
            parameters: Chart values.

        Raises:
            AlreadyInstalledError: A release already exists.
            VerificationFailedError: The namespace could not be checked.
        """
        try:
            current = self.current_release()
        except ReleaseNotFoundError:
            pass
        except Exception as e:
            raise VerificationFailedError(ERR_VERIFY_CHART_NOT_INSTALLED, e) from e
        else:
            raise AlreadyInstalledError(current.version)

        chart = self._cache.pull_and_load(version)
        self._log.info("installing_uxp", version=chart.version, release=self.config.chart_name)
        self._clients.store.install(chart, parameters)
        self._log.info("uxp_installed", version=chart.version)

    def upgrade(self, version: str, parameters: dict[str, Any]) -> None:
        """Upgrade the existing UXP release.

        Upgrading a legacy ``crossplane`` release is only allowed to an
        equivalent version unless ``force`` is set.

        Raises:
            ReleaseNotFoundError: UXP is not installed.
            UpgradeVersionMismatchError: Legacy release and non-equivalent target.
            UpgradeRolledBackError: The upgrade failed and was rolled back.
            RollbackFailedError: The upgrade failed and so did the rollback.
        """
        current = self.current_release()
        release_name = current.resolved_name

        if (
            release_name == LEGACY_CHART_NAME
            and not equivalent(current.version, version)
            and not self.config.force
        ):
            raise UpgradeVersionMismatchError(current.version, version)

        chart = self._cache.pull_and_load(version)
        self._log.info(
            "upgrading_uxp",
            release=release_name,
            from_version=current.version,
            to_version=chart.version,
        )
        try:
            self._clients.store.upgrade(release_name, chart, parameters)
        except Exception as e:
            if not self.config.rollback_on_error:
                raise
            self._log.warning("uxp_upgrade_failed", release=release_name, error=str(e))
            self._rollback.rollback(release_name, upgrade_error=e)
            raise UpgradeRolledBackError(e) from e
        self._log.info("uxp_upgraded", release=release_name, version=chart.version)

    def uninstall(self) -> None:
        """Uninstall the UXP release.

        Only the configured (canonical) chart name is removed; a release
        installed under the legacy name is reported as not found.
        """
        self._log.info("uninstalling_uxp", release=self.config.chart_name)
        self._clients.store.uninstall(self.config.chart_name)
