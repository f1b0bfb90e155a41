"""UXP lifecycle service.

Installs, upgrades and uninstalls Upbound Universal Crossplane as a helm
release, keeping pulled chart archives in a local cache.
"""

from up_cli.services.uxp.cache import ChartCache
from up_cli.services.uxp.config import (
    CANONICAL_CHART_NAME,
    DEFAULT_NAMESPACE,
    DEFAULT_REPO_URL,
    DEFAULT_UNSTABLE_REPO_URL,
    LEGACY_CHART_NAME,
    InstallerConfig,
)
from up_cli.services.uxp.exceptions import (
    AlreadyInstalledError,
    InstallerError,
    ReleaseNotFoundError,
    RollbackFailedError,
    UpgradeRolledBackError,
    UpgradeVersionMismatchError,
    VerificationFailedError,
)
from up_cli.services.uxp.inspector import InstalledRelease, ReleaseInspector
from up_cli.services.uxp.installer import LifecycleManager, default_clients
from up_cli.services.uxp.interfaces import InstallerClients
from up_cli.services.uxp.parameters import ParameterParser

__all__ = [
    "CANONICAL_CHART_NAME",
    "DEFAULT_NAMESPACE",
    "DEFAULT_REPO_URL",
    "DEFAULT_UNSTABLE_REPO_URL",
    "LEGACY_CHART_NAME",
    "AlreadyInstalledError",
    "ChartCache",
    "InstallerClients",
    "InstallerConfig",
    "InstallerError",
    "InstalledRelease",
    "LifecycleManager",
    "ParameterParser",
    "ReleaseInspector",
    "ReleaseNotFoundError",
    "RollbackFailedError",
    "UpgradeRolledBackError",
    "UpgradeVersionMismatchError",
    "VerificationFailedError",
    "default_clients",
]
