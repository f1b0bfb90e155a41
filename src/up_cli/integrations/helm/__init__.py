"""Helm integration: CLI wrapper and installer capability adapters."""

from up_cli.integrations.helm.exceptions import (
    HelmBinaryNotFoundError,
    HelmCommandError,
    HelmError,
    ReleaseNotFoundError,
)
from up_cli.integrations.helm.helm_client import HelmClient
from up_cli.integrations.helm.loader import ArchiveLoader, ChartArchiveError, load_chart_archive
from up_cli.integrations.helm.models import ChartArchive, ChartMetadata, ReleaseInfo
from up_cli.integrations.helm.puller import HelmPuller
from up_cli.integrations.helm.release_store import HelmReleaseStore

__all__ = [
    "ArchiveLoader",
    "ChartArchive",
    "ChartArchiveError",
    "ChartMetadata",
    "HelmBinaryNotFoundError",
    "HelmClient",
    "HelmCommandError",
    "HelmError",
    "HelmPuller",
    "HelmReleaseStore",
    "ReleaseInfo",
    "ReleaseNotFoundError",
    "load_chart_archive",
]
