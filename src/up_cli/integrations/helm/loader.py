"""Chart archive loading.

Reads ``Chart.yaml`` out of a packaged ``.tgz`` chart without extracting
it to disk.
"""

from __future__ import annotations

import tarfile
from pathlib import Path

import yaml

from up_cli.integrations.helm.exceptions import HelmError
from up_cli.integrations.helm.models import ChartArchive, ChartMetadata


class ChartArchiveError(HelmError):
    """Raised when a chart archive cannot be read or has no valid Chart.yaml."""


def _find_chart_yaml(archive: tarfile.TarFile) -> tarfile.TarInfo:
    # Packaged charts keep Chart.yaml one level down: <chart>/Chart.yaml
    candidates = [
        m
        for m in archive.getmembers()
        if m.isfile() and Path(m.name).name == "Chart.yaml" and len(Path(m.name).parts) == 2
    ]
    if not candidates:
        raise ChartArchiveError("Chart.yaml file is missing")
    return candidates[0]


def load_chart_archive(path: str | Path) -> ChartArchive:
    """Load a chart archive and parse its metadata.

    Args:
        path: Path to a ``.tgz`` chart archive.

    Returns:
        The loaded chart.

    Raises:
        ChartArchiveError: If the archive is unreadable or malformed.
    """
    archive_path = Path(path)
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            member = _find_chart_yaml(archive)
            handle = archive.extractfile(member)
            if handle is None:
                raise ChartArchiveError("Chart.yaml file is missing")
            data = yaml.safe_load(handle.read())
    except (OSError, tarfile.TarError) as e:
        raise ChartArchiveError(f"cannot read chart archive {archive_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ChartArchiveError(f"invalid Chart.yaml in {archive_path}: {e}") from e

    if not isinstance(data, dict):
        raise ChartArchiveError(f"invalid Chart.yaml in {archive_path}")

    metadata = ChartMetadata.from_chart_yaml(data)
    if not metadata.name:
        raise ChartArchiveError("validation: chart.metadata.name is required")
    if not metadata.version:
        raise ChartArchiveError("validation: chart.metadata.version is required")

    return ChartArchive(path=archive_path, metadata=metadata)


class ArchiveLoader:
    """Chart loader backed by :func:`load_chart_archive`."""

    def load(self, path: str | Path) -> ChartArchive:
        return load_chart_archive(path)
