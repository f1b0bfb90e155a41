"""Data models for Helm releases and chart archives."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ChartMetadata:
    """The subset of ``Chart.yaml`` the installer relies on."""

    name: str
    version: str
    app_version: str = ""
    description: str = ""

    @classmethod
    def from_chart_yaml(cls, data: dict[str, Any]) -> ChartMetadata:
        """Create from a parsed ``Chart.yaml`` document."""
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            app_version=str(data.get("appVersion", "") or ""),
            description=str(data.get("description", "") or ""),
        )


@dataclass(frozen=True)
class ChartArchive:
    """A chart archive on disk together with its metadata."""

    path: Path
    metadata: ChartMetadata

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return self.metadata.version


@dataclass
class ReleaseInfo:
    """An installed release as reported by ``helm get metadata``.

    ``chart`` is None when the release record carries no chart metadata.
    """

    name: str
    namespace: str
    revision: int = 0
    status: str = ""
    chart: ChartMetadata | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def version(self) -> str | None:
        """Chart version of the release, if known."""
        if self.chart is None or not self.chart.version:
            return None
        return self.chart.version

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ReleaseInfo:
        """Create from ``helm get metadata --output json``."""
        chart: ChartMetadata | None = None
        if data.get("chart"):
            chart = ChartMetadata(
                name=str(data.get("chart", "")),
                version=str(data.get("version", "") or ""),
                app_version=str(data.get("appVersion", "") or ""),
            )
        return cls(
            name=str(data.get("name", "")),
            namespace=str(data.get("namespace", "")),
            revision=int(data.get("revision", 0) or 0),
            status=str(data.get("status", "") or ""),
            chart=chart,
            extra={k: v for k, v in data.items() if k not in _KNOWN_METADATA_KEYS},
        )


_KNOWN_METADATA_KEYS = frozenset(
    {"name", "namespace", "revision", "status", "chart", "version", "appVersion"}
)


@dataclass
class HelmCommandResult:
    """Generic result from a Helm command."""

    success: bool
    stdout: str
    stderr: str = ""

    @property
    def output(self) -> str:
        """Return the primary output (stdout)."""
        return self.stdout
