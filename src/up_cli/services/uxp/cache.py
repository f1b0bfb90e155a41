"""Local chart cache.

Chart archives are kept in the cache directory under helm's own naming
convention, ``<chart>-<version>.tgz``. A concrete version is pulled at most
once. An empty version means "latest in the repository": it is always
pulled, into a scratch directory inside the cache, and promoted into the
cache only if the pull produced exactly one file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from up_cli.services.uxp.exceptions import (
    CacheWriteFailedError,
    ChartCacheError,
    ChartLoadError,
    CorruptCacheStateError,
    PullFailedError,
)

if TYPE_CHECKING:
    from up_cli.integrations.helm.models import ChartArchive
    from up_cli.services.uxp.interfaces import ChartLoader, ChartPuller, Filesystem

logger = structlog.get_logger()

# Helm constraint matching every release, prereleases included. The stable
# and unstable repositories are separate, so "newest of anything" is safe.
ALL_VERSIONS = ">0.0.0-0"

TEMP_DIR_PREFIX = "pull-"

ERR_CREATE_CACHE_DIR = "could not create chart cache directory"


def cache_file_name(chart_name: str, version: str) -> str:
    """Return the archive file name helm uses for a chart version."""
    return f"{chart_name}-{version}.tgz"


class ChartCache:
    """Resolves a chart version to a loaded chart, pulling only on a miss."""

    def __init__(
        self,
        cache_dir: Path,
        chart_name: str,
        puller: ChartPuller,
        loader: ChartLoader,
        fs: Filesystem,
        log: structlog.BoundLogger | None = None,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.chart_name = chart_name
        self._puller = puller
        self._loader = loader
        self._fs = fs
        self._log = (log or logger).bind(chart=chart_name, cache_dir=str(self.cache_dir))

    def ensure_dir(self) -> None:
        """Create the cache directory if it does not exist.

        Raises:
            ChartCacheError: The directory cannot be checked or created.
        """
        try:
            self._fs.stat(self.cache_dir)
        except FileNotFoundError:
            self._log.debug("creating_chart_cache")
            try:
                self._fs.mkdir_all(self.cache_dir, 0o755)
            except OSError as e:
                raise ChartCacheError(ERR_CREATE_CACHE_DIR, e) from e
        except OSError as e:
            raise ChartCacheError(ERR_CREATE_CACHE_DIR, e) from e

    def path_for(self, version: str) -> Path:
        return self.cache_dir / cache_file_name(self.chart_name, version.removeprefix("v"))

    def pull_and_load(self, version: str) -> ChartArchive:
        """Return the chart for ``version``, pulling it if needed.

        Args:
            version: Concrete chart version, or empty for the newest release.

        Raises:
            PullFailedError: The repository pull failed.
            ChartCacheError: The cache could not be read or a scratch
                directory could not be created.
            CorruptCacheStateError: A latest pull left 0 or 2+ files behind.
            CacheWriteFailedError: The pulled chart could not be moved into place.
            ChartLoadError: The archive could not be loaded.
        """
        # helm strips a leading "v" when naming archives
        version = version.removeprefix("v")
        if version:
            path = self._ensure_cached(version)
        else:
            path = self._pull_latest()
        return self._load(path)

    def _ensure_cached(self, version: str) -> Path:
        path = self.path_for(version)
        try:
            self._fs.stat(path)
        except FileNotFoundError:
            self._log.info("chart_cache_miss", version=version)
            self._puller.set_dest_dir(str(self.cache_dir))
            self._pull(version)
        except OSError as e:
            raise ChartCacheError(f"could not read cached chart {path.name}", e) from e
        else:
            self._log.debug("chart_cache_hit", version=version)
        return path

    def _pull_latest(self) -> Path:
        try:
            tmp = self._fs.temp_dir(self.cache_dir, TEMP_DIR_PREFIX)
        except OSError as e:
            raise ChartCacheError("could not create temporary pull directory", e) from e
        try:
            self._puller.set_dest_dir(tmp)
            self._pull("")
            try:
                entries = self._fs.read_dir(tmp)
            except OSError as e:
                raise ChartCacheError("could not identify chart pulled as latest", e) from e
            if len(entries) != 1:
                raise CorruptCacheStateError(str(self.cache_dir), entries)

            target = self.cache_dir / entries[0]
            try:
                self._fs.rename(Path(tmp) / entries[0], target)
            except OSError as e:
                raise CacheWriteFailedError("could not move latest pulled chart to cache", e) from e
            self._log.info("chart_cached_as_latest", file=entries[0])
            return target
        finally:
            try:
                self._fs.remove_all(tmp)
            except OSError as e:
                self._log.debug("failed to clean up temporary directory", error=str(e))

    def _pull(self, version: str) -> None:
        self._puller.set_version(version or ALL_VERSIONS)
        try:
            self._puller.run(self.chart_name)
        except Exception as e:
            raise PullFailedError("could not pull chart", e) from e

    def _load(self, path: Path) -> ChartArchive:
        try:
            return self._loader.load(path)
        except Exception as e:
            raise ChartLoadError(f"could not load chart {path.name}", e) from e
