"""Chart puller backed by ``helm pull``."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from up_cli.integrations.helm.helm_client import HelmClient


class HelmPuller:
    """Pulls chart archives from a single repository.

    Destination and version are set before each ``run``, mirroring how the
    chart cache switches between the cache root and a temporary directory.
    """

    def __init__(
        self,
        helm: HelmClient,
        repo_url: str,
        *,
        dest_dir: str = "",
        devel: bool = False,
    ) -> None:
        self._helm = helm
        self.repo_url = repo_url
        self.dest_dir = dest_dir
        self.version = ""
        self.devel = devel

    def set_dest_dir(self, path: str) -> None:
        self.dest_dir = path

    def set_version(self, version: str) -> None:
        self.version = version

    def run(self, chart_name: str) -> str:
        """Pull ``chart_name`` and return the directory it was written to."""
        self._helm.pull(
            chart_name,
            repo_url=self.repo_url,
            destination=self.dest_dir,
            version=self.version or None,
            devel=self.devel,
        )
        return self.dest_dir
