"""Helm CLI wrapper for chart pulls and release management.

Wraps the helm binary via subprocess for the operations the UXP
installer needs: pull, get metadata, install, upgrade, rollback and
uninstall.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import structlog

from up_cli.integrations.helm.exceptions import (
    HelmBinaryNotFoundError,
    HelmCommandError,
    HelmError,
    ReleaseNotFoundError,
)
from up_cli.integrations.helm.models import HelmCommandResult, ReleaseInfo

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HELM_TIMEOUT_SECONDS = 300
VERSION_TIMEOUT_SECONDS = 10
SHORT_TIMEOUT_SECONDS = 30

# Substring helm prints when a release is missing from the storage driver.
RELEASE_NOT_FOUND_MARKER = "release: not found"


class HelmClient:
    """Client for interacting with the Helm CLI.

    Every command runs against the kubeconfig and context given at
    construction time, so one client maps to one target cluster.
    """

    def __init__(
        self,
        binary_path: str | None = None,
        *,
        kubeconfig: str | None = None,
        kube_context: str | None = None,
    ) -> None:
        """Initialize Helm client.

        Args:
            binary_path: Optional explicit path to helm binary.
                If None, searches PATH.
            kubeconfig: Path to a kubeconfig file passed as ``--kubeconfig``.
            kube_context: Context name passed as ``--kube-context``.

        Raises:
            HelmBinaryNotFoundError: If binary not found.
        """
        self._binary = self._find_binary(binary_path)
        self._kubeconfig = kubeconfig
        self._kube_context = kube_context
        self._log = logger.bind(binary=self._binary, context=kube_context)
        self._log.debug("helm_client_initialized")

    @staticmethod
    def _find_binary(binary_path: str | None) -> str:
        if binary_path:
            path = Path(binary_path)
            if not path.exists():
                raise HelmBinaryNotFoundError()
            return str(path.resolve())

        found = shutil.which("helm")
        if not found:
            raise HelmBinaryNotFoundError()
        return found

    def _cluster_args(self) -> list[str]:
        args: list[str] = []
        if self._kubeconfig:
            args.extend(["--kubeconfig", self._kubeconfig])
        if self._kube_context:
            args.extend(["--kube-context", self._kube_context])
        return args

    def _run(
        self,
        args: list[str],
        *,
        timeout: int = HELM_TIMEOUT_SECONDS,
        cluster: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """Run a helm command.

        Args:
            args: Command arguments (without the ``helm`` prefix).
            timeout: Timeout in seconds.
            cluster: Append kubeconfig/context flags.

        Returns:
            CompletedProcess result.

        Raises:
            ReleaseNotFoundError: When helm reports a missing release.
            HelmCommandError: On any other non-zero exit.
            HelmError: On timeout.
        """
        cmd = [self._binary, *args]
        if cluster:
            cmd.extend(self._cluster_args())
        self._log.debug("running_helm_command", args=args)

        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.strip() if e.stderr else ""
            if RELEASE_NOT_FOUND_MARKER in stderr:
                raise ReleaseNotFoundError(stderr=e.stderr) from e
            raise HelmCommandError(
                message=f"Helm command failed: {stderr or f'exit code {e.returncode}'}",
                stderr=e.stderr,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise HelmError(
                message=f"Helm command timed out after {timeout}s",
            ) from e

    # -----------------------------------------------------------------------
    # Version
    # -----------------------------------------------------------------------

    def get_version(self) -> str:
        """Get helm version string, e.g. ``v3.17.0``."""
        result = self._run(["version", "--short"], timeout=VERSION_TIMEOUT_SECONDS, cluster=False)
        version = result.stdout.strip()
        # v3.17.0+g301108e -> v3.17.0
        if "+" in version:
            version = version.split("+")[0]
        return version

    # -----------------------------------------------------------------------
    # Charts
    # -----------------------------------------------------------------------

    def pull(
        self,
        chart: str,
        *,
        repo_url: str,
        destination: str,
        version: str | None = None,
        devel: bool = False,
    ) -> HelmCommandResult:
        """Download a chart archive from a repository.

        Args:
            chart: Chart name within the repository.
            repo_url: Chart repository URL.
            destination: Directory the archive is written into.
            version: Version or version constraint.
            devel: Consider development (prerelease) versions.

        Returns:
            Command result.
        """
        args = ["pull", chart, "--repo", repo_url, "--destination", destination]
        if version:
            args.extend(["--version", version])
        if devel:
            args.append("--devel")

        result = self._run(args, cluster=False)
        self._log.info("helm_pull_success", chart=chart, version=version, destination=destination)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)

    # -----------------------------------------------------------------------
    # Releases
    # -----------------------------------------------------------------------

    def get_metadata(self, release_name: str, *, namespace: str) -> ReleaseInfo:
        """Read release metadata (chart name, version, revision).

        Raises:
            ReleaseNotFoundError: If no release exists under the name.
        """
        args = ["get", "metadata", release_name, "--namespace", namespace, "--output", "json"]
        try:
            result = self._run(args, timeout=SHORT_TIMEOUT_SECONDS)
        except ReleaseNotFoundError as e:
            raise ReleaseNotFoundError(
                message=f"release {release_name!r} not found in namespace {namespace!r}",
                release_name=release_name,
                namespace=namespace,
                stderr=e.stderr,
            ) from e
        data = json.loads(result.stdout) if result.stdout.strip() else {}
        return ReleaseInfo.from_json(data)

    def install(
        self,
        release_name: str,
        chart: str,
        *,
        namespace: str,
        values_files: list[str] | None = None,
        wait: bool = False,
    ) -> HelmCommandResult:
        """Install a chart archive as a new release."""
        args = ["install", release_name, chart, "--namespace", namespace]
        args.extend(self._values_args(values_files))
        if wait:
            args.append("--wait")

        result = self._run(args)
        self._log.info("helm_install_success", release=release_name, chart=chart)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)

    def upgrade(
        self,
        release_name: str,
        chart: str,
        *,
        namespace: str,
        values_files: list[str] | None = None,
        wait: bool = False,
    ) -> HelmCommandResult:
        """Upgrade an existing release to a chart archive."""
        args = ["upgrade", release_name, chart, "--namespace", namespace]
        args.extend(self._values_args(values_files))
        if wait:
            args.append("--wait")

        result = self._run(args)
        self._log.info("helm_upgrade_success", release=release_name, chart=chart)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)

    def rollback(
        self,
        release_name: str,
        revision: int | None = None,
        *,
        namespace: str,
    ) -> HelmCommandResult:
        """Roll a release back to a revision (default: previous)."""
        args = ["rollback", release_name]
        if revision is not None:
            args.append(str(revision))
        args.extend(["--namespace", namespace])

        result = self._run(args)
        self._log.info("helm_rollback_success", release=release_name, revision=revision)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)

    def uninstall(self, release_name: str, *, namespace: str) -> HelmCommandResult:
        """Uninstall a release."""
        args = ["uninstall", release_name, "--namespace", namespace]

        result = self._run(args)
        self._log.info("helm_uninstall_success", release=release_name)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)

    @staticmethod
    def _values_args(values_files: list[str] | None) -> list[str]:
        args: list[str] = []
        for f in values_files or []:
            args.extend(["--values", f])
        return args
