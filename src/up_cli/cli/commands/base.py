"""Shared options and error handling for up-cli commands."""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from rich.console import Console

from up_cli.core.config.models import SystemConfig, load_settings
from up_cli.integrations.cloud.exceptions import (
    CloudAuthError,
    CloudConfigError,
    CloudConnectionError,
    CloudError,
    CloudNotFoundError,
)
from up_cli.integrations.helm.exceptions import (
    HelmBinaryNotFoundError,
    HelmError,
    ReleaseNotFoundError,
)
from up_cli.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
)
from up_cli.services.uxp.exceptions import (
    InstallerError,
    RollbackFailedError,
    UpgradeRolledBackError,
)

# Shared console instance
console = Console()


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace for UXP (defaults to config or 'upbound-system')",
    ),
]

UnstableOption = Annotated[
    bool,
    typer.Option(
        "--unstable",
        help="Allow unstable UXP versions",
    ),
]

SetValuesOption = Annotated[
    list[str] | None,
    typer.Option(
        "--set",
        help="Set install parameters (key=value, can specify multiple)",
    ),
]

ValuesFileOption = Annotated[
    str | None,
    typer.Option(
        "--file",
        "-f",
        help="Parameters YAML file",
    ),
]


# =============================================================================
# Settings
# =============================================================================


def get_settings() -> SystemConfig:
    """Load settings from the config file and environment, exiting on errors."""
    try:
        return load_settings()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


# =============================================================================
# Error Handling
# =============================================================================


def handle_installer_error(error: InstallerError) -> NoReturn:
    """Print an installer error chain and exit with code 1."""
    if isinstance(error, RollbackFailedError):
        console.print("[red]Error:[/red] upgrade failed and the rollback failed too")
        console.print(f"  {error}")
        console.print(
            "\n[yellow]The UXP release is in an unknown state. "
            "Inspect it with 'helm history' and repair it manually.[/yellow]"
        )
    elif isinstance(error, UpgradeRolledBackError):
        console.print("[red]Error:[/red] upgrade failed")
        console.print(f"  {error}")
        console.print("\n[dim]The release was rolled back to its previous revision.[/dim]")
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1) from None


def handle_helm_error(error: HelmError) -> NoReturn:
    """Print a helm error, with helm's stderr when present, and exit."""
    if isinstance(error, HelmBinaryNotFoundError):
        console.print(f"[red]Error:[/red] {error.message}")
    elif isinstance(error, ReleaseNotFoundError):
        console.print(f"[red]Error:[/red] UXP is not installed: {error.message}")
    else:
        console.print(f"[red]Helm error:[/red] {error.message}")
        if error.stderr:
            console.print(f"\n[dim]{error.stderr}[/dim]")
    raise typer.Exit(1) from None


def handle_k8s_error(error: KubernetesError) -> NoReturn:
    """Handle Kubernetes errors with user-friendly output."""
    if isinstance(error, KubernetesConnectionError):
        console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        console.print(f"  {error.message}")
        if error.original_error:
            console.print(f"  Cause: {error.original_error}")
        console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )
    elif isinstance(error, KubernetesAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {error.message}")
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1) from None


def handle_cloud_error(error: CloudError) -> NoReturn:
    """Handle Upbound Cloud errors with user-friendly output."""
    if isinstance(error, CloudConfigError):
        console.print(f"[red]Error:[/red] {error.message}")
    elif isinstance(error, CloudConnectionError):
        console.print("[red]Error:[/red] Cannot reach Upbound Cloud")
        console.print(f"  {error.message}")
    elif isinstance(error, CloudAuthError):
        console.print(f"[red]Error:[/red] {error.message}")
    elif isinstance(error, CloudNotFoundError):
        console.print("[red]Error:[/red] Control plane not found")
    else:
        console.print(f"[red]Error:[/red] {error.message}")
    if error.details and not isinstance(error, CloudNotFoundError):
        console.print(f"\n[dim]{error.details}[/dim]")
    raise typer.Exit(1) from None
