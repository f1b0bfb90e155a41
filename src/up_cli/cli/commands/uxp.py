"""CLI commands for managing Upbound Universal Crossplane (UXP)."""

from __future__ import annotations

from typing import Annotated

import structlog
import typer
from rich.markup import escape

from up_cli.cli.commands.base import (
    NamespaceOption,
    SetValuesOption,
    UnstableOption,
    ValuesFileOption,
    console,
    get_settings,
    handle_helm_error,
    handle_installer_error,
    handle_k8s_error,
)
from up_cli.integrations.helm.exceptions import HelmError
from up_cli.integrations.helm.helm_client import HelmClient
from up_cli.integrations.kubernetes.client import KubernetesClient
from up_cli.integrations.kubernetes.exceptions import KubernetesError
from up_cli.services.uxp.config import InstallerConfig
from up_cli.services.uxp.exceptions import InstallerError
from up_cli.services.uxp.installer import LifecycleManager, default_clients
from up_cli.services.uxp.parameters import build_parameters

app = typer.Typer(
    name="uxp",
    help="Install, upgrade, and uninstall Upbound Universal Crossplane.",
    no_args_is_help=True,
)
logger = structlog.get_logger()

VersionArgument = Annotated[
    str,
    typer.Argument(help="UXP version (defaults to the latest release)"),
]


def get_manager(
    namespace: str | None,
    *,
    unstable: bool = False,
    rollback_on_error: bool = False,
    force: bool = False,
) -> LifecycleManager:
    """Build a lifecycle manager from settings and command options."""
    settings = get_settings().uxp
    try:
        config = InstallerConfig.create(
            repo_url=settings.repo_url,
            chart_name=settings.chart_name,
            namespace=namespace or settings.namespace,
            cache_dir=settings.cache_dir,
            unstable=unstable,
            rollback_on_error=rollback_on_error,
            force=force,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] invalid installer configuration: {escape(str(e))}")
        raise typer.Exit(1) from None
    helm = HelmClient(
        settings.helm_binary,
        kubeconfig=settings.kubeconfig,
        kube_context=settings.context,
    )
    return LifecycleManager(config, default_clients(config, helm))


def get_kubernetes_client() -> KubernetesClient:
    settings = get_settings().uxp
    return KubernetesClient(kubeconfig=settings.kubeconfig, context=settings.context)


@app.command("install")
def install(
    version: VersionArgument = "",
    unstable: UnstableOption = False,
    set_values: SetValuesOption = None,
    values_file: ValuesFileOption = None,
    namespace: NamespaceOption = None,
) -> None:
    """Install UXP.

    Examples:
        up uxp install
        up uxp install 1.3.1-up.1 -n upbound-system
        up uxp install --set replicas=2 -f params.yaml
    """
    try:
        parameters = build_parameters(values_file, set_values)
        manager = get_manager(namespace, unstable=unstable)
        get_kubernetes_client().ensure_namespace(manager.config.namespace)
        manager.install(version, parameters)
        console.print(f"[green]UXP installed in namespace {manager.config.namespace}[/green]")
    except InstallerError as e:
        handle_installer_error(e)
    except HelmError as e:
        handle_helm_error(e)
    except KubernetesError as e:
        handle_k8s_error(e)


@app.command("upgrade")
def upgrade(
    version: VersionArgument = "",
    unstable: UnstableOption = False,
    set_values: SetValuesOption = None,
    values_file: ValuesFileOption = None,
    rollback: Annotated[
        bool,
        typer.Option("--rollback", help="Roll back to the previous revision on failure"),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", help="Allow upgrading crossplane to a mismatched version"),
    ] = False,
    namespace: NamespaceOption = None,
) -> None:
    """Upgrade UXP.

    Examples:
        up uxp upgrade 1.3.1-up.2 --rollback
        up uxp upgrade --force
    """
    try:
        parameters = build_parameters(values_file, set_values)
        manager = get_manager(
            namespace,
            unstable=unstable,
            rollback_on_error=rollback,
            force=force,
        )
        manager.upgrade(version, parameters)
        console.print(f"[green]UXP upgraded in namespace {manager.config.namespace}[/green]")
    except InstallerError as e:
        handle_installer_error(e)
    except HelmError as e:
        handle_helm_error(e)


@app.command("uninstall")
def uninstall(namespace: NamespaceOption = None) -> None:
    """Uninstall UXP."""
    try:
        manager = get_manager(namespace)
        manager.uninstall()
        console.print(f"[green]UXP uninstalled from namespace {manager.config.namespace}[/green]")
    except InstallerError as e:
        handle_installer_error(e)
    except HelmError as e:
        handle_helm_error(e)


@app.command("version")
def version(namespace: NamespaceOption = None) -> None:
    """Show the installed UXP version."""
    try:
        manager = get_manager(namespace)
        release = manager.current_release()
    except InstallerError as e:
        handle_installer_error(e)
    except HelmError as e:
        handle_helm_error(e)

    console.print(release.version)
    if release.is_legacy:
        console.print(f"[dim]installed as legacy release '{release.resolved_name}'[/dim]")
