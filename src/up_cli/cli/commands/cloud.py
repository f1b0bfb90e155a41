"""CLI commands for Upbound Cloud."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.table import Table

from up_cli.cli.commands.base import console, get_settings, handle_cloud_error
from up_cli.integrations.cloud.client import ControlPlaneClient
from up_cli.integrations.cloud.exceptions import CloudError

app = typer.Typer(name="cloud", help="Interact with Upbound Cloud.", no_args_is_help=True)
controlplane_app = typer.Typer(
    name="controlplane",
    help="Manage hosted control planes.",
    no_args_is_help=True,
)
app.add_typer(controlplane_app, name="controlplane")

IdArgument = Annotated[str, typer.Argument(help="Control plane ID")]


def get_client() -> ControlPlaneClient:
    return ControlPlaneClient(get_settings().cloud)


@controlplane_app.command("create")
def create(
    name: Annotated[str, typer.Argument(help="Name of control plane")],
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Description for control plane"),
    ] = "",
) -> None:
    """Create a hosted control plane."""
    try:
        with get_client() as client:
            cp = client.create_control_plane(name, description)
    except CloudError as e:
        handle_cloud_error(e)
    console.print(f"[green]Created control plane {cp.name}[/green] ({cp.id})")


@controlplane_app.command("list")
def list_control_planes() -> None:
    """List hosted control planes in the configured account."""
    try:
        with get_client() as client:
            control_planes = client.list_control_planes()
    except CloudError as e:
        handle_cloud_error(e)

    if not control_planes:
        console.print("[yellow]No control planes found[/yellow]")
        return

    table = Table(title="Control Planes")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Description")
    for cp in control_planes:
        table.add_row(cp.id, cp.name, cp.status or "", cp.description or "")
    console.print(table)


@controlplane_app.command("get")
def get(control_plane_id: IdArgument) -> None:
    """Show a hosted control plane."""
    try:
        with get_client() as client:
            cp = client.get_control_plane(control_plane_id)
    except CloudError as e:
        handle_cloud_error(e)

    console.print(f"[bold]{cp.name}[/bold] ({cp.id})")
    if cp.description:
        console.print(f"  Description: {cp.description}")
    if cp.status:
        console.print(f"  Status: {cp.status}")
    if cp.created_at:
        console.print(f"  Created: {cp.created_at.isoformat()}")


@controlplane_app.command("delete")
def delete(control_plane_id: IdArgument) -> None:
    """Delete a hosted control plane."""
    try:
        with get_client() as client:
            client.delete_control_plane(control_plane_id)
    except CloudError as e:
        handle_cloud_error(e)
    console.print(f"[green]Deleted control plane {control_plane_id}[/green]")
