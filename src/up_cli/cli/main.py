"""Entry point for the ``up`` command.

The root callback resolves the active configuration profile and sets up
logging before any command group runs. Configuration errors are not fatal
here; the command that needs the settings reports them.
"""

from __future__ import annotations

import typer
from rich.console import Console

from up_cli import __version__
from up_cli.cli.commands import cloud, init, uxp
from up_cli.core.config.models import DEFAULT_PROFILE, ProfileConfig, load_settings
from up_cli.logging.config import configure_logging

app = typer.Typer(
    name="up",
    help=(
        "The Upbound CLI. Install, upgrade and uninstall Universal Crossplane "
        "in a cluster, and manage hosted control planes on Upbound Cloud."
    ),
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"up version {__version__}")
        raise typer.Exit()


def resolve_profile(name: str) -> ProfileConfig:
    """Return the named profile from the settings.

    Unreadable settings fall back to the built-in profile so that ``up init``
    can still repair them.

    Raises:
        typer.Exit: A non-default profile is requested but not defined.
    """
    try:
        settings = load_settings()
    except ValueError:
        return ProfileConfig()
    try:
        return settings.get_profile(name)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: str = typer.Option(
        DEFAULT_PROFILE,
        "--profile",
        "-p",
        envvar="UP_PROFILE",
        help="Configuration profile supplying log settings.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log installer progress to stderr.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log everything, including helm invocations, to stderr.",
    ),
) -> None:
    """Manage Universal Crossplane and Upbound Cloud control planes.

    Command-line flags win over the profile: ``--debug`` and ``--verbose``
    override the profile's ``log_level``.
    """
    active = resolve_profile(profile)
    configure_logging(
        verbose=verbose,
        debug=debug or active.debug,
        level=active.log_level,
    )


app.add_typer(init.app, name="init")
app.add_typer(uxp.app, name="uxp")
app.add_typer(cloud.app, name="cloud")


if __name__ == "__main__":
    app()
