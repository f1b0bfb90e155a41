"""Init command for writing a default configuration file."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console
from rich.panel import Panel

from up_cli.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    SystemConfig,
)

app = typer.Typer(help="Initialize up configuration.")
console = Console()
logger = structlog.get_logger()


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite existing configuration.",
    ),
) -> None:
    """Initialize up configuration in ~/.config/up/."""
    if ctx.invoked_subcommand is not None:
        return

    logger.info("initializing_config", path=str(CONFIG_FILE))
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {CONFIG_FILE}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    CONFIG_FILE.write_text(SystemConfig().to_yaml())

    console.print(
        Panel(
            f"[green]Configuration initialized successfully![/green]\n\n"
            f"Configuration created at: {CONFIG_FILE}\n\n"
            f"Next steps:\n"
            f"  1. Set cloud.account, or export UP_ACCOUNT and UP_TOKEN\n"
            f"  2. Run [bold]up uxp install[/bold] to install Universal Crossplane",
            title="up init",
            border_style="green",
        )
    )
    logger.info("config_initialized", config_file=str(CONFIG_FILE))
