"""Admin command line for the headless API.

Replaces the settings page of the CMS plugin: inspect the stored
configuration, toggle the feature flags, rotate the API key and run the
server.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import get_settings
from .errors import ConfigError
from .models import ApiConfig, ConfigUpdate
from .storage import load_config, regenerate_key, update_config

app = typer.Typer(
    name="headless-api",
    help="Headless JSON API for GetSimple CMS content",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
config_app = typer.Typer(help="Show and change the API configuration", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()


def _mask(key: str) -> str:
    return f"{key[:6]}…{key[-4:]}" if len(key) > 12 else "****"


def _render(config: ApiConfig, reveal: bool) -> None:
    # Printed on its own line so a revealed key is never wrapped by the table
    console.print(f"API key: {config.api_key if reveal else _mask(config.api_key)}")
    table = Table(title="API configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("API enabled", "yes" if config.api_enabled else "no")
    table.add_row("Require auth", "yes" if config.require_auth else "no")
    table.add_row("CORS enabled", "yes" if config.cors_enabled else "no")
    console.print(table)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"headless-api {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit",
    ),
) -> None:
    """Headless JSON API for GetSimple CMS content."""


@config_app.command("show")
def show(
    reveal: bool = typer.Option(False, "--reveal", help="Print the full API key"),
) -> None:
    """Print the stored configuration (created on first use)."""
    path = get_settings().api_config_path
    try:
        config = load_config(path)
    except ConfigError as e:
        console.print(f"[red]{e.message}: {path}[/red]")
        raise typer.Exit(1)
    _render(config, reveal)


@config_app.command("set")
def set_flags(
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Serve API requests"),
    auth: Optional[bool] = typer.Option(None, "--auth/--no-auth", help="Require the API key"),
    cors: Optional[bool] = typer.Option(None, "--cors/--no-cors", help="Send CORS headers"),
) -> None:
    """Change feature flags. Flags left out keep their current value.

    Examples:
        headless-api config set --auth --no-cors
    """
    update = ConfigUpdate(api_enabled=enabled, require_auth=auth, cors_enabled=cors)
    if not update.model_dump(exclude_none=True):
        console.print("[yellow]Nothing to change[/yellow]")
        raise typer.Exit(1)
    path = get_settings().api_config_path
    try:
        config = update_config(path, update)
    except ConfigError as e:
        console.print(f"[red]{e.message}: {path}[/red]")
        raise typer.Exit(1)
    console.print("[green]Settings saved[/green]")
    _render(config, reveal=False)


@config_app.command("regenerate-key")
def regenerate(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace the API key. The old key stops working immediately."""
    if not yes and not typer.confirm("Regenerate the API key? Clients using the old key will get 401"):
        raise typer.Exit(1)
    path = get_settings().api_config_path
    try:
        config = regenerate_key(path)
    except ConfigError as e:
        console.print(f"[red]{e.message}: {path}[/red]")
        raise typer.Exit(1)
    console.print("[green]New API key:[/green]")
    console.print(config.api_key)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("headless_api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
