"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from spotrip import __version__
from spotrip.api.session import open_session
from spotrip.core.download_manager import DownloadManager
from spotrip.exceptions import SpotripError
from spotrip.media.downloader import close_connection_pool
from spotrip.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_config, print_summary_panel

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("spotrip")

app = typer.Typer(
    name="spotrip",
    help="Download albums from a streaming catalog into tagged audio files.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "spotrip"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """spotrip downloader CLI"""
    if version:
        console.print(f"[bold]spotrip[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "DEBUG" if verbose >= 2 else "INFO"
    logging.getLogger("spotrip").setLevel(log_level)

    if show_config:
        try:
            config = ConfigManager(CONFIG_FILE).load_config()
        except SpotripError as e:
            console.print(format_error_with_suggestions(e))
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    backend: str = typer.Option(
        "", "--backend", "-b", help="Session backend as 'package.module:callable'."
    ),
    output_dir: str | None = typer.Option(
        None, "-o", "--output", help="Directory albums are saved into."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config without asking."
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {"backend": backend}
    if output_dir:
        settings["output_dir"] = output_dir
    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except SpotripError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="download")
def download_command(
    references: list[str] = typer.Argument(  # noqa: B008
        ..., help="Album or track URLs, URIs, or album IDs."
    ),
    output_dir: str | None = typer.Option(
        None, "-o", "--output", help="Directory albums are saved into."
    ),
    backend: str | None = typer.Option(
        None, "--backend", "-b", help="Session backend as 'package.module:callable'."
    ),
    embed_art: bool | None = typer.Option(
        None,
        "--embed-art/--no-embed-art",
        help="Save the cover art inside the audio file's metadata.",
    ),
):
    """Download albums or tracks."""
    cli_options = {
        key: value
        for key, value in {
            "sources": references,
            "output_dir": output_dir,
            "backend": backend,
            "embed_art": embed_art,
        }.items()
        if value is not None
    }

    async def _download_async() -> DownloadManager | None:
        session = None
        manager = None
        try:
            config = ConfigManager(CONFIG_FILE).load_config(cli_options)
            session = await open_session(config)
            manager = DownloadManager(config, session)
            console.print("[bold cyan]🎵 Starting download session...[/bold cyan]")
            await manager.execute_downloads()
        finally:
            await close_connection_pool()
            if session is not None:
                await session.close()
            if manager is not None:
                print_summary_panel(manager.stats, manager.stats.elapsed)
        return manager

    start_time = time.monotonic()
    try:
        asyncio.run(_download_async())
    except SpotripError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    log.debug(f"Session finished in {time.monotonic() - start_time:.1f}s")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
    except SpotripError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
    if not config.backend:
        console.print("[yellow]⚠ No session backend configured.[/yellow]")
    print_config(CONFIG_FILE, config)
