"""
Rich renderables for errors, the effective configuration and the run summary.
"""

from pathlib import Path

import aiohttp
from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from spotrip.exceptions import (
    ConfigurationError,
    InvalidReferenceError,
    LocalWriteError,
    SessionError,
)
from spotrip.models.config import DownloadConfig
from spotrip.models.stats import DownloadStats

# Checked in order; the first matching class wins.
SUGGESTIONS: list[tuple[type[BaseException], tuple[str, ...]]] = [
    (
        ConfigurationError,
        (
            "Check the values in your configuration file.",
            "Run `spotrip init --force` to write a fresh configuration.",
        ),
    ),
    (
        SessionError,
        (
            "Verify the configured session backend and its credentials.",
            "Check your internet connection.",
        ),
    ),
    (
        InvalidReferenceError,
        ("Pass an album URL, a spotify:album: URI or a 22-character ID.",),
    ),
    (
        LocalWriteError,
        (
            "Check that the output directory is writable.",
            "Check that the disk is not full.",
        ),
    ),
    (
        aiohttp.ClientError,
        ("The image server could not be reached. Try again later.",),
    ),
]
DEFAULT_SUGGESTION = ("Run the command with -vv for detailed logs.",)


def format_size(bytes_size: float) -> str:
    """Formats a byte count for humans, e.g. '145.3 MB'."""
    if bytes_size < 1024:
        return f"{int(bytes_size)} B"
    for unit in ("KB", "MB", "GB"):
        bytes_size /= 1024
        if bytes_size < 1024:
            return f"{bytes_size:.1f} {unit}"
    return f"{bytes_size / 1024:.1f} TB"


def suggestions_for(error: BaseException) -> tuple[str, ...]:
    for error_class, hints in SUGGESTIONS:
        if isinstance(error, error_class):
            return hints
    return DEFAULT_SUGGESTION


def format_error_with_suggestions(
    error: BaseException, context: dict | None = None
) -> Panel:
    """Wraps an error, the hints for its type and optional context in a panel."""
    parts = [
        Text.assemble((f"{type(error).__name__}: ", "bold red"), str(error)),
        Text(""),
        Text("Suggestions", style="bold yellow"),
        *(Text(f"• {hint}") for hint in suggestions_for(error)),
    ]
    if context:
        parts += [Text(""), Text(f"Context: {context}", style="dim")]

    return Panel(
        Group(*parts),
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: DownloadConfig):
    """Displays the effective configuration."""
    rows = [
        ("Backend", config.backend or "[red]not set[/red]"),
        ("Output Directory", f"[dim]{config.output_dir}[/dim]"),
        ("Embed Cover Art", "✓ Enabled" if config.embed_art else "✗ Disabled"),
        ("Image URL", f"[dim]{config.image_base_url}[/dim]"),
        ("Fetch Attempts", str(config.max_attempts)),
    ]
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold cyan")
    grid.add_column()
    for label, value in rows:
        grid.add_row(f"{label}:", value)

    Console().print(
        Panel(grid, title=f"Configuration ([dim]{config_path}[/dim])", border_style="cyan")
    )


def _summary_rows(stats: DownloadStats, duration_s: float) -> list[tuple[str, str]]:
    rows = [("✓ Downloaded:", f"[bold green]{stats.tracks_downloaded}[/bold green]")]
    if stats.tracks_degraded:
        rows.append(
            ("⚠ Incomplete:", f"[yellow]{stats.tracks_degraded} (untagged or undecrypted)[/yellow]")
        )

    skipped = [
        f"[yellow]{count} ({label})[/yellow]"
        for count, label in (
            (stats.tracks_skipped_unsupported, "no supported format"),
            (stats.tracks_skipped_unavailable, "unavailable"),
        )
        if count
    ]
    if skipped:
        rows.append(("○ Skipped:", " + ".join(skipped)))
    if stats.tracks_failed:
        rows.append(("✗ Failed:", f"[bold red]{stats.tracks_failed}[/bold red]"))

    rows += [
        ("", ""),
        ("Albums:", f"[cyan]{len(stats.albums_processed)}[/cyan]"),
        ("Covers:", f"[cyan]{stats.covers_fetched} fetched, {stats.cover_cache_hits} cached[/cyan]"),
        ("Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"),
        ("Time Elapsed:", f"[blue]{duration_s:.1f}s[/blue]"),
    ]
    return rows


def print_summary_panel(stats: DownloadStats, duration_s: float):
    """Displays the final summary of the download session."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold cyan", justify="right", min_width=20)
    grid.add_column(style="white")
    for label, value in _summary_rows(stats, duration_s):
        grid.add_row(label, value)

    console = Console()
    console.print()
    console.print(
        Panel(
            grid,
            title="🎵 [bold]Download Complete![/bold]",
            border_style="red" if stats.tracks_failed else "green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
