"""Command-line interface for Spotify Stats."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config.database import HistoryStore
from .config.settings import Settings
from .core.aggregator import most_played_artists
from .core.feed import render_most_played, render_recent
from .core.locator import ProcessLocator
from .errors import SpotifyStatsError
from .models.history import ViewMode
from .models.sampler import SamplerStatus
from .utils.platform import get_config_dir

app = typer.Typer(help="Spotify listening history recorder")
console = Console()


def config_option():
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from file or defaults."""
    return Settings.from_file_or_default(config_path)


def get_store(settings: Settings) -> HistoryStore:
    """Get history store."""
    return HistoryStore(settings.database.path)


@app.command()
def start(
    config: Optional[Path] = config_option(),
    view: Optional[ViewMode] = typer.Option(
        None,
        "--view",
        "-v",
        help="Initial view: recent songs or most played artists"
    ),
    no_display: bool = typer.Option(
        False,
        "--no-display",
        help="Record in the background without the live view"
    )
):
    """Start recording what Spotify plays.

    On Linux/macOS send SIGUSR1 to pause/resume and SIGUSR2 to switch views.
    """
    console.print("[cyan]Starting Spotify Stats...[/cyan]")

    # Import here to keep the lightweight commands fast
    from .service import SpotifyStatsService

    try:
        service = SpotifyStatsService(config_path=config, console=console)
        if view is not None:
            service.set_view_mode(view)
        service.run(display=not no_display)
    except SpotifyStatsError as e:
        console.print(f"[red]Service error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def now(
    config: Optional[Path] = config_option()
):
    """Sample the Spotify window once and record the song if it changed."""
    from .service import SpotifyStatsService

    try:
        service = SpotifyStatsService(config_path=config, console=console)
        service.resume_from_history()
        result = service.sample_once()
    except SpotifyStatsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if result.status == SamplerStatus.RECORDED:
        console.print(f"[green]Recorded: {result.track}[/green]")
    elif result.status == SamplerStatus.UNCHANGED:
        console.print(f"Still playing: {result.state.last_track}")
    elif result.status == SamplerStatus.PERSISTENCE_FAILED:
        console.print(f"[red]{result.message}[/red]")
        raise typer.Exit(1)
    else:
        console.print(f"[yellow]{result.message}[/yellow]")


@app.command()
def history(
    config: Optional[Path] = config_option(),
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        min=1,
        help="Number of songs to show"
    )
):
    """Show the most recently recorded songs."""
    settings = get_settings(config)

    try:
        tracks = get_store(settings).recent(limit)
    except SpotifyStatsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not tracks:
        console.print("[yellow]No songs recorded yet[/yellow]")
        console.print("\nUse 'start' to begin recording")
        return

    console.print(render_recent(tracks))


@app.command(name="top-artists")
def top_artists(
    config: Optional[Path] = config_option(),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Number of artists to show (default: all)"
    )
):
    """Show artists ranked by number of recorded plays."""
    settings = get_settings(config)

    try:
        ranking = most_played_artists(get_store(settings).all(), limit=limit)
    except SpotifyStatsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not ranking:
        console.print("[yellow]No songs recorded yet[/yellow]")
        return

    console.print(render_most_played(ranking))


@app.command()
def status(
    config: Optional[Path] = config_option()
):
    """Show configuration paths, history size and whether Spotify is found."""
    settings = get_settings(config)

    try:
        store = get_store(settings)
        total = store.count()
        last = store.last()
    except SpotifyStatsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print("[cyan]Spotify Stats Status[/cyan]\n")

    console.print(f"Config directory: {get_config_dir()}")
    console.print(f"Database: {settings.database.path}")
    console.print(f"Log file: {settings.logging.path}\n")

    console.print("[bold]History:[/bold]")
    console.print(f"  Songs recorded: {total}")
    if last:
        console.print(f"  Last song: {last} ({last.timestamp.astimezone():%Y-%m-%d %H:%M})")

    locator = ProcessLocator(title_prefix=settings.spotify.title_prefix)
    process_id = locator.locate()
    console.print("\n[bold]Spotify:[/bold]")
    if process_id is None:
        console.print("  [yellow]Not running/not playing a song[/yellow]")
    else:
        console.print(f"  [green]Found process {process_id}[/green]")


@app.command(name="init-config")
def init_config(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file"
    )
):
    """Initialize a configuration file with defaults."""
    if output is None:
        output = get_config_dir() / 'config.yaml'

    if output.exists():
        overwrite = typer.confirm(
            f"Config file already exists at {output}. Overwrite?",
            default=False
        )
        if not overwrite:
            console.print("[yellow]Cancelled[/yellow]")
            return

    settings = Settings()
    settings.save(output)

    console.print(f"[green]Configuration file created: {output}[/green]")
    console.print("\nEdit this file to customize your settings")


if __name__ == "__main__":
    app()
