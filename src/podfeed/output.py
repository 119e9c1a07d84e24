"""Terminal output for feed imports."""

from rich.console import Console
from rich.table import Table

from podfeed.core.models import FeedImport, PodcastMetadata
from podfeed.utils.text import format_bytes, format_duration


def display_podcast(podcast: PodcastMetadata, console: Console) -> None:
    """Display podcast metadata as a two-column table."""
    table = Table(title=podcast.title or "Untitled Podcast", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Author", podcast.author_name or "-")
    table.add_row("Email", podcast.author_email or "-")
    table.add_row("Language", podcast.language)
    table.add_row("Category", podcast.category or "-")
    table.add_row("Explicit", "yes" if podcast.is_explicit else "no")
    table.add_row("Website", podcast.website_url or "-")
    table.add_row("Cover", podcast.cover_image_url or "-")

    console.print(table)


def display_import(result: FeedImport, console: Console) -> None:
    """Display an import result: podcast metadata, then the episode list."""
    display_podcast(result.podcast, console)

    if not result.episodes:
        console.print("[yellow]No episodes with audio found.[/yellow]")
    else:
        table = Table(title="Episodes")
        table.add_column("#", style="dim", width=4)
        table.add_column("Title", style="bold")
        table.add_column("S/E", style="dim")
        table.add_column("Published", style="green")
        table.add_column("Duration", style="cyan")
        table.add_column("Size", style="dim")

        for i, episode in enumerate(result.episodes, 1):
            table.add_row(
                str(i),
                episode.title or "-",
                _format_season_episode(episode.season_number, episode.episode_number),
                episode.publish_date or "-",
                format_duration(episode.duration_seconds) if episode.duration_seconds else "-",
                format_bytes(episode.file_size_bytes) if episode.file_size_bytes else "-",
            )

        console.print(table)

    console.print(
        f"Imported {result.items_imported} of {result.items_seen} items"
        + (f" ({result.items_skipped} without audio)" if result.items_skipped else "")
    )


def _format_season_episode(season: int | None, episode: int | None) -> str:
    """Format season/episode numbers as ``S1E2``, ``E2`` or ``-``."""
    if season is None and episode is None:
        return "-"
    parts = []
    if season is not None:
        parts.append(f"S{season}")
    if episode is not None:
        parts.append(f"E{episode}")
    return "".join(parts)
