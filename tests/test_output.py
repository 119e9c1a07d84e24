"""Tests for terminal output."""

import io

from rich.console import Console

from podfeed.core.models import FeedImport, PodcastMetadata
from podfeed.output import _format_season_episode, display_import


def render(result: FeedImport) -> str:
    console = Console(file=io.StringIO(), width=160, color_system=None)
    display_import(result, console)
    return console.file.getvalue()


class TestDisplayImport:
    def test_shows_podcast_and_episodes(self, sample_import: FeedImport):
        """Podcast fields and episode rows appear in the output."""
        output = render(sample_import)

        assert "Test Podcast" in output
        assert "owner@example.com" in output
        assert "Episode 1" in output
        assert "S2E1" in output
        assert "1:02:03" in output

    def test_summary_mentions_skipped_items(self, sample_import: FeedImport):
        """The summary line counts items without audio."""
        assert "Imported 1 of 2 items (1 without audio)" in render(sample_import)

    def test_no_episodes(self):
        """An import without episodes says so."""
        output = render(FeedImport(podcast=PodcastMetadata(title="Quiet"), items_seen=1))

        assert "No episodes with audio found." in output
        assert "Imported 0 of 1 items" in output


class TestFormatSeasonEpisode:
    def test_shapes(self):
        assert _format_season_episode(1, 2) == "S1E2"
        assert _format_season_episode(None, 0) == "E0"
        assert _format_season_episode(3, None) == "S3"
        assert _format_season_episode(None, None) == "-"
