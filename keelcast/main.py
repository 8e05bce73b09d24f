#!/usr/bin/env python3
"""Command line entry point for KeelCast feed ingestion.

Usage:
    python -m keelcast.main ingest https://example.com/feed.xml
    python -m keelcast.main ingest https://example.com/feed.xml --json
    python -m keelcast.main decode-cursor eyJwQXQiOjE3MDQwNjcyMDAwMDAsImlkIjoiZXBfMSJ9
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from loguru import logger

from keelcast.constants import MAX_SKIP_REASONS_DISPLAY
from keelcast.errors import FeedError
from keelcast.ingestion.orchestrator import ingest_feed
from keelcast.models.episodes import IngestionResult
from keelcast.pagination import decode_cursor
from keelcast.utils.config_loader import load_app_config
from keelcast.utils.logging import setup_logging

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="KeelCast podcast feed tools")


def print_header(title: str) -> None:
    """Print a formatted header."""
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80 + "\n")


def print_stats(label: str, value: Any) -> None:
    """Print a formatted stat line."""
    print(f"  • {label}: {value}")


def print_summary(result: IngestionResult, elapsed_time: float) -> None:
    """Print an ingestion summary."""
    print_header("📻 Ingestion Summary")

    metadata = result.metadata
    print("Podcast:")
    print_stats("Title", metadata.title or "-")
    print_stats("Author", metadata.author or "-")
    print_stats("Image", metadata.image_url or "-")
    if metadata.categories:
        print_stats("Categories", ", ".join(metadata.categories))

    print("\nEpisodes:")
    print_stats("Items in feed", result.items_total)
    print_stats("Episodes accepted", len(result.episodes))
    print_stats("Items skipped", len(result.skipped))
    if result.duplicates_dropped > 0:
        print_stats("Duplicate links dropped", result.duplicates_dropped)

    for kind, count in result.skipped_by_kind.items():
        print_stats(f"Skipped ({kind.value})", count)

    if result.skipped:
        print("\n⚠️  Skipped items:")
        for outcome in result.skipped[:MAX_SKIP_REASONS_DISPLAY]:
            print(f"  • #{outcome.index} {outcome.title or '(untitled)'}: {outcome.reason}")

    if result.episodes:
        print("\n🎧 Latest episodes:")
        for episode in result.episodes[:5]:
            duration = (
                f"{episode.duration_seconds // 60} min"
                if episode.duration_seconds is not None
                else "unknown"
            )
            print(f"  • {episode.published_at:%Y-%m-%d} {episode.title} ({duration})")
            print(f"    {episode.audio_url}")

    print("\n" + "=" * 80)
    print(f"⏱️  Total execution time: {elapsed_time:.2f}s")
    print("=" * 80)


@app.command()
def ingest(
    feed_url: Annotated[str, typer.Argument(help="RSS/Atom feed URL")],
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            envvar="KEELCAST_CONFIG",
            help="Path to configuration file",
        ),
    ] = None,
    podcast_id: Annotated[
        str,
        typer.Option("--podcast-id", help="Podcast identifier to stamp on episodes"),
    ] = "",
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the ingestion result as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """
    Ingest a podcast feed and print the normalized episodes.
    """
    config = load_app_config(config_file)

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    setup_logging(logging_config)

    start_time = datetime.now()

    try:
        result = asyncio.run(ingest_feed(feed_url, config.ingestion, podcast_id=podcast_id))

    except FeedError as e:
        logger.error(f"Ingestion failed [{e.kind.value}]: {e.message}")
        print(f"\n❌ {e.message}")
        raise typer.Exit(code=1) from e

    except KeyboardInterrupt as e:
        print("\n\n⚠️  Ingestion interrupted by user")
        logger.warning("Ingestion interrupted by user")
        raise typer.Exit(code=130) from e  # Standard exit code for SIGINT

    if as_json:
        print(result.model_dump_json(indent=2))
        return

    elapsed = (datetime.now() - start_time).total_seconds()
    print_summary(result, elapsed)


@app.command("decode-cursor")
def decode_cursor_command(
    cursor: Annotated[str, typer.Argument(help="Opaque pagination cursor")],
) -> None:
    """
    Decode a pagination cursor into its (publishedAt, id) pair.
    """
    decoded = decode_cursor(cursor)
    if decoded is None:
        print("❌ Invalid cursor")
        raise typer.Exit(code=1)

    print_stats("Published at", decoded.published_at.isoformat())
    print_stats("Episode ID", decoded.id)


if __name__ == "__main__":
    app()
