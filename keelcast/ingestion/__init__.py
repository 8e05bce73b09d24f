"""Feed ingestion pipeline."""

from keelcast.ingestion.audio import extract_audio_url, select_audio_url, verify_audio_url
from keelcast.ingestion.fetcher import check_feed_markers, fetch_feed, validate_feed_url
from keelcast.ingestion.metadata import extract_feed_metadata, extract_image_url
from keelcast.ingestion.normalizer import build_episode, parse_duration, parse_published_at
from keelcast.ingestion.orchestrator import ingest_feed, process_item
from keelcast.ingestion.parser import parse_feed, parse_feed_document
from keelcast.ingestion.validator import validate_document, validate_item

__all__ = [
    "validate_feed_url",
    "check_feed_markers",
    "fetch_feed",
    "parse_feed",
    "parse_feed_document",
    "validate_document",
    "validate_item",
    "select_audio_url",
    "extract_audio_url",
    "verify_audio_url",
    "parse_duration",
    "parse_published_at",
    "build_episode",
    "extract_image_url",
    "extract_feed_metadata",
    "process_item",
    "ingest_feed",
]
