"""Shared pytest fixtures and configuration."""

import copy
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import pytest

from keelcast.models.config import IngestionConfig
from keelcast.models.episodes import EpisodeInsert
from keelcast.models.feed import ValidatedItem

DEFAULT_CHANNEL = """
    <title>Test Podcast</title>
    <link>https://podcast.example.com</link>
    <description>A podcast about testing things</description>
    <itunes:author>Jane Host</itunes:author>
    <itunes:image href="https://podcast.example.com/itunes.png"/>
    <image>
      <url>https://podcast.example.com/standard.png</url>
      <title>Test Podcast</title>
      <link>https://podcast.example.com</link>
    </image>
    <category>Technology</category>"""


def _item_xml(
    title: str | None,
    link: str,
    enclosure: str = "",
    description: str | None = "Episode description",
    pub_date: str | None = "Mon, 15 Jan 2024 10:30:00 GMT",
    extra: str = "",
) -> str:
    parts = ["    <item>"]
    if title is not None:
        parts.append(f"      <title>{title}</title>")
    parts.append(f"      <link>{link}</link>")
    if description is not None:
        parts.append(f"      <description>{description}</description>")
    if pub_date is not None:
        parts.append(f"      <pubDate>{pub_date}</pubDate>")
    if enclosure:
        parts.append(f"      {enclosure}")
    if extra:
        parts.append(f"      {extra}")
    parts.append("    </item>")
    return "\n".join(parts)


def _feed_xml(items: list[str], channel: str = DEFAULT_CHANNEL) -> str:
    body = "\n".join(items)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>{channel}
{body}
  </channel>
</rss>"""


@pytest.fixture
def make_item() -> Callable[..., str]:
    """Build the XML of one RSS item."""
    return _item_xml


@pytest.fixture
def make_feed() -> Callable[..., str]:
    """Build an RSS 2.0 document from item XML snippets."""
    return _feed_xml


@pytest.fixture
def sample_rss_content() -> str:
    """Feed with an MP3 episode, a non-audio episode and a Media RSS episode."""
    return _feed_xml(
        [
            _item_xml(
                "Episode 1: Pilot",
                "https://podcast.example.com/episodes/1",
                enclosure=(
                    '<enclosure url="https://cdn.example.com/ep1.mp3" '
                    'length="1234" type="audio/mpeg"/>'
                ),
                extra="<itunes:duration>01:02:03</itunes:duration>",
            ),
            _item_xml(
                "Episode 2: Show notes only",
                "https://podcast.example.com/episodes/2",
                enclosure='<enclosure url="https://podcast.example.com/notes.html" length="0"/>',
            ),
            _item_xml(
                "Episode 3: Media RSS",
                "https://podcast.example.com/episodes/3",
                pub_date="not a date",
                extra=(
                    '<media:content url="https://cdn.example.com/ep3.m4a" type="audio/x-m4a"/>'
                    "<itunes:duration>2730</itunes:duration>"
                ),
            ),
        ]
    )


@pytest.fixture
def sample_atom_content() -> str:
    """Atom 1.0 feed with one audio enclosure link."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
    <title>Atom Podcast</title>
    <link rel="alternate" href="https://atom.example.com"/>
    <id>urn:uuid:atom-podcast</id>
    <updated>2024-01-15T10:30:00Z</updated>
    <entry>
        <title>Atom Episode</title>
        <id>urn:uuid:atom-episode-1</id>
        <link rel="alternate" href="https://atom.example.com/episodes/1"/>
        <link rel="enclosure" href="https://cdn.example.com/atom1.mp3" type="audio/mpeg" length="100"/>
        <summary>Atom episode summary</summary>
        <published>2024-01-15T10:30:00Z</published>
        <updated>2024-01-15T10:30:00Z</updated>
    </entry>
</feed>"""


@pytest.fixture
def ingestion_config() -> IngestionConfig:
    """Default ingestion configuration."""
    return IngestionConfig()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def sample_item() -> ValidatedItem:
    """A validated item with an MP3 enclosure."""
    return ValidatedItem.model_validate(
        {
            "title": "Sample Episode",
            "link": "https://podcast.example.com/episodes/sample",
            "contentSnippet": "Sample snippet",
            "content": "<p>Sample snippet</p>",
            "pubDate": "Mon, 15 Jan 2024 10:30:00 GMT",
            "itunes:duration": "45:30",
            "enclosure": {"url": "https://cdn.example.com/sample.mp3", "type": "audio/mpeg"},
        }
    )


@pytest.fixture
def sample_episode() -> EpisodeInsert:
    return EpisodeInsert(
        title="Sample Episode",
        description="Sample snippet",
        url="https://podcast.example.com/episodes/sample",
        audio_url="https://cdn.example.com/sample.mp3",
        published_at=datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
        duration_seconds=2730,
    )


class InMemoryPodcastStore:
    """Storage double that commits on success and rolls back on error."""

    def __init__(self) -> None:
        self.podcasts: dict[str, dict[str, str]] = {}
        self.episodes: list[EpisodeInsert] = []
        self.subscriptions: set[tuple[str, str]] = set()
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self) -> Iterator["InMemoryPodcastStore"]:
        snapshot = (copy.deepcopy(self.podcasts), list(self.episodes), set(self.subscriptions))
        try:
            yield self
        except Exception:
            self.podcasts, self.episodes, self.subscriptions = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1

    def update_podcast(self, podcast_id: str, fields: dict[str, str]) -> None:
        self.podcasts.setdefault(podcast_id, {}).update(fields)

    def episode_exists(self, podcast_id: str, url: str) -> bool:
        return any(ep.podcast_id == podcast_id and ep.url == url for ep in self.episodes)

    def insert_episodes(self, episodes: list[EpisodeInsert]) -> None:
        self.episodes.extend(episodes)

    def subscribe(self, podcast_id: str, subscriber_id: str) -> None:
        self.subscriptions.add((podcast_id, subscriber_id))


@pytest.fixture
def memory_store() -> InMemoryPodcastStore:
    return InMemoryPodcastStore()
