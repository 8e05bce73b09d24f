"""Application-wide constants.

Contains values shared by the ingestion pipeline, pagination and caching so
that limits and header strings stay consistent across modules.
"""

# Feed Fetching
USER_AGENT = "KeelCast/1.0 (Podcast RSS Reader)"
ACCEPT_HEADER = "application/rss+xml, application/xml, text/xml, */*"
MAX_FEED_URL_LENGTH = 2000  # Characters
FETCH_TIMEOUT_SECONDS = 10  # Hard bound for fetch + pre-validation
PARSE_TIMEOUT_SECONDS = 30  # Hard bound for feed parsing

# Audio Verification (HEAD request, disabled by default)
AUDIO_CHECK_USER_AGENT = "Mozilla/5.0 (compatible; KeelCast/1.0; +https://keelcast.com)"
AUDIO_CHECK_ACCEPT = "audio/*,*/*;q=0.1"
AUDIO_CHECK_TIMEOUT_SECONDS = 10

# Audio URL Heuristics
MP3_MARKERS = (".mp3", "audio/mpeg", "audio/mp3")
AUDIO_MARKERS = (
    ".mp3",
    ".m4a",
    ".wav",
    ".ogg",
    ".aac",
    "audio/mpeg",
    "audio/mp3",
    "audio/mp4",
    "audio/wav",
    "audio/ogg",
    "audio/aac",
)
ENCLOSURE_URL_KEYS = ("url", "href", "link", "src")

# RFC-822 zone names (RFC 822 section 5.1) as UTC offsets in seconds
RFC822_TIMEZONES = {
    "UT": 0,
    "GMT": 0,
    "Z": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}

# Pagination
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Popular Podcasts Cache
POPULAR_PODCASTS_TTL_HOURS = 6

# Logging
MAX_SKIP_REASONS_DISPLAY = 5  # Maximum number of skipped items to print in summaries
