"""Input adapters that normalize the raw hero feed."""

from .feed import (
    DEFAULT_FEED_URL,
    FeedSnapshot,
    HeroRecord,
    IngestReport,
    fetch_feed,
    load_feed_csv,
    parse_feed,
)

__all__ = [
    "DEFAULT_FEED_URL",
    "FeedSnapshot",
    "HeroRecord",
    "IngestReport",
    "fetch_feed",
    "load_feed_csv",
    "parse_feed",
]
