"""订阅源与正文抓取模块."""

from vocaagent.fetcher.extractor import BodyExtractor
from vocaagent.fetcher.feed import FeedFetcher

__all__ = [
    "BodyExtractor",
    "FeedFetcher",
]
