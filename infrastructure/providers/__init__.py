from .base import FeedFetcher
from .cnb import CNBFeedFetcher
from .feed_parser import parse_feed

__all__ = ['FeedFetcher', 'CNBFeedFetcher', 'parse_feed']
