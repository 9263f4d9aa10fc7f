"""
Web crawler core components.
"""

from .url_frontier import URLFrontier, FrontierStats, normalize_url, extract_domain
from .link_resolver import extract_links, find_links, resolve_url, is_valid_link
from .fetcher import WebFetcher, FetchResult, FetchError
from .parser import PageMetadata, extract_metadata, html_to_markdown
from .scheduler import CrawlerScheduler, CrawlResult, CrawlState, CrawlStats

__all__ = [
    'URLFrontier', 'FrontierStats', 'normalize_url', 'extract_domain',
    'extract_links', 'find_links', 'resolve_url', 'is_valid_link',
    'WebFetcher', 'FetchResult', 'FetchError',
    'PageMetadata', 'extract_metadata', 'html_to_markdown',
    'CrawlerScheduler', 'CrawlResult', 'CrawlState', 'CrawlStats'
]
