"""
URL Frontier implementation for managing URLs to crawl.
Implements deduplication, domain filtering and page limits over a FIFO queue.
"""

import logging
from collections import deque
from typing import Deque, Iterable, List, NamedTuple, Optional, Set


DEFAULT_PORTS = (':80', ':443')


class FrontierStats(NamedTuple):
    """Snapshot of frontier counters."""
    total_seen: int
    queued: int
    processed: int


def normalize_url(url: str) -> str:
    """
    Normalize a URL into the canonical form used for deduplication.

    - Converts to lowercase
    - Removes the fragment
    - Removes default ports (80, 443)
    - Removes trailing slashes (the bare root becomes ``scheme://host``)

    Applying it twice gives the same result as applying it once.
    """
    url = url.strip().lower()
    url = url.split('#', 1)[0].strip()

    scheme, separator, rest = url.partition('://')
    if not separator:
        return url

    slash = rest.find('/')
    if slash == -1:
        host, path = rest, ''
    else:
        host, path = rest[:slash], rest[slash:]

    host = host.rstrip()
    while host.endswith(DEFAULT_PORTS):
        host = host.rsplit(':', 1)[0].rstrip()

    trimmed = path.rstrip('/').rstrip()
    while trimmed != path:
        path = trimmed
        trimmed = path.rstrip('/').rstrip()

    return f"{scheme}://{host}{path}"


def extract_domain(url: str) -> Optional[str]:
    """Extract the host from a URL, without scheme, path or port."""
    _, separator, rest = url.partition('://')
    if not separator:
        rest = url

    host = rest.split('/', 1)[0].split(':', 1)[0]
    return host or None


class URLFrontier:
    """
    Manages URLs to be crawled for a single crawl.

    Every URL is canonicalized before it is admitted. A URL is admitted at
    most once over the lifetime of the frontier, whether it is still queued
    or already handed out, and queued URLs come back in discovery order.

    The page cap counts admitted URLs: ``add_url`` refuses new URLs once
    ``max_pages`` have been admitted. ``get_next_url`` additionally stops
    once ``max_pages`` URLs have been handed out, which the admission cap
    already guarantees.
    """

    def __init__(self, seed_url: str, max_pages: Optional[int] = None,
                 allowed_domains: Optional[Iterable[str]] = None):
        self.max_pages = max_pages
        self.allowed_domains: Optional[Set[str]] = None
        if allowed_domains:
            self.allowed_domains = {
                domain.strip().lower().split(':', 1)[0] for domain in allowed_domains
            }
        self.logger = logging.getLogger(__name__)

        self.queue: Deque[str] = deque()
        self.seen: Set[str] = set()

        # The seed is always the first admission, whatever the filters say
        self.seed_url = normalize_url(seed_url)
        self._admit(self.seed_url)

    def _admit(self, url: str):
        self.queue.append(url)
        self.seen.add(url)

    def add_url(self, url: str) -> bool:
        """
        Add a URL to the frontier.

        Checks run in this order: already seen, allowed domains, page cap.

        Returns:
            True if the URL was admitted, False if it was rejected
        """
        normalized = normalize_url(url)

        if normalized in self.seen:
            return False

        if self.allowed_domains is not None:
            domain = extract_domain(normalized)
            if domain not in self.allowed_domains:
                self.logger.debug(f"Rejected URL outside allowed domains: {normalized}")
                return False

        if self.max_pages is not None and len(self.seen) >= self.max_pages:
            self.logger.debug(f"Rejected URL, page limit {self.max_pages} reached: {normalized}")
            return False

        self._admit(normalized)
        self.logger.debug(f"Added URL to frontier: {normalized}")
        return True

    def add_urls(self, urls: Iterable[str]) -> int:
        """Add multiple URLs to the frontier. Returns count of added URLs."""
        added_count = 0
        for url in urls:
            if self.add_url(url):
                added_count += 1
        return added_count

    def get_next_url(self) -> Optional[str]:
        """
        Get the next URL to crawl, in first-discovered-first-visited order.
        Returns None if the queue is empty or the page limit has been reached.
        """
        if self.max_pages is not None:
            processed = len(self.seen) - len(self.queue)
            if processed >= self.max_pages:
                return None

        if not self.queue:
            return None

        url = self.queue.popleft()
        self.logger.debug(f"Retrieved URL from frontier: {url}")
        return url

    def has_pending(self) -> bool:
        """Check if URLs are waiting in the queue."""
        return bool(self.queue)

    def is_seen(self, url: str) -> bool:
        """Check if a URL was ever admitted (queued or already processed)."""
        return normalize_url(url) in self.seen

    @property
    def seen_count(self) -> int:
        return len(self.seen)

    @property
    def queue_size(self) -> int:
        return len(self.queue)

    def pending_urls(self) -> List[str]:
        """Return a copy of the queue, front first."""
        return list(self.queue)

    def get_stats(self) -> FrontierStats:
        """Get frontier statistics."""
        total_seen = len(self.seen)
        queued = len(self.queue)
        return FrontierStats(total_seen=total_seen, queued=queued, processed=total_seen - queued)
