"""
Crawler scheduler that drives the crawl loop: fetch, extract links, enqueue, record.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .fetcher import FetchError, FetchResult, WebFetcher
from .link_resolver import find_links
from .parser import extract_metadata, html_to_markdown
from .url_frontier import URLFrontier
from ..storage.document import PageDocument
from ..storage.exporter import DocumentExporter, ExportError, JSONLExporter
from ..utils.config import Config
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlerMonitor


class CrawlState(Enum):
    """States of the crawl loop."""
    IDLE = "idle"
    FETCHING = "fetching"
    LINKING = "linking"
    RECORDING = "recording"
    DONE = "done"


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    pages_crawled: int = 0
    pages_failed: int = 0
    export_errors: int = 0
    links_discovered: int = 0
    urls_admitted: int = 0
    total_fetch_time: float = 0.0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    @property
    def pages_per_minute(self) -> float:
        elapsed_minutes = self.elapsed_time / 60
        return self.pages_crawled / elapsed_minutes if elapsed_minutes > 0 else 0

    @property
    def average_fetch_time(self) -> float:
        return self.total_fetch_time / self.pages_crawled if self.pages_crawled else 0.0


@dataclass
class CrawlResult:
    """Final outcome of a crawl."""
    pages_crawled: int
    pages_failed: int
    urls_discovered: int
    documents: List[PageDocument] = field(default_factory=list)


class CrawlerScheduler:
    """
    Runs a breadth-first crawl from the configured seed URL.

    One URL is in flight at a time. Each iteration takes the next URL from
    the frontier, fetches it, feeds the links found on the page back into
    the frontier and exports a document for the page. A failed fetch is
    counted and skipped; it is never retried.
    """

    def __init__(self, config: Config, fetcher=None,
                 exporter: Optional[DocumentExporter] = None,
                 monitor: Optional[CrawlerMonitor] = None):
        # Configuration errors must surface before anything is fetched
        config.validate()

        self.config = config
        self.logger = get_crawler_logger(__name__, seed_url=config.crawler.seed_url)

        self.frontier = URLFrontier(
            config.crawler.seed_url,
            max_pages=config.crawler.max_pages,
            allowed_domains=config.crawler.allowed_domains or None
        )

        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or WebFetcher(
            user_agent=config.crawler.user_agent,
            request_timeout=config.crawler.request_timeout,
            max_content_size=config.crawler.max_content_size
        )
        self.exporter = exporter or JSONLExporter(config.output.directory, config.output.filename)
        self.monitor = monitor

        self.state = CrawlState.IDLE
        self.stats = CrawlStats(start_time=time.time())
        self.documents: List[PageDocument] = []
        self.is_running = False

    async def run(self) -> CrawlResult:
        """
        Crawl until the frontier is exhausted, the page limit is hit or
        stop() is called.
        """
        self.is_running = True
        self.stats.start_time = time.time()
        self.logger.info(f"Starting crawl from {self.frontier.seed_url}")

        stats_task = asyncio.create_task(self._stats_reporter())
        try:
            if self._owns_fetcher:
                await self.fetcher.start()

            while self.is_running and await self.step():
                pass

            if self.state is not CrawlState.DONE:
                self.logger.info("Crawl stopped before the frontier was exhausted")
        finally:
            self.is_running = False
            stats_task.cancel()
            try:
                await stats_task
            except asyncio.CancelledError:
                pass
            if self._owns_fetcher:
                await self.fetcher.close()

        self._log_final_stats()
        return self.result()

    async def step(self) -> bool:
        """
        Run one iteration of the crawl loop.

        Returns:
            False once the frontier has nothing more to hand out, True otherwise
        """
        url = self.frontier.get_next_url()
        if url is None:
            self.state = CrawlState.DONE
            return False

        self.state = CrawlState.FETCHING
        fetched = await self._fetch(url)
        if fetched is None:
            self.stats.pages_failed += 1
            self._finish_step()
            return True
        content, fetch_result = fetched

        self.state = CrawlState.LINKING
        links = self._queue_new_urls(url, content)

        self.state = CrawlState.RECORDING
        document = self._build_document(url, content, links, fetch_result)
        await self._export(document)

        self.documents.append(document)
        self.stats.pages_crawled += 1
        self.stats.total_fetch_time += fetch_result.fetch_time
        if self.monitor:
            self.monitor.record_page_crawled(url, fetch_result.fetch_time)

        self._finish_step()
        return True

    def _finish_step(self):
        if self.monitor:
            self.monitor.update_queue_size(self.frontier.queue_size)
        self.state = CrawlState.IDLE

    def stop(self):
        """Ask the crawl loop to stop after the current page."""
        self.logger.info("Stopping crawler...")
        self.is_running = False

    async def _fetch(self, url: str) -> Optional[Tuple[str, FetchResult]]:
        """Fetch a URL; returns None when the page is unusable."""
        try:
            fetch_result = await self.fetcher.fetch(url)
            fetch_result.raise_for_error()
        except FetchError as e:
            self.logger.log_url_event(logging.WARNING, url, f"Failed to fetch {url}: {e.reason}")
            if self.monitor:
                self.monitor.record_page_failed(url, e.reason)
            return None

        return fetch_result.content, fetch_result

    def _queue_new_urls(self, url: str, content: str) -> List[str]:
        """Queue the links found on a page. Returns the links in page order."""
        links = find_links(content, url)
        added_count = self.frontier.add_urls(links)

        self.stats.links_discovered += len(links)
        self.stats.urls_admitted += added_count
        if self.monitor:
            self.monitor.record_links(len(links), added_count)

        self.logger.debug(f"Found {len(links)} links on {url}, queued {added_count} new URLs")
        return links

    def _build_document(self, url: str, content: str, links: List[str],
                        fetch_result: FetchResult) -> PageDocument:
        metadata = extract_metadata(content)

        extra: Dict[str, str] = dict(metadata.other)
        if metadata.keywords is not None:
            extra['keywords'] = metadata.keywords
        if metadata.author is not None:
            extra['author'] = metadata.author
        if fetch_result.status_code:
            extra['status_code'] = str(fetch_result.status_code)
        if fetch_result.content_type:
            extra['content_type'] = fetch_result.content_type

        return PageDocument(
            url=url,
            content=html_to_markdown(content),
            links=list(links),
            title=metadata.title or "",
            description=metadata.description,
            raw_html=content if self.config.crawler.include_raw_html else None,
            metadata=extra
        )

    async def _export(self, document: PageDocument):
        """Hand a document to the exporter. Export failures do not stop the crawl."""
        try:
            await self.exporter.export_document(document)
        except ExportError as e:
            self.stats.export_errors += 1
            self.logger.warning(f"Failed to export {document.url}: {e}")
            if self.monitor:
                self.monitor.record_export_error(document.url)

    async def _stats_reporter(self):
        """Periodically log crawl statistics."""
        while self.is_running:
            await asyncio.sleep(self.config.monitoring.stats_interval)
            self._log_current_stats()

    def _log_current_stats(self):
        """Log current crawl statistics."""
        frontier_stats = self.frontier.get_stats()
        self.logger.info(
            f"Crawl Progress: "
            f"Crawled={self.stats.pages_crawled}, "
            f"Failed={self.stats.pages_failed}, "
            f"Queued={frontier_stats.queued}, "
            f"Seen={frontier_stats.total_seen}, "
            f"Rate={self.stats.pages_per_minute:.1f} pages/min"
        )

    def _log_final_stats(self):
        """Log final crawl statistics."""
        frontier_stats = self.frontier.get_stats()

        self.logger.info("=== CRAWL COMPLETED ===")
        final_stats = (
            ('pages_crawled', self.stats.pages_crawled),
            ('pages_failed', self.stats.pages_failed),
            ('urls_discovered', frontier_stats.total_seen),
            ('urls_in_queue', frontier_stats.queued),
            ('export_errors', self.stats.export_errors),
            ('elapsed_seconds', round(self.stats.elapsed_time, 2)),
            ('average_fetch_seconds', round(self.stats.average_fetch_time, 2)),
        )
        for stat_name, value in final_stats:
            self.logger.log_crawler_stat(stat_name, value)

    def result(self) -> CrawlResult:
        """Statistics and documents for the crawl so far."""
        return CrawlResult(
            pages_crawled=self.stats.pages_crawled,
            pages_failed=self.stats.pages_failed,
            urls_discovered=self.frontier.seen_count,
            documents=list(self.documents)
        )

    def get_stats(self) -> Dict:
        """Get current crawl statistics."""
        frontier_stats = self.frontier.get_stats()
        return {
            'state': self.state.value,
            'pages_crawled': self.stats.pages_crawled,
            'pages_failed': self.stats.pages_failed,
            'export_errors': self.stats.export_errors,
            'links_discovered': self.stats.links_discovered,
            'urls_discovered': frontier_stats.total_seen,
            'urls_in_queue': frontier_stats.queued,
            'elapsed_time': self.stats.elapsed_time,
            'pages_per_minute': self.stats.pages_per_minute,
            'is_running': self.is_running
        }
