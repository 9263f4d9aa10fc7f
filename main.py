#!/usr/bin/env python3
"""
Main entry point for the web crawler system.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from webcrawler import __version__
from webcrawler.crawler.scheduler import CrawlerScheduler, CrawlResult
from webcrawler.utils.config import Config, load_config
from webcrawler.utils.logger import log_system_info, setup_logging
from webcrawler.utils.monitoring import initialize_monitoring


class CrawlerApp:
    """Main application class for the web crawler."""

    def __init__(self):
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger(__name__)

    def setup_signal_handlers(self):
        """Stop the crawl gracefully on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()

        def signal_handler(signum):
            self.logger.info(f"Received signal {signum}, initiating shutdown...")
            if self.scheduler:
                self.scheduler.stop()

        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, signal_handler, signum)
            except NotImplementedError:
                # Windows event loops have no signal handler support
                pass

    async def run(self, config: Config) -> int:
        """Run the web crawler."""
        setup_logging(config.logging)
        log_system_info()

        self.logger.info("=== WEB CRAWLER STARTING ===")
        self.logger.info(f"Seed URL: {config.crawler.seed_url}")
        self.logger.info(f"Max pages: {config.crawler.max_pages or 'unlimited'}")
        self.logger.info(f"Allowed domains: {', '.join(config.crawler.allowed_domains) or 'any'}")
        self.logger.info(f"Output: {Path(config.output.directory) / config.output.filename}")

        try:
            monitor = initialize_monitoring(
                config.monitoring.metrics_enabled,
                config.monitoring.prometheus_port
            )
            self.scheduler = CrawlerScheduler(config, monitor=monitor)
            self.setup_signal_handlers()

            result = await self.scheduler.run()
            self.print_summary(result)

        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1

        finally:
            self.logger.info("=== WEB CRAWLER FINISHED ===")

        return 0

    @staticmethod
    def print_summary(result: CrawlResult):
        """Print crawl summary to stderr."""
        sys.stderr.write("=" * 50 + "\n")
        sys.stderr.write("CRAWL SUMMARY\n")
        sys.stderr.write("=" * 50 + "\n")
        sys.stderr.write(f"Pages crawled:    {result.pages_crawled}\n")
        sys.stderr.write(f"Pages failed:     {result.pages_failed}\n")
        sys.stderr.write(f"URLs discovered:  {result.urls_discovered}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Breadth-first web crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py https://example.com                       # Crawl with defaults
  python main.py https://example.com --max-pages 50        # Stop after 50 pages
  python main.py https://example.com --domain example.com  # Stay on one host
  python main.py --config config.yaml                      # Seed and options from YAML
        """
    )

    parser.add_argument(
        'seed_url',
        nargs='?',
        help='URL to start crawling from (overrides crawler.seed_url in the config file)'
    )

    parser.add_argument(
        '--config',
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--max-pages',
        type=int,
        help='Maximum number of pages to crawl'
    )

    parser.add_argument(
        '--domain',
        action='append',
        dest='domains',
        metavar='DOMAIN',
        help='Restrict the crawl to this host (repeatable)'
    )

    parser.add_argument(
        '--output-dir',
        help='Directory for exported documents'
    )

    parser.add_argument(
        '--output-file',
        help='File name for exported documents (JSON Lines)'
    )

    parser.add_argument(
        '--include-raw-html',
        action='store_true',
        help='Store the raw HTML of each page in its document'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as JSON'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Web Crawler System {__version__}'
    )

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else Config()

    crawler_changes = {}
    if args.seed_url:
        crawler_changes['seed_url'] = args.seed_url
    if args.max_pages is not None:
        crawler_changes['max_pages'] = args.max_pages
    if args.domains:
        crawler_changes['allowed_domains'] = tuple(args.domains)
    if args.include_raw_html:
        crawler_changes['include_raw_html'] = True
    if crawler_changes:
        config = config.with_crawler(**crawler_changes)

    output_changes = {}
    if args.output_dir:
        output_changes['directory'] = args.output_dir
    if args.output_file:
        output_changes['filename'] = args.output_file
    if output_changes:
        config = config.with_output(**output_changes)

    logging_changes = {}
    if args.log_level:
        logging_changes['level'] = args.log_level
    if args.json_logs:
        logging_changes['json'] = True
    if logging_changes:
        config = config.with_logging(**logging_changes)

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    app = CrawlerApp()
    try:
        return asyncio.run(app.run(config))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
