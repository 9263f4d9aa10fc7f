"""
Web Crawler System

A breadth-first web crawler that turns every reachable page into a JSON document.
"""

__version__ = "1.0.0"
__description__ = "A breadth-first web crawler that exports crawled pages as JSON Lines"
