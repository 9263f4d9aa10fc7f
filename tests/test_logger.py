import json
import logging

from webcrawler.utils.logger import JSONFormatter, PerformanceFilter, get_crawler_logger


def test_crawler_stat_reaches_json_output(caplog):
    logger = get_crawler_logger("webcrawler.tests", seed_url="http://example.com")

    with caplog.at_level(logging.INFO, logger="webcrawler.tests"):
        logger.log_crawler_stat("pages_crawled", 3)

    entry = json.loads(JSONFormatter().format(caplog.records[-1]))
    assert entry["message"] == "Stat: pages_crawled = 3"
    assert entry["stat_name"] == "pages_crawled"
    assert entry["stat_value"] == 3
    assert entry["event_type"] == "crawler_stat"
    assert entry["seed_url"] == "http://example.com"


def test_url_event_carries_url(caplog):
    logger = get_crawler_logger("webcrawler.tests")

    with caplog.at_level(logging.WARNING, logger="webcrawler.tests"):
        logger.log_url_event(logging.WARNING, "http://example.com/a", "Failed to fetch")

    entry = json.loads(JSONFormatter().format(caplog.records[-1]))
    assert entry["url"] == "http://example.com/a"
    assert entry["level"] == "WARNING"


def test_performance_filter_mutes_access_log():
    noisy = logging.LogRecord("aiohttp.access", logging.INFO, __file__, 1, "GET /", None, None)
    ours = logging.LogRecord("webcrawler.crawler", logging.INFO, __file__, 1, "crawled", None, None)
    assert not PerformanceFilter().filter(noisy)
    assert PerformanceFilter().filter(ours)
