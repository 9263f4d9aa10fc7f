from webcrawler.utils.monitoring import CrawlerMonitor, MetricsCollector, MAX_POINTS


def test_counter_accumulates():
    collector = MetricsCollector()
    collector.increment_counter("pages_crawled_total")
    collector.increment_counter("pages_crawled_total", 2)

    metric = collector.get_metric("pages_crawled_total")
    assert metric.current_value == 3
    assert metric.metric_type == "counter"
    assert len(metric.points) == 2


def test_gauge_keeps_latest_value():
    collector = MetricsCollector()
    collector.set_gauge("queue_size", 10)
    collector.set_gauge("queue_size", 4)
    assert collector.get_current_values() == {"queue_size": 4}


def test_history_is_bounded():
    collector = MetricsCollector()
    for i in range(MAX_POINTS + 5):
        collector.observe_histogram("fetch_time_seconds", i)
    assert len(collector.get_metric("fetch_time_seconds").points) == MAX_POINTS


def test_prometheus_mirror():
    collector = MetricsCollector(enable_prometheus=True)
    monitor = CrawlerMonitor(collector)

    monitor.record_page_crawled("http://a.com", 0.25)
    monitor.record_links(discovered=3, admitted=2)
    monitor.update_queue_size(7)

    registry = collector.prometheus_registry
    assert registry.get_sample_value("crawler_pages_crawled_total") == 1
    assert registry.get_sample_value("crawler_links_discovered_total") == 3
    assert registry.get_sample_value("crawler_links_admitted_total") == 2
    assert registry.get_sample_value("crawler_queue_size") == 7
    assert registry.get_sample_value("crawler_fetch_time_seconds_count") == 1


def test_summary():
    monitor = CrawlerMonitor()
    monitor.record_page_failed("http://a.com", "HTTP 500")
    monitor.record_export_error("http://b.com")

    summary = monitor.get_summary()
    assert summary["metrics"]["pages_failed_total"] == 1
    assert summary["metrics"]["export_errors_total"] == 1
    assert summary["runtime_seconds"] >= 0
