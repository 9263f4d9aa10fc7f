"""
Monitoring and metrics collection for the web crawler system.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server


MAX_POINTS = 1000


@dataclass
class MetricPoint:
    """Individual metric data point."""
    timestamp: float
    value: float
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Metric:
    """Metric container with history."""
    name: str
    description: str
    metric_type: str  # counter, gauge, histogram
    points: List[MetricPoint] = field(default_factory=list)
    current_value: float = 0.0


class MetricsCollector:
    """Collects crawler metrics in memory and optionally mirrors them to Prometheus."""

    def __init__(self, enable_prometheus: bool = False, prometheus_port: int = 8000):
        self.logger = logging.getLogger(__name__)
        self.metrics: Dict[str, Metric] = {}
        self.enable_prometheus = enable_prometheus
        self.prometheus_port = prometheus_port

        self.prometheus_registry: Optional[CollectorRegistry] = None
        self.prometheus_metrics = {}

        if self.enable_prometheus:
            self._setup_prometheus()

    def _setup_prometheus(self):
        """Setup Prometheus metrics."""
        self.prometheus_registry = CollectorRegistry()

        self.prometheus_metrics = {
            'pages_crawled_total': Counter(
                'crawler_pages_crawled_total',
                'Total number of pages crawled',
                registry=self.prometheus_registry
            ),
            'pages_failed_total': Counter(
                'crawler_pages_failed_total',
                'Total number of pages that could not be fetched',
                registry=self.prometheus_registry
            ),
            'export_errors_total': Counter(
                'crawler_export_errors_total',
                'Total number of documents that could not be exported',
                registry=self.prometheus_registry
            ),
            'links_discovered_total': Counter(
                'crawler_links_discovered_total',
                'Total number of links extracted from pages',
                registry=self.prometheus_registry
            ),
            'links_admitted_total': Counter(
                'crawler_links_admitted_total',
                'Total number of new URLs admitted to the frontier',
                registry=self.prometheus_registry
            ),
            'fetch_time_seconds': Histogram(
                'crawler_fetch_time_seconds',
                'Fetch time for HTTP requests',
                registry=self.prometheus_registry
            ),
            'queue_size': Gauge(
                'crawler_queue_size',
                'Number of URLs in queue',
                registry=self.prometheus_registry
            ),
        }

        self.logger.info("Prometheus metrics initialized")

    def start_prometheus_server(self):
        """Start Prometheus metrics HTTP server."""
        if not self.enable_prometheus:
            return

        start_http_server(self.prometheus_port, registry=self.prometheus_registry)
        self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")

    def record_metric(self, name: str, value: float, labels: Optional[Dict[str, str]] = None,
                      description: str = "", metric_type: str = "gauge", delta: float = 0.0):
        """Record a metric value. ``delta`` is what counters add to Prometheus."""
        labels = labels or {}

        if name not in self.metrics:
            self.metrics[name] = Metric(
                name=name,
                description=description,
                metric_type=metric_type
            )

        metric = self.metrics[name]
        metric.points.append(MetricPoint(timestamp=time.time(), value=value, labels=labels))
        metric.current_value = value

        # Keep only recent points
        if len(metric.points) > MAX_POINTS:
            metric.points = metric.points[-MAX_POINTS:]

        if self.enable_prometheus and name in self.prometheus_metrics:
            prom_metric = self.prometheus_metrics[name]

            if metric_type == "counter":
                prom_metric.inc(delta)
            elif metric_type == "histogram":
                prom_metric.observe(value)
            else:
                prom_metric.set(value)

    def increment_counter(self, name: str, amount: float = 1, description: str = ""):
        """Increment a counter metric."""
        current_value = 0
        if name in self.metrics:
            current_value = self.metrics[name].current_value

        self.record_metric(name, current_value + amount, description=description,
                           metric_type="counter", delta=amount)

    def set_gauge(self, name: str, value: float, description: str = ""):
        """Set a gauge metric value."""
        self.record_metric(name, value, description=description, metric_type="gauge")

    def observe_histogram(self, name: str, value: float, description: str = ""):
        """Record a histogram observation."""
        self.record_metric(name, value, description=description, metric_type="histogram")

    def get_metric(self, name: str) -> Optional[Metric]:
        """Get a metric by name."""
        return self.metrics.get(name)

    def get_current_values(self) -> Dict[str, float]:
        """Get current values of all metrics."""
        return {name: metric.current_value for name, metric in self.metrics.items()}


class CrawlerMonitor:
    """High-level monitoring interface for the crawler."""

    def __init__(self, metrics_collector: Optional[MetricsCollector] = None):
        self.metrics = metrics_collector or MetricsCollector()
        self.logger = logging.getLogger(__name__)
        self.start_time = time.time()

    def record_page_crawled(self, url: str, fetch_time: float):
        """Record a successfully crawled page."""
        self.metrics.increment_counter('pages_crawled_total', description='Pages crawled')
        self.metrics.observe_histogram('fetch_time_seconds', fetch_time,
                                       description='HTTP fetch time')

    def record_page_failed(self, url: str, reason: str = ""):
        """Record a page that could not be fetched."""
        self.metrics.increment_counter('pages_failed_total', description='Pages failed')

    def record_export_error(self, url: str):
        self.metrics.increment_counter('export_errors_total', description='Export errors')

    def record_links(self, discovered: int, admitted: int):
        """Record links found on a page and how many were new to the frontier."""
        self.metrics.increment_counter('links_discovered_total', discovered,
                                       description='Links discovered')
        self.metrics.increment_counter('links_admitted_total', admitted,
                                       description='Links admitted to the frontier')

    def update_queue_size(self, size: int):
        """Update the queue size metric."""
        self.metrics.set_gauge('queue_size', size, description='URLs in queue')

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        current_values = self.metrics.get_current_values()
        runtime = time.time() - self.start_time

        return {
            'runtime_seconds': runtime,
            'metrics': current_values,
            'rates': {
                'pages_per_minute': current_values.get('pages_crawled_total', 0) / (runtime / 60) if runtime > 0 else 0,
            }
        }


def initialize_monitoring(enable_prometheus: bool = False, prometheus_port: int = 8000) -> CrawlerMonitor:
    """Create a monitor and start the Prometheus server when enabled."""
    metrics_collector = MetricsCollector(enable_prometheus, prometheus_port)
    metrics_collector.start_prometheus_server()
    return CrawlerMonitor(metrics_collector)
