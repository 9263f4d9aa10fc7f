"""
Configuration management for the web crawler system.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class CrawlConfig:
    """Configuration for crawler behavior."""
    seed_url: str = ""
    max_pages: Optional[int] = None
    allowed_domains: Tuple[str, ...] = ()
    user_agent: str = "webcrawler/1.0"
    request_timeout: float = 30.0
    max_content_size: int = 10 * 1024 * 1024
    include_raw_html: bool = False

    def __post_init__(self):
        # YAML hands us lists
        if not isinstance(self.allowed_domains, tuple):
            object.__setattr__(self, 'allowed_domains', tuple(self.allowed_domains or ()))


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for document export."""
    directory: str = "output"
    filename: str = "crawl.jsonl"


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: str = "logs/crawler.log"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json: bool = False


@dataclass(frozen=True)
class MonitoringConfig:
    """Configuration for monitoring."""
    prometheus_port: int = 8000
    metrics_enabled: bool = False
    stats_interval: float = 30.0


@dataclass(frozen=True)
class Config:
    """Main configuration class."""
    crawler: CrawlConfig = field(default_factory=CrawlConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def validate(self):
        """Validate configuration values. Raises ValueError on the first problem found."""
        seed_url = self.crawler.seed_url.strip()
        if not seed_url:
            raise ValueError("A seed URL must be provided")

        if '://' not in seed_url:
            raise ValueError(f"Seed URL must include a scheme: {seed_url}")

        if self.crawler.max_pages is not None and self.crawler.max_pages < 1:
            raise ValueError("max_pages must be at least 1")

        if self.crawler.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        if self.crawler.max_content_size < 1:
            raise ValueError("max_content_size must be at least 1")

        if not self.output.filename:
            raise ValueError("output filename must not be empty")

        if self.logging.level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.logging.level}")

        if self.monitoring.stats_interval <= 0:
            raise ValueError("stats_interval must be positive")

    def with_crawler(self, **changes) -> 'Config':
        """Return a copy with crawler settings replaced."""
        return replace(self, crawler=replace(self.crawler, **changes))

    def with_output(self, **changes) -> 'Config':
        return replace(self, output=replace(self.output, **changes))

    def with_logging(self, **changes) -> 'Config':
        return replace(self, logging=replace(self.logging, **changes))


def _section(cls, data: Optional[Dict[str, Any]]):
    """Build a config section, rejecting unknown keys."""
    data = data or {}
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} options: {', '.join(sorted(unknown))}")
    return cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            try:
                config_data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        self._config = self.from_dict(config_data)
        self._validate_config()
        return self._config

    @staticmethod
    def from_dict(config_data: Dict[str, Any]) -> Config:
        """Build a Config from parsed YAML; missing sections use defaults."""
        if not isinstance(config_data, dict):
            raise ValueError("Configuration must be a mapping")

        return Config(
            crawler=_section(CrawlConfig, config_data.get('crawler')),
            output=_section(OutputConfig, config_data.get('output')),
            logging=_section(LoggingConfig, config_data.get('logging')),
            monitoring=_section(MonitoringConfig, config_data.get('monitoring'))
        )

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        self._config.validate()
        logging.getLogger(__name__).info("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config_manager.config


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from file."""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()
