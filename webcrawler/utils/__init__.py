"""
Utility modules for the web crawler system.
"""

from .config import Config, ConfigManager, CrawlConfig, load_config, get_config

__all__ = ['Config', 'ConfigManager', 'CrawlConfig', 'load_config', 'get_config']
