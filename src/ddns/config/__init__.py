"""Configuration module."""

from ddns.config.loader import load_config
from ddns.config.models import ConfigError, DdnsConfig, DomainConfig
from ddns.config.paths import (
    get_config_path,
    get_ddns_home,
    get_logs_path,
)

__all__ = [
    "ConfigError",
    "DdnsConfig",
    "DomainConfig",
    "get_config_path",
    "get_ddns_home",
    "get_logs_path",
    "load_config",
]
