"""Centralized path management for ddns.

State (config, logs) lives under a single base directory, which can be
overridden with the DDNS_HOME environment variable.

Default locations:
- Linux/macOS: ~/.ddns
- Windows: %USERPROFILE%\\.ddns
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "DDNS_HOME"

# Legacy config file name looked up in the working directory
LOCAL_CONFIG_NAME = "ddns_config.json"


@lru_cache(maxsize=1)
def get_ddns_home() -> Path:
    """Get the base directory for all ddns data.

    Resolution order:
    1. DDNS_HOME environment variable (if set)
    2. Platform default (~/.ddns)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".ddns"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_ddns_home() / "config.json"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_ddns_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for debugging/display."""
    return {
        "home": get_ddns_home(),
        "config": get_config_path(),
        "logs": get_logs_path(),
    }
