"""Configuration loading from JSON/TOML files and environment variables."""

import json
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr

from ddns.config.models import ConfigError, DdnsConfig
from ddns.config.paths import LOCAL_CONFIG_NAME, get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path(LOCAL_CONFIG_NAME),  # Current directory
        get_config_path(),  # ~/.ddns/config.json (or DDNS_HOME)
        Path("/etc/ddns/config.json"),  # System-wide
    ]


def _resolve_env_secrets(config: dict[str, Any]) -> dict[str, Any]:
    """Fill Cloudflare credentials from the environment where not set in config."""
    if config.get("cf_key") is None:
        if value := os.environ.get("CF_API_KEY"):
            config["cf_key"] = SecretStr(value)
    if config.get("cf_mail") is None:
        if value := os.environ.get("CF_API_EMAIL"):
            config["cf_mail"] = value
    return config


def _read_raw(config_path: Path) -> dict[str, Any]:
    try:
        if config_path.suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        else:
            data = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {config_path}")
    return data


def load_config(path: Path | None = None) -> DdnsConfig:
    """Load configuration from a JSON or TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated DdnsConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If the file cannot be parsed.
        pydantic.ValidationError: If values are missing or invalid.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        raise FileNotFoundError(
            f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
        )

    raw_config = _resolve_env_secrets(_read_raw(config_path))

    return DdnsConfig.model_validate(raw_config)
