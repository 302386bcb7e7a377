"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr

DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_IP_REFRESH_INTERVAL_SECONDS = 300


class ConfigError(Exception):
    """Configuration error."""

    pass


class DomainConfig(BaseModel):
    """A single Cloudflare DNS record kept in sync with this host's address.

    ``id`` is the Cloudflare record identifier, not the hostname.
    A ``ttl`` of 1 means "automatic" to Cloudflare.
    """

    id: str
    zone_id: str
    name: str
    record_type: Literal["A", "AAAA"]
    update_interval: int = Field(gt=0)  # seconds
    ttl: int = Field(default=1, ge=1)
    proxied: bool = False


class DdnsConfig(BaseModel):
    """Root configuration model."""

    cf_key: SecretStr
    cf_mail: str
    timeout: int = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    ip_refresh_interval: int = Field(default=DEFAULT_IP_REFRESH_INTERVAL_SECONDS, gt=0)
    domains: list[DomainConfig] = Field(default_factory=list)
