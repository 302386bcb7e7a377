"""Cloudflare DNS record updates."""

import logging
from datetime import datetime
from typing import Any

import httpx
from pydantic import SecretStr

from ddns.config.models import DdnsConfig, DomainConfig
from ddns.ip import IPAddress

logger = logging.getLogger(__name__)

CF_API = "https://api.cloudflare.com/client/v4"


def compose_body(
    domain: DomainConfig, ip: IPAddress, now: datetime | None = None
) -> dict[str, Any]:
    """Build the PATCH payload for a DNS record."""
    now = now or datetime.now().astimezone()
    return {
        "content": str(ip),
        "name": domain.name,
        "proxied": domain.proxied,
        "type": domain.record_type,
        "comment": f"Updated at {now}",
        "ttl": domain.ttl,
    }


def record_url(domain: DomainConfig) -> str:
    return f"{CF_API}/zones/{domain.zone_id}/dns_records/{domain.id}"


class CloudflareClient:
    """Thin wrapper over the Cloudflare v4 DNS records endpoint.

    One instance is shared by every domain job; httpx.Client is thread-safe.
    """

    def __init__(
        self,
        cf_key: SecretStr,
        cf_mail: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            headers={
                "X-Auth-Key": cf_key.get_secret_value(),
                "X-Auth-Email": cf_mail,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: DdnsConfig, transport: httpx.BaseTransport | None = None
    ) -> "CloudflareClient":
        return cls(
            config.cf_key, config.cf_mail, timeout=config.timeout, transport=transport
        )

    def update_record(self, domain: DomainConfig, ip: IPAddress) -> bool:
        """Point ``domain`` at ``ip``. Returns True if Cloudflare accepted it."""
        body = compose_body(domain, ip)
        logger.info(f"Updating {domain.name} to {ip}")
        try:
            response = self._client.patch(record_url(domain), json=body)
        except httpx.HTTPError as e:
            logger.error(
                "cloudflare_request_failed",
                extra={"dns.name": domain.name, "error.message": repr(e)},
            )
            return False

        logger.debug(f"Cloudflare answered {response.status_code}: {response.text}")
        if not response.is_success:
            logger.error(
                "cloudflare_update_rejected",
                extra={
                    "dns.name": domain.name,
                    "http.status_code": response.status_code,
                    "error.message": _error_message(response),
                },
            )
            return False

        logger.info(f"Done updating {domain.name}.")
        return True

    def close(self) -> None:
        self._client.close()


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    errors = data.get("errors") if isinstance(data, dict) else None
    if not errors:
        return response.reason_phrase
    return "; ".join(
        str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
    )
