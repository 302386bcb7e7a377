"""Job bodies: the work the dispatcher fires on a schedule.

Each factory returns a zero-argument handler. Handlers return False when
the work did not happen; the dispatcher reports that as a failure.
"""

import logging

from ddns.cloudflare import CloudflareClient
from ddns.config.models import DdnsConfig, DomainConfig
from ddns.ip import IpVersion, PublicIpResolver
from ddns.scheduling import Dispatcher, JobHandler

logger = logging.getLogger(__name__)

IP_UPDATER = "IP updater"


def domain_job_name(domain: DomainConfig) -> str:
    return f"Domain updater ({domain.name})"


def refresh_ip_job(resolver: PublicIpResolver) -> JobHandler:
    """Re-resolve the echo host and log the addresses it reports."""

    def run() -> bool:
        resolved = resolver.refresh()
        ipv4 = resolver.get_ip(IpVersion.V4)
        ipv6 = resolver.get_ip(IpVersion.V6)
        logger.info(f"IPv4: {ipv4 or 'None'}")
        logger.info(f"IPv6: {ipv6 or 'None'}")
        return resolved

    return run


def domain_update_job(
    domain: DomainConfig, resolver: PublicIpResolver, client: CloudflareClient
) -> JobHandler:
    """Point one DNS record at the current address of its family."""
    version = IpVersion.for_record_type(domain.record_type)

    def run() -> bool:
        ip = resolver.get_ip(version)
        if ip is None:
            logger.warning(
                "no_address_for_record",
                extra={"dns.name": domain.name, "dns.record_type": domain.record_type},
            )
            return False
        return client.update_record(domain, ip)

    return run


def register_jobs(
    dispatcher: Dispatcher,
    config: DdnsConfig,
    resolver: PublicIpResolver,
    client: CloudflareClient,
) -> None:
    """Register the IP refresher and one updater per configured record."""
    dispatcher.register(
        IP_UPDATER, refresh_ip_job(resolver), config.ip_refresh_interval
    )
    for domain in config.domains:
        dispatcher.register(
            domain_job_name(domain),
            domain_update_job(domain, resolver, client),
            domain.update_interval,
        )


def run_oneshot(
    config: DdnsConfig, resolver: PublicIpResolver, client: CloudflareClient
) -> int:
    """Refresh once and update every record once.

    Records whose address family is unavailable are skipped.

    Returns:
        Number of records Cloudflare accepted.
    """
    refresh_ip_job(resolver)()
    addresses = {
        version: resolver.get_ip(version) for version in (IpVersion.V4, IpVersion.V6)
    }

    updated = 0
    for domain in config.domains:
        ip = addresses[IpVersion.for_record_type(domain.record_type)]
        if ip is None:
            logger.warning(
                "no_address_for_record",
                extra={"dns.name": domain.name, "dns.record_type": domain.record_type},
            )
            continue
        if client.update_record(domain, ip):
            updated += 1
    return updated
