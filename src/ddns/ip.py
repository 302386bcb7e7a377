"""Public IP discovery through an HTTPS echo service.

The echo host is resolved once per refresh and its addresses are cached.
Lookups then query each cached address of the requested family directly,
so the answer reflects the route that family actually takes out of this
host (an IPv6 lookup only ever goes over IPv6).
"""

import ipaddress
import logging
import socket
import threading
from enum import Enum

import httpx

logger = logging.getLogger(__name__)

MYIP_HOST = "myip.merlyn.dev"
MYIP_PORT = 443

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class IpVersion(Enum):
    V4 = 4
    V6 = 6

    @property
    def family(self) -> socket.AddressFamily:
        return socket.AF_INET if self is IpVersion.V4 else socket.AF_INET6

    @classmethod
    def for_record_type(cls, record_type: str) -> "IpVersion":
        return cls.V6 if record_type == "AAAA" else cls.V4


class PublicIpResolver:
    """Caches the echo host's addresses and asks it for our public IP.

    Safe to share between concurrently running jobs: the cache is swapped
    under a lock and lookups work on a snapshot.
    """

    def __init__(
        self,
        host: str = MYIP_HOST,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self._host = host
        self._lock = threading.Lock()
        self._records: list[tuple[socket.AddressFamily, str]] | None = None
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def host(self) -> str:
        return self._host

    @property
    def records(self) -> list[tuple[socket.AddressFamily, str]] | None:
        """Cached echo host addresses, or None if the last refresh failed."""
        with self._lock:
            return None if self._records is None else list(self._records)

    def refresh(self) -> bool:
        """Re-resolve the echo host. Returns True if any address was found."""
        logger.debug(f"Resolving DNS of {self._host}")
        try:
            infos = socket.getaddrinfo(
                self._host, MYIP_PORT, type=socket.SOCK_STREAM
            )
        except OSError as e:
            logger.warning(
                "echo_host_resolve_failed",
                extra={"dns.host": self._host, "error.message": str(e)},
            )
            records = None
        else:
            records = []
            for family, _, _, _, sockaddr in infos:
                logger.debug(f"getaddrinfo: {family.name} {sockaddr}")
                if family not in (socket.AF_INET, socket.AF_INET6):
                    continue
                record = (family, str(sockaddr[0]))
                if record not in records:
                    records.append(record)

        with self._lock:
            self._records = records
        return bool(records)

    def get_ip(self, version: IpVersion) -> IPAddress | None:
        """Ask the echo host for our address of the given family.

        Uses the cached resolution only; call ``refresh`` to update it.
        Returns None when no cached address of that family answers.
        """
        records = self.records
        if not records:
            return None

        for family, address in records:
            if family != version.family:
                continue
            ip = self._query(address, version)
            if ip is not None:
                return ip
        return None

    def _query(self, address: str, version: IpVersion) -> IPAddress | None:
        netloc = f"[{address}]" if version is IpVersion.V6 else address
        url = f"https://{netloc}/"
        logger.debug(f"Trying connecting to {netloc}")
        try:
            response = self._client.get(
                url,
                headers={"Host": self._host},
                extensions={"sni_hostname": self._host},
            )
        except httpx.HTTPError as e:
            logger.debug(f"Cannot get response from {netloc}: {e!r}")
            return None

        if not response.is_success:
            logger.debug(f"Request to {netloc} failed with {response.status_code}")
            return None

        try:
            ip = ipaddress.ip_address(response.text.strip())
        except ValueError:
            logger.debug(f"Echo host returned a non-address body: {response.text!r}")
            return None
        if ip.version != version.value:
            return None
        return ip

    def close(self) -> None:
        self._client.close()
