"""Tests for Cloudflare record updates."""

import ipaddress
import json
from datetime import datetime, timezone

import httpx
import pytest
from pydantic import SecretStr

from ddns.cloudflare import CF_API, CloudflareClient, compose_body, record_url
from ddns.config.models import DomainConfig


@pytest.fixture
def domain() -> DomainConfig:
    return DomainConfig(
        id="rec-v4",
        zone_id="zone-1",
        name="home.example.com",
        record_type="A",
        update_interval=60,
        ttl=300,
    )


def make_client(handler) -> CloudflareClient:
    return CloudflareClient(
        SecretStr("global-key-1234"),
        "admin@example.com",
        timeout=3,
        transport=httpx.MockTransport(handler),
    )


class TestComposeBody:
    def test_body_fields(self, domain):
        now = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
        body = compose_body(domain, ipaddress.ip_address("198.51.100.7"), now)
        assert body == {
            "content": "198.51.100.7",
            "name": "home.example.com",
            "proxied": False,
            "type": "A",
            "comment": "Updated at 2026-03-01 08:30:00+00:00",
            "ttl": 300,
        }

    def test_record_url(self, domain):
        assert record_url(domain) == f"{CF_API}/zones/zone-1/dns_records/rec-v4"


class TestCloudflareClient:
    def test_patches_record(self, domain):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "errors": []})

        client = make_client(handler)
        assert client.update_record(domain, ipaddress.ip_address("198.51.100.7"))

        request = seen[0]
        assert request.method == "PATCH"
        assert str(request.url) == record_url(domain)
        assert request.headers["X-Auth-Key"] == "global-key-1234"
        assert request.headers["X-Auth-Email"] == "admin@example.com"
        assert request.headers["Content-Type"] == "application/json"
        body = json.loads(request.content)
        assert body["content"] == "198.51.100.7"
        assert body["type"] == "A"
        assert body["comment"].startswith("Updated at ")

    def test_rejected_update_returns_false(self, domain, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                json={"success": False, "errors": [{"code": 9109, "message": "Invalid access token"}]},
            )

        client = make_client(handler)
        with caplog.at_level("ERROR", logger="ddns.cloudflare"):
            assert not client.update_record(domain, ipaddress.ip_address("198.51.100.7"))

        record = next(
            r for r in caplog.records if r.getMessage() == "cloudflare_update_rejected"
        )
        assert record.__dict__["error.message"] == "Invalid access token"
        assert record.__dict__["http.status_code"] == 403

    def test_non_json_error_body(self, domain):
        client = make_client(lambda request: httpx.Response(502, text="Bad gateway"))
        assert not client.update_record(domain, ipaddress.ip_address("198.51.100.7"))

    def test_transport_error_returns_false(self, domain):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = make_client(handler)
        assert not client.update_record(domain, ipaddress.ip_address("198.51.100.7"))

    def test_from_config(self, config):
        client = CloudflareClient.from_config(config)
        try:
            assert client._client.timeout.read == config.timeout
            assert client._client.headers["X-Auth-Email"] == config.cf_mail
        finally:
            client.close()
