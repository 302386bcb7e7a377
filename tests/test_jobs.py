"""Tests for job bodies and their registration."""

import ipaddress

import pytest

from ddns.ip import IpVersion
from ddns.jobs import (
    IP_UPDATER,
    domain_job_name,
    domain_update_job,
    refresh_ip_job,
    register_jobs,
    run_oneshot,
)
from ddns.scheduling import Dispatcher

V4 = ipaddress.ip_address("198.51.100.7")
V6 = ipaddress.ip_address("2001:db8::7")


class FakeResolver:
    def __init__(self, resolves: bool = True, v4=V4, v6=V6):
        self.resolves = resolves
        self.addresses = {IpVersion.V4: v4, IpVersion.V6: v6}
        self.refreshes = 0

    def refresh(self) -> bool:
        self.refreshes += 1
        return self.resolves

    def get_ip(self, version):
        return self.addresses[version]


class FakeCloudflare:
    def __init__(self, accept: bool = True):
        self.accept = accept
        self.updates: list[tuple[str, str]] = []

    def update_record(self, domain, ip) -> bool:
        self.updates.append((domain.record_type, str(ip)))
        return self.accept


@pytest.fixture
def v4_domain(config):
    return config.domains[0]


@pytest.fixture
def v6_domain(config):
    return config.domains[1]


class TestRefreshIpJob:
    def test_logs_both_addresses(self, caplog):
        resolver = FakeResolver(v6=None)
        with caplog.at_level("INFO", logger="ddns.jobs"):
            assert refresh_ip_job(resolver)() is True

        assert resolver.refreshes == 1
        assert "IPv4: 198.51.100.7" in caplog.messages
        assert "IPv6: None" in caplog.messages

    def test_fails_when_echo_host_unresolvable(self):
        assert refresh_ip_job(FakeResolver(resolves=False))() is False


class TestDomainUpdateJob:
    def test_updates_with_matching_family(self, v6_domain):
        cloudflare = FakeCloudflare()
        assert domain_update_job(v6_domain, FakeResolver(), cloudflare)() is True
        assert cloudflare.updates == [("AAAA", "2001:db8::7")]

    def test_fails_without_address(self, v4_domain):
        cloudflare = FakeCloudflare()
        job = domain_update_job(v4_domain, FakeResolver(v4=None), cloudflare)
        assert job() is False
        assert cloudflare.updates == []

    def test_reports_rejected_update(self, v4_domain):
        job = domain_update_job(v4_domain, FakeResolver(), FakeCloudflare(accept=False))
        assert job() is False


class TestRegisterJobs:
    def test_registers_refresher_and_each_domain(self, config):
        dispatcher = Dispatcher()
        register_jobs(dispatcher, config, FakeResolver(), FakeCloudflare())

        registered = [(r.name, r.interval) for r in dispatcher.table]
        assert registered == [
            (IP_UPDATER, 120.0),
            ("Domain updater (home.example.com)", 60.0),
            ("Domain updater (home.example.com)", 90.0),
        ]

    def test_domain_job_name(self, v4_domain):
        assert domain_job_name(v4_domain) == "Domain updater (home.example.com)"

    def test_registered_jobs_run_on_schedule(self, config, make_clock, spawn):
        clock = make_clock(horizon=130)
        resolver = FakeResolver()
        cloudflare = FakeCloudflare()
        reports = []
        dispatcher = Dispatcher(clock=clock, spawn=spawn, on_report=reports.append)
        register_jobs(dispatcher, config, resolver, cloudflare)

        dispatcher.start()

        # refresher at 0 and 120; A record at 0, 60, 120; AAAA at 0, 90
        assert resolver.refreshes == 2
        assert cloudflare.updates.count(("A", "198.51.100.7")) == 3
        assert cloudflare.updates.count(("AAAA", "2001:db8::7")) == 2
        assert all(r.succeeded for r in reports)


class TestRunOneshot:
    def test_updates_every_record(self, config):
        cloudflare = FakeCloudflare()
        assert run_oneshot(config, FakeResolver(), cloudflare) == 2
        assert cloudflare.updates == [("A", "198.51.100.7"), ("AAAA", "2001:db8::7")]

    def test_skips_unavailable_family(self, config):
        cloudflare = FakeCloudflare()
        assert run_oneshot(config, FakeResolver(v6=None), cloudflare) == 1
        assert cloudflare.updates == [("A", "198.51.100.7")]

    def test_counts_only_accepted_updates(self, config):
        assert run_oneshot(config, FakeResolver(), FakeCloudflare(accept=False)) == 0
