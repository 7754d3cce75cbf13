import subprocess

import pytest

from node_monitor.config import Config, GethDefaults, MetricDefaults, PrysmDefaults, SystemDefaults
from node_monitor.log_source import LogFetch

GETH_LINES = [
    "INFO [10-18|12:00:01.123] Starting peer-to-peer node               instance=Geth/v1.14.11",
    "INFO [10-18|12:00:10.000] Syncing: chain download in progress      synced=40.50% chain=500.10GiB "
    "headers=9,900,000@3.10GiB bodies=9,800,000@390GiB eta=21h02m10.112s",
    "INFO [10-18|12:00:20.000] Syncing: state download in progress      synced=2.10% state=38.20GiB "
    "accounts=1,000,000@200MiB eta=280h01m2.321s",
    "INFO [10-18|12:00:30.000] Looking for peers                        peers=8 tried=30 static=0",
    "WARN [10-18|12:00:40.000] Dropping unsynced node during sync       id=abc123 conn=inbound",
    "INFO [10-18|12:01:10.000] Syncing: chain download in progress      synced=41.15% chain=512.34GiB "
    "headers=9,923,503@3.21GiB bodies=9,900,100@400GiB eta=20h35m12.345s",
    "ERROR[10-18|12:01:15.000] Snapshot extension registration failed   peer=def456 err=\"peer connected on snap without compatible eth support\"",
    "INFO [10-18|12:01:20.000] Syncing: state download in progress      synced=2.32% state=40.00GiB "
    "accounts=1,100,000@210MiB eta=273h13m5.001s",
    "INFO [10-18|12:01:30.000] Looking for peers                        peers=10 tried=31 static=0",
]

PRYSM_LINES = [
    'time="2024-10-18 12:00:00" level=info msg="Connected peers" inboundQUIC=15 inboundTCP=2 '
    'outboundQUIC=5 outboundTCP=12 prefix=p2p',
    'time="2024-10-18 12:00:12" level=info msg="Synced new block" block=0xabc currentSlot=13347600 prefix=blockchain',
    'time="2024-10-18 12:00:20" level=error msg="Could not process attestation" error="nil state" prefix=sync',
    'time="2024-10-18 12:00:24" level=info msg="Synced new block" block=0xdef currentSlot=13347610 prefix=blockchain',
    'time="2024-10-18 12:00:30" level=info msg="Connected peers" inboundQUIC=17 inboundTCP=1 '
    'outboundQUIC=6 outboundTCP=13 prefix=p2p',
]


@pytest.fixture
def defaults():
    return MetricDefaults(
        geth=GethDefaults(chain_synced=10.0, state_synced=5.0, chain_eta="1h1m",
                          state_eta="2h2m", peers=1, blocks=100),
        prysm=PrysmDefaults(slot=64, inbound_quic=1, inbound_tcp=1, outbound_quic=1, outbound_tcp=1),
        system=SystemDefaults(memory=50, disk=5, uptime="0d", cpu_load=1.0),
    )


@pytest.fixture
def config(defaults):
    return Config(defaults=defaults)


@pytest.fixture
def geth_lines():
    return list(GETH_LINES)


@pytest.fixture
def prysm_lines():
    return list(PRYSM_LINES)


@pytest.fixture
def make_runner():
    """Build a fake subprocess.run that records calls and returns canned output."""

    def factory(stdout="", returncode=0, stderr="", raises=None):
        calls = []

        def runner(cmd, **kwargs):
            calls.append((cmd, kwargs))
            if raises is not None:
                raise raises
            return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

        runner.calls = calls
        return runner

    return factory


@pytest.fixture
def make_fetch():
    """Build a fake fetch_recent_lines keyed by service name."""

    def factory(by_service: dict):
        calls = []

        def fetch(service, max_lines, timeout=5.0):
            calls.append((service, max_lines, timeout))
            lines = by_service.get(service)
            if lines is None:
                return LogFetch.unavailable("no journal")
            return LogFetch.ok(lines[-max_lines:])

        fetch.calls = calls
        return fetch

    return factory
