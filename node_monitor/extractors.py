"""Marker-gated regex extractors for geth and prysm log lines.

Each extractor first checks for a literal marker substring and only then runs
its capture patterns. A call returns ``{slot: value}`` for every capture that
matched, or None when the marker is absent or nothing could be captured.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_SYNCED_RE = re.compile(r"synced=(\d+(?:\.\d+)?)%")
_ETA_RE = re.compile(r"eta=((?:\d+d)?(?:\d+h)?\d+m)")
_PEERS_RE = re.compile(r"peers=(\d+)")
_HEADERS_RE = re.compile(r"headers=(\d{1,3}(?:,\d{3})+|\d+)")
_CURRENT_SLOT_RE = re.compile(r'currentSlot="?(\d+)')
_INBOUND_QUIC_RE = re.compile(r"inboundQUIC=(\d+)")
_INBOUND_TCP_RE = re.compile(r"inboundTCP=(\d+)")
_OUTBOUND_QUIC_RE = re.compile(r"outboundQUIC=(\d+)")
_OUTBOUND_TCP_RE = re.compile(r"outboundTCP=(\d+)")


def _grouped_int(value: str) -> int:
    """'9,923,503' → 9923503."""
    return int(value.replace(",", ""))


@dataclass(frozen=True)
class Capture:
    slot: str
    pattern: re.Pattern
    convert: Callable[[str], Any] = str

    def extract(self, line: str):
        m = self.pattern.search(line)
        if not m:
            return None
        try:
            return self.convert(m.group(1))
        except ValueError:
            return None


@dataclass(frozen=True)
class Extractor:
    name: str
    marker: str
    captures: tuple[Capture, ...]

    def __call__(self, line: str) -> dict[str, Any] | None:
        if self.marker not in line:
            return None
        found = {}
        for capture in self.captures:
            value = capture.extract(line)
            if value is not None:
                found[capture.slot] = value
        return found or None


# ---------------------------------------------------------------------------
# geth (execution client)
# ---------------------------------------------------------------------------

CHAIN_SYNC = Extractor(
    name="chain_sync",
    marker="chain download in progress",
    captures=(
        Capture("chain_synced", _SYNCED_RE, float),
        Capture("chain_eta", _ETA_RE),
    ),
)

STATE_SYNC = Extractor(
    name="state_sync",
    marker="state download in progress",
    captures=(
        Capture("state_synced", _SYNCED_RE, float),
        Capture("state_eta", _ETA_RE),
    ),
)

GETH_PEERS = Extractor(
    name="peer_count",
    marker="peers=",
    captures=(Capture("peers", _PEERS_RE, int),),
)

BLOCK_HEIGHT = Extractor(
    name="block_height",
    marker="headers=",
    captures=(Capture("blocks", _HEADERS_RE, _grouped_int),),
)

GETH_EXTRACTORS = (CHAIN_SYNC, STATE_SYNC, GETH_PEERS, BLOCK_HEIGHT)

# ---------------------------------------------------------------------------
# prysm (consensus client)
# ---------------------------------------------------------------------------

CONSENSUS_SLOT = Extractor(
    name="consensus_slot",
    marker="currentSlot=",
    captures=(Capture("slot", _CURRENT_SLOT_RE, int),),
)

PEER_TRANSPORTS = Extractor(
    name="peer_transports",
    marker="Connected peers",
    captures=(
        Capture("inbound_quic", _INBOUND_QUIC_RE, int),
        Capture("inbound_tcp", _INBOUND_TCP_RE, int),
        Capture("outbound_quic", _OUTBOUND_QUIC_RE, int),
        Capture("outbound_tcp", _OUTBOUND_TCP_RE, int),
    ),
)

PRYSM_EXTRACTORS = (CONSENSUS_SLOT, PEER_TRANSPORTS)
