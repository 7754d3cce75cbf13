"""Snapshot value objects served by the stats endpoint.

Attribute names are snake_case; ``to_dict()`` produces the camelCase keys the
dashboard reads.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

SYNCED_THRESHOLD = 95.0
SLOTS_PER_EPOCH = 32


class Service(str, Enum):
    GETH = "geth"
    PRYSM = "prysm"
    SYSTEM = "system"


class Level(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with a trailing Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def epoch_for_slot(slot: int) -> int:
    return slot // SLOTS_PER_EPOCH


def sync_status(overall_synced: float) -> str:
    return "SYNCED" if overall_synced > SYNCED_THRESHOLD else "SYNCING"


@dataclass(frozen=True)
class SyncSnapshot:
    chain_synced: float
    state_synced: float
    chain_eta: str
    state_eta: str
    peers: int
    blocks: int

    @property
    def overall_synced(self) -> float:
        return min(self.chain_synced, self.state_synced)

    @property
    def status(self) -> str:
        return sync_status(self.overall_synced)

    def to_dict(self) -> dict:
        return {
            "chainSynced": self.chain_synced,
            "stateSynced": self.state_synced,
            "overallSynced": self.overall_synced,
            "chainEta": self.chain_eta,
            "stateEta": self.state_eta,
            "peers": self.peers,
            "blocks": self.blocks,
            "status": self.status,
        }


@dataclass(frozen=True)
class ConsensusSnapshot:
    slot: int
    inbound_quic: int
    inbound_tcp: int
    outbound_quic: int
    outbound_tcp: int

    @property
    def epoch(self) -> int:
        return epoch_for_slot(self.slot)

    @property
    def peers(self) -> int:
        return self.inbound_quic + self.inbound_tcp + self.outbound_quic + self.outbound_tcp

    @property
    def quic(self) -> str:
        return f"{self.inbound_quic}↓ / {self.outbound_quic}↑"

    @property
    def tcp(self) -> str:
        return f"{self.inbound_tcp}↓ / {self.outbound_tcp}↑"

    def to_dict(self) -> dict:
        return {
            "slot": self.slot,
            "epoch": self.epoch,
            "peers": self.peers,
            "quic": self.quic,
            "tcp": self.tcp,
        }


@dataclass(frozen=True)
class SystemSnapshot:
    memory: int
    disk: int
    uptime: str
    cpu_load: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "memory": self.memory,
            "disk": self.disk,
            "uptime": self.uptime,
            "cpuLoad": self.cpu_load,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ErrorEntry:
    timestamp: str
    service: Service
    message: str
    level: Level

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "service": self.service.value,
            "message": self.message,
            "level": self.level.value,
        }
