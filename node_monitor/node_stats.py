"""Per-client snapshot builders on top of the reverse-scan aggregator."""

from dataclasses import asdict
from typing import Sequence

from node_monitor.aggregator import reverse_scan
from node_monitor.config import GethDefaults, PrysmDefaults
from node_monitor.extractors import GETH_EXTRACTORS, PRYSM_EXTRACTORS
from node_monitor.models import ConsensusSnapshot, SyncSnapshot


def geth_stats(lines: Sequence[str], defaults: GethDefaults) -> SyncSnapshot:
    """Latest sync progress, peers and block height from geth log lines."""
    values = reverse_scan(lines, GETH_EXTRACTORS, asdict(defaults))
    return SyncSnapshot(**values)


def prysm_stats(lines: Sequence[str], defaults: PrysmDefaults) -> ConsensusSnapshot:
    """Latest slot and per-transport peer counts from prysm log lines."""
    values = reverse_scan(lines, PRYSM_EXTRACTORS, asdict(defaults))
    return ConsensusSnapshot(**values)
