"""Assembles the full stats payload from logs and host metrics."""

import logging

from node_monitor.config import Config
from node_monitor.errors import collect_errors
from node_monitor.log_source import LogFetch, fetch_recent_lines
from node_monitor.models import utc_now_iso
from node_monitor.node_stats import geth_stats, prysm_stats
from node_monitor.system import sample_system

logger = logging.getLogger(__name__)


class SnapshotAssembler:
    """Builds one response per call; nothing is carried between calls."""

    def __init__(self, config: Config, fetch=fetch_recent_lines, sampler=sample_system):
        self._config = config
        self._fetch = fetch
        self._sampler = sampler

    def _fetch_service(self, service: str, stats_lines: int) -> LogFetch:
        window = max(stats_lines, self._config.error_log_lines)
        return self._fetch(service, window, timeout=self._config.command_timeout_sec)

    def build(self) -> dict:
        cfg = self._config
        defaults = cfg.defaults

        geth_logs = self._fetch_service(cfg.geth_service, cfg.geth_log_lines)
        prysm_logs = self._fetch_service(cfg.prysm_service, cfg.prysm_log_lines)

        geth = geth_stats(geth_logs.tail(cfg.geth_log_lines), defaults.geth)
        prysm = prysm_stats(prysm_logs.tail(cfg.prysm_log_lines), defaults.prysm)
        system = self._sampler(defaults.system)
        errors = collect_errors(
            LogFetch(geth_logs.tail(cfg.error_log_lines), geth_logs.reason),
            LogFetch(prysm_logs.tail(cfg.error_log_lines), prysm_logs.reason),
            max_errors=cfg.max_errors,
        )

        logger.debug("Snapshot built: geth %s (%.2f%%), prysm slot %d",
                     geth.status, geth.overall_synced, prysm.slot)
        return {
            "geth": geth.to_dict(),
            "prysm": prysm.to_dict(),
            "system": system.to_dict(),
            "errors": [entry.to_dict() for entry in errors],
            "timestamp": utc_now_iso(),
        }
