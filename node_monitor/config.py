"""Configuration module — frozen dataclasses loaded from environment variables and YAML."""

import logging
import os
from dataclasses import dataclass, field, fields, replace

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GethDefaults:
    chain_synced: float = 41.15
    state_synced: float = 2.32
    chain_eta: str = "20h35m"
    state_eta: str = "273h13m"
    peers: int = 10
    blocks: int = 9923503


@dataclass(frozen=True)
class PrysmDefaults:
    slot: int = 13347610
    inbound_quic: int = 17
    inbound_tcp: int = 1
    outbound_quic: int = 6
    outbound_tcp: int = 13


@dataclass(frozen=True)
class SystemDefaults:
    memory: int = 50
    disk: int = 5
    uptime: str = "0d"
    cpu_load: float = 1.0


@dataclass(frozen=True)
class MetricDefaults:
    """Fallback values used when no log line (or OS read) supplies a metric."""

    geth: GethDefaults = field(default_factory=GethDefaults)
    prysm: PrysmDefaults = field(default_factory=PrysmDefaults)
    system: SystemDefaults = field(default_factory=SystemDefaults)


@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 3000
    geth_service: str = "geth"
    prysm_service: str = "prysm"
    geth_log_lines: int = 150
    prysm_log_lines: int = 100
    error_log_lines: int = 300
    command_timeout_sec: float = 5.0
    max_errors: int = 10
    log_level: str = "INFO"
    defaults: MetricDefaults = field(default_factory=MetricDefaults)


def _overlay(section, overrides: dict):
    """Return *section* with known fields replaced from *overrides*, coerced to the field's type."""
    known = {f.name: f for f in fields(section)}
    changes = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning("Ignoring unknown default %r", key)
            continue
        current = getattr(section, key)
        try:
            changes[key] = type(current)(value)
        except (TypeError, ValueError):
            logger.warning("Invalid default %s=%r, keeping %r", key, value, current)
    return replace(section, **changes)


def load_defaults(path: str | None = None) -> MetricDefaults:
    """Build MetricDefaults, overlaying any ``geth``/``prysm``/``system`` sections from a YAML file."""
    defaults = MetricDefaults()
    if not path:
        return defaults

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Defaults file %s not found, using built-in defaults", path)
        return defaults
    except yaml.YAMLError as exc:
        logger.warning("Invalid YAML in %s (%s), using built-in defaults", path, exc)
        return defaults

    if not isinstance(data, dict):
        return defaults

    sections = {}
    for name in ("geth", "prysm", "system"):
        overrides = data.get(name)
        if isinstance(overrides, dict):
            sections[name] = _overlay(getattr(defaults, name), overrides)
    return replace(defaults, **sections)


def log_level_from_env() -> str:
    """Read LOG_LEVEL on its own so logging can be configured before the rest of Config."""
    return os.environ.get("LOG_LEVEL", Config.log_level).upper()


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults."""
    return Config(
        host=os.environ.get("HOST", Config.host),
        port=int(os.environ.get("PORT", Config.port)),
        geth_service=os.environ.get("GETH_SERVICE", Config.geth_service),
        prysm_service=os.environ.get("PRYSM_SERVICE", Config.prysm_service),
        geth_log_lines=int(os.environ.get("GETH_LOG_LINES", Config.geth_log_lines)),
        prysm_log_lines=int(os.environ.get("PRYSM_LOG_LINES", Config.prysm_log_lines)),
        error_log_lines=int(os.environ.get("ERROR_LOG_LINES", Config.error_log_lines)),
        command_timeout_sec=float(
            os.environ.get("COMMAND_TIMEOUT_SEC", Config.command_timeout_sec)
        ),
        max_errors=int(os.environ.get("MAX_ERRORS", Config.max_errors)),
        log_level=log_level_from_env(),
        defaults=load_defaults(os.environ.get("DEFAULTS_PATH")),
    )
