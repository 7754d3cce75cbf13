"""Host health sampling via psutil."""

import logging
import time

import psutil

from node_monitor.config import SystemDefaults
from node_monitor.models import SystemSnapshot, utc_now_iso

logger = logging.getLogger(__name__)

VIRTUAL_FILESYSTEMS = frozenset({
    "tmpfs", "devtmpfs", "udev", "squashfs", "overlay", "proc", "sysfs",
    "devpts", "cgroup", "cgroup2", "ramfs", "efivarfs", "fuse.lxcfs",
})


def _is_virtual(partition) -> bool:
    if partition.fstype in VIRTUAL_FILESYSTEMS:
        return True
    return "tmpfs" in partition.device or "udev" in partition.device


def read_memory_percent() -> int:
    mem = psutil.virtual_memory()
    if mem.total <= 0:
        raise ValueError("memory total is zero")
    return round(mem.used / mem.total * 100)


def read_disk_percent() -> int | None:
    """Highest usage across real mounted partitions, or None if none could be read."""
    highest = 0
    for part in psutil.disk_partitions(all=False):
        if _is_virtual(part):
            continue
        try:
            usage = psutil.disk_usage(part.mountpoint)
        except OSError as exc:
            logger.debug("Skipping %s (%s): %s", part.device, part.mountpoint, exc)
            continue
        percent = round(usage.percent)
        logger.debug("Disk %s (%s): %d%%", part.device, part.mountpoint, percent)
        highest = max(highest, percent)
    return highest or None


def read_cpu_load() -> float:
    return round(psutil.getloadavg()[0], 2)


def format_uptime(seconds: float) -> str:
    """Format like ``uptime -p`` without the leading 'up '."""
    minutes = int(seconds // 60)
    weeks, minutes = divmod(minutes, 7 * 24 * 60)
    days, minutes = divmod(minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)

    parts = []
    for value, unit in ((weeks, "week"), (days, "day"), (hours, "hour"), (minutes, "minute")):
        if value:
            parts.append(f"{value} {unit}{'s' if value != 1 else ''}")
    return ", ".join(parts) or "0 minutes"


def read_uptime() -> str:
    return format_uptime(time.time() - psutil.boot_time())


def _sample(name: str, reader, default):
    """Run one reader; any failure falls back to *default* for that field only."""
    try:
        value = reader()
    except (OSError, ValueError, psutil.Error) as exc:
        logger.warning("Could not read %s, using default %r: %s", name, default, exc)
        return default
    if value is None:
        logger.warning("No %s reading available, using default %r", name, default)
        return default
    return value


def sample_system(defaults: SystemDefaults) -> SystemSnapshot:
    return SystemSnapshot(
        memory=_sample("memory", read_memory_percent, defaults.memory),
        disk=_sample("disk", read_disk_percent, defaults.disk),
        uptime=_sample("uptime", read_uptime, defaults.uptime),
        cpu_load=_sample("cpu load", read_cpu_load, defaults.cpu_load),
        timestamp=utc_now_iso(),
    )
