"""Recent error/warning collection from geth and prysm logs.

geth lines look like ``ERROR[10-18|12:34:56.789] Message  key=value`` and
prysm lines like ``time="2024-01-15 10:30:00" level=error msg="..." ...``.
Messages are deduplicated by normalized text across both services.
"""

import logging
import re
from datetime import datetime
from typing import Iterable

from node_monitor.log_source import LogFetch
from node_monitor.models import ErrorEntry, Level, Service, utc_now_iso

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 100
UNAVAILABLE_MESSAGE = "Unable to fetch error logs"

_WHITESPACE_RE = re.compile(r"\s+")
_GETH_ERROR_RE = re.compile(r"ERROR\s*\[([^\]]+)\]\s*(.+)")
_GETH_WARN_RE = re.compile(r"WARN\s*\[([^\]]+)\]\s*(.+)")
_PRYSM_MSG_RE = re.compile(r'msg="([^"]+)"|msg=(\S+)')
_PRYSM_TIME_RE = re.compile(r'time="([^"]+)"')
_GETH_TIME_RE = re.compile(r"^(\d{2})-(\d{2})\|(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?$")


def normalize_message(message: str) -> str:
    """Collapse whitespace and truncate; the result is the dedup key."""
    return _WHITESPACE_RE.sub(" ", message.strip())[:MAX_MESSAGE_LENGTH]


def parse_geth_line(line: str) -> ErrorEntry | None:
    if "ERROR" in line:
        pattern, level = _GETH_ERROR_RE, Level.ERROR
    elif "WARN" in line:
        pattern, level = _GETH_WARN_RE, Level.WARN
    else:
        return None

    m = pattern.search(line)
    if not m:
        return None
    message = normalize_message(m.group(2))
    if not message:
        return None
    return ErrorEntry(timestamp=m.group(1), service=Service.GETH, message=message, level=level)


def parse_prysm_line(line: str) -> ErrorEntry | None:
    if "level=error" not in line and '"error"' not in line:
        return None

    m = _PRYSM_MSG_RE.search(line)
    if not m:
        return None
    message = normalize_message(m.group(1) or m.group(2))
    if not message:
        return None
    time_match = _PRYSM_TIME_RE.search(line)
    return ErrorEntry(
        timestamp=time_match.group(1) if time_match else utc_now_iso(),
        service=Service.PRYSM,
        message=message,
        level=Level.ERROR,
    )


def parse_timestamp(value: str, now: datetime | None = None) -> datetime | None:
    """Parse an ISO 8601 or geth ``MM-DD|HH:MM:SS.fff`` timestamp to local naive time.

    geth omits the year, so the current one is assumed, or the previous one when
    that would put the stamp after *now*. Returns None when the value cannot be
    parsed.
    """
    m = _GETH_TIME_RE.match(value)
    if m:
        month, day, hour, minute, second, fraction = m.groups()
        now = now or datetime.now()
        try:
            parsed = datetime(now.year, int(month), int(day), int(hour), int(minute), int(second),
                              int((fraction or "0").ljust(6, "0")))
            if parsed > now:
                parsed = parsed.replace(year=now.year - 1)
        except ValueError:
            return None
        return parsed

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def sort_newest_first(entries: Iterable[ErrorEntry]) -> list[ErrorEntry]:
    """Stable sort by timestamp, newest first; unparseable timestamps go last."""
    dated = []
    undated = []
    for entry in entries:
        ts = parse_timestamp(entry.timestamp)
        if ts is None:
            undated.append(entry)
        else:
            dated.append((ts, entry))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in dated] + undated


class ErrorCollector:
    """Accumulates unique error entries in scan order.

    geth ERROR entries are always admitted while unique; every other entry is
    admitted only while fewer than *max_errors* entries are held.
    """

    def __init__(self, max_errors: int = 10):
        self._max_errors = max_errors
        self._entries: list[ErrorEntry] = []
        self._seen: set[str] = set()

    def add(self, entry: ErrorEntry) -> bool:
        """Store *entry* unless its message was seen or the cap applies. Returns True if stored."""
        if entry.message in self._seen:
            return False
        uncapped = entry.service is Service.GETH and entry.level is Level.ERROR
        if not uncapped and len(self._entries) >= self._max_errors:
            return False
        self._seen.add(entry.message)
        self._entries.append(entry)
        return True

    def entries(self) -> list[ErrorEntry]:
        """Collected entries, newest first, truncated to *max_errors*."""
        return sort_newest_first(self._entries)[:self._max_errors]

    @property
    def count(self) -> int:
        return len(self._entries)


def unavailable_entry() -> ErrorEntry:
    return ErrorEntry(
        timestamp=utc_now_iso(),
        service=Service.SYSTEM,
        message=UNAVAILABLE_MESSAGE,
        level=Level.ERROR,
    )


def collect_errors(geth: LogFetch, prysm: LogFetch, max_errors: int = 10) -> list[ErrorEntry]:
    """Scan geth then prysm lines oldest-to-newest and return the recent unique errors."""
    if not geth.available and not prysm.available:
        logger.warning("No error logs available (geth: %s; prysm: %s)", geth.reason, prysm.reason)
        return [unavailable_entry()]

    collector = ErrorCollector(max_errors=max_errors)
    for line in geth.lines:
        entry = parse_geth_line(line)
        if entry is not None:
            collector.add(entry)
    for line in prysm.lines:
        entry = parse_prysm_line(line)
        if entry is not None:
            collector.add(entry)

    logger.debug("Collected %d unique error entries", collector.count)
    return collector.entries()
