"""Log source adapter: recent journald lines for a systemd unit."""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogFetch:
    """Outcome of a log retrieval: either lines (oldest first) or the reason none are available."""

    lines: tuple[str, ...] = ()
    reason: str | None = None

    @classmethod
    def ok(cls, lines) -> "LogFetch":
        return cls(lines=tuple(lines))

    @classmethod
    def unavailable(cls, reason: str) -> "LogFetch":
        return cls(reason=reason)

    @property
    def available(self) -> bool:
        return self.reason is None

    def tail(self, n: int) -> tuple[str, ...]:
        """The newest *n* lines."""
        if n <= 0:
            return ()
        return self.lines[-n:]


def build_command(service: str, max_lines: int) -> list[str]:
    return ["journalctl", "-u", service, "-n", str(max_lines), "--output=cat", "--no-pager"]


def fetch_recent_lines(service: str, max_lines: int, timeout: float = 5.0,
                       runner=subprocess.run) -> LogFetch:
    """Return the newest *max_lines* journal lines for *service*.

    Never raises: any retrieval failure is reported as ``LogFetch.unavailable``.
    """
    cmd = build_command(service, max_lines)
    try:
        result = runner(cmd, capture_output=True, encoding="utf-8", errors="replace",
                        timeout=timeout)
    except FileNotFoundError:
        fetch = LogFetch.unavailable("journalctl not found")
    except subprocess.TimeoutExpired:
        fetch = LogFetch.unavailable(f"journalctl timed out after {timeout}s")
    except (OSError, subprocess.SubprocessError) as exc:
        fetch = LogFetch.unavailable(f"journalctl failed: {exc}")
    else:
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            fetch = LogFetch.unavailable(f"journalctl exited {result.returncode}: {stderr}")
        else:
            lines = [line for line in (result.stdout or "").splitlines() if line.strip()]
            fetch = LogFetch.ok(lines) if lines else LogFetch.unavailable("no log output")

    if not fetch.available:
        logger.warning("Logs for %s unavailable: %s", service, fetch.reason)
    return fetch
