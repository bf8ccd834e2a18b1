"""Wall-clock rules for the monitor: nightly shutdown and the maintenance window."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

DEFAULT_SHUTDOWN_TIME = time(1, 50)


def zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def _at(now: datetime, moment: time) -> datetime:
    return now.replace(hour=moment.hour, minute=moment.minute, second=0, microsecond=0)


def next_shutdown_time(now: datetime, at: time = DEFAULT_SHUTDOWN_TIME) -> datetime:
    """Today at ``at``, or tomorrow when that moment has already passed."""
    candidate = _at(now, at)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def _minute_of_day(moment: time) -> int:
    return moment.hour * 60 + moment.minute


@dataclass(frozen=True, slots=True)
class MaintenanceWindow:
    """Nightly period during which the reservation system is offline.

    Matching is by minute; the end minute is still inside the window and the
    window may wrap past midnight.
    """

    start: time = time(23, 50)
    end: time = time(0, 5)

    def contains(self, now: datetime) -> bool:
        current = _minute_of_day(now.time())
        start = _minute_of_day(self.start)
        end = _minute_of_day(self.end)
        if start <= end:
            return start <= current <= end
        return current >= start or current <= end

    def resume_at(self, now: datetime) -> datetime:
        """First minute after the window that follows ``now``."""
        candidate = _at(now, self.end) + timedelta(minutes=1)
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate
