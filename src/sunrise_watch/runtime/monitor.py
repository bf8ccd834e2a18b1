"""Periodic availability monitor."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from sunrise_watch.availability.models import AvailabilityCheckResult
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile
from sunrise_watch.runtime.schedule import MaintenanceWindow, next_shutdown_time, zone
from sunrise_watch.services.notifier import NotificationError, Notifier
from sunrise_watch.utils.retry import Sleep

logger = logging.getLogger(__name__)


class Checker(Protocol):
    async def check(self, profile: WatchProfile) -> AvailabilityCheckResult:
        ...


class Monitor:
    """Runs checks until the shutdown time, notifying whenever seats appear."""

    def __init__(
        self,
        settings: Settings,
        profile: WatchProfile,
        checker: Checker,
        notifier: Notifier,
        *,
        interval_s: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.profile = profile
        self.checker = checker
        self.notifier = notifier
        self.interval_s = interval_s if interval_s is not None else settings.check_interval_s
        self.maintenance = MaintenanceWindow(settings.maintenance_start, settings.maintenance_end)
        tz = zone(settings.schedule_timezone)
        self._clock = clock or (lambda: datetime.now(tz))
        self._sleep = sleep
        self.found_count = 0
        self.check_count = 0

    async def run(self) -> int:
        """Loop until shutdown; always sends the shutdown notice on the way out."""
        started = self._clock()
        shutdown_at = (
            next_shutdown_time(started, self.settings.shutdown_time)
            if self.settings.shutdown_time is not None
            else None
        )
        logger.info(
            "Monitoring every %.0fs%s",
            self.interval_s,
            f" until {shutdown_at:%Y-%m-%d %H:%M}" if shutdown_at else "",
        )
        try:
            while True:
                now = self._clock()
                if shutdown_at is not None and now >= shutdown_at:
                    logger.info("Reached shutdown time %s", shutdown_at.strftime("%H:%M"))
                    break

                if self.maintenance.contains(now):
                    resume = self.maintenance.resume_at(now)
                    if shutdown_at is not None:
                        resume = min(resume, shutdown_at)
                    logger.info("Maintenance window; pausing until %s", resume.strftime("%H:%M"))
                    await self._sleep(max((resume - now).total_seconds(), 0.0))
                    continue

                await self.run_check()
                await self._sleep(self._next_delay(shutdown_at))
        finally:
            logger.info("Monitor stopped after %s checks (%s with seats)", self.check_count, self.found_count)
            await self.notifier.notify_shutdown(self.found_count)
        return self.found_count

    async def run_check(self) -> AvailabilityCheckResult:
        self.check_count += 1
        result = await self.checker.check(self.profile)
        if result.failed:
            logger.warning("Check #%s could not complete: %s", self.check_count, result.error)
            return result
        if result.has_availability:
            self.found_count += 1
            try:
                await self.notifier.notify_availability(result, self.profile)
            except NotificationError as exc:
                logger.error("Failed to send availability notification: %s", exc)
        return result

    def _next_delay(self, shutdown_at: Optional[datetime]) -> float:
        if shutdown_at is None:
            return self.interval_s
        remaining = (shutdown_at - self._clock()).total_seconds()
        return max(min(self.interval_s, remaining), 0.0)
