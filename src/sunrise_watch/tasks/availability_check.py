"""One availability check cycle across the trains serving a journey."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from sunrise_watch.availability.models import (
    AvailabilityCheckResult,
    AvailabilityStatus,
    RoomAvailability,
    TrainAvailability,
)
from sunrise_watch.availability.normalizer import normalize_for_search
from sunrise_watch.catalog.rooms import RoomCatalog, RoomCategory
from sunrise_watch.catalog.trains import TRAINS, Train
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile
from sunrise_watch.core.browser import BrowserSession, ensure_close_context, ensure_close_page
from sunrise_watch.tasks.reservation_page import (
    PageLoadError,
    find_train_scope,
    navigate_to_train_page,
    normalized_inner_html,
)
from sunrise_watch.tasks.room_lookup import RoomLookup
from sunrise_watch.utils.retry import RetryExhaustedError, Sleep, run_with_retries

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    AvailabilityStatus.AVAILABLE: "available",
    AvailabilityStatus.UNAVAILABLE: "sold out",
    AvailabilityStatus.UNKNOWN: "undetermined",
}


class AvailabilityChecker:
    """Loads the reservation page per train and resolves every watched room."""

    def __init__(
        self,
        settings: Settings,
        catalog: RoomCatalog,
        *,
        lookup: Optional[RoomLookup] = None,
        session_factory: Callable[[Settings], BrowserSession] = BrowserSession,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.catalog = catalog
        self.lookup = lookup or RoomLookup(window_radius=settings.window_radius)
        self._session_factory = session_factory
        self._sleep = sleep

    def watched_rooms(self, profile: WatchProfile) -> List[RoomCategory]:
        rooms: List[RoomCategory] = []
        for key in profile.room_types:
            room = self.catalog.find(key)
            if room is None:
                logger.warning("Skipping undefined room type '%s'", key)
                continue
            rooms.append(room)
        return rooms

    async def check(self, profile: WatchProfile) -> AvailabilityCheckResult:
        """Run one check with retries; never raises for page or browser failures."""
        trains = profile.trains()
        rooms = self.watched_rooms(profile)
        logger.info(
            "Checking %s -> %s on %s (%s)",
            profile.departure_station,
            profile.arrival_station,
            profile.travel_date.isoformat(),
            ", ".join(train.name for train in trains),
        )
        try:
            result = await run_with_retries(
                lambda: self.check_once(trains, rooms),
                attempts=self.settings.max_retries,
                delay_s=self.settings.retry_delay_s,
                retry_on=(PlaywrightError, PageLoadError),
                sleep=self._sleep,
                label="availability check",
            )
        except RetryExhaustedError as exc:
            logger.error("All availability check attempts failed: %s", exc.last_error)
            return AvailabilityCheckResult.failed_with(str(exc.last_error))

        if result.has_availability:
            logger.info("Seats found: %s", result.available_by_train())
        else:
            logger.info("No seats available")
        return result

    async def check_once(self, trains: Sequence[Train], rooms: Sequence[RoomCategory]) -> AvailabilityCheckResult:
        breakdown: List[TrainAvailability] = []
        async with self._session_factory(self.settings) as session:
            context: BrowserContext = await session.new_context()
            try:
                for train in trains:
                    page = await context.new_page()
                    try:
                        breakdown.append(await self._check_train(page, train, rooms))
                    finally:
                        await ensure_close_page(page)
            finally:
                await ensure_close_context(context)
        return AvailabilityCheckResult(trains=tuple(breakdown))

    async def _check_train(
        self,
        page: Page,
        train: Train,
        rooms: Sequence[RoomCategory],
    ) -> TrainAvailability:
        logger.info("Checking seats on %s", train.name)
        await navigate_to_train_page(page, train, self.settings)
        if self.settings.page_settle_ms:
            await page.wait_for_timeout(self.settings.page_settle_ms)

        html = await page.content()
        if not html:
            raise PageLoadError(f"Reservation page for {train.key} was empty")

        scope = await find_train_scope(page, train, TRAINS)
        normalized_html = await normalized_inner_html(scope) or normalize_for_search(html)

        statuses: List[RoomAvailability] = []
        for room in rooms:
            resolution = await self.lookup.resolve(scope, room, normalized_html=normalized_html)
            statuses.append(
                RoomAvailability(
                    room=room,
                    status=resolution.status,
                    indicator=resolution.indicator,
                    train=train,
                )
            )
        self._log_breakdown(train, statuses)
        return TrainAvailability(train=train, rooms=tuple(statuses))

    @staticmethod
    def _log_breakdown(train: Train, statuses: Sequence[RoomAvailability]) -> None:
        if not statuses:
            return
        logger.info("Results for %s:", train.name)
        for status in statuses:
            suffix = f" (indicator: {status.indicator})" if status.indicator else ""
            logger.info("  - %s: %s%s", status.room.name, _STATUS_LABELS[status.status], suffix)
