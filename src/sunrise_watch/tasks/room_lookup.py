"""Locate the rows describing a room category and resolve their availability."""
from __future__ import annotations

import logging
from typing import List, Optional

from playwright.async_api import Locator

from sunrise_watch.availability.classifier import (
    DEFAULT_WINDOW_RADIUS,
    classify_near_keyword,
    classify_text,
)
from sunrise_watch.availability.models import AvailabilityResolution, AvailabilityStatus
from sunrise_watch.availability.resolver import resolve_snapshot, select_best
from sunrise_watch.catalog.rooms import RoomCategory
from sunrise_watch.selectors.reservation_page import ReservationSelectors
from sunrise_watch.tasks.row_signals import PlaywrightRowSignalSource, RowSignalSource

logger = logging.getLogger(__name__)


class RoomLookup:
    """Resolves one room within a page scope, falling back through three strategies.

    1. the row holding the room's ``facilitySelect`` radio button;
    2. every row whose text contains one of the room's keyword aliases;
    3. a windowed keyword search over the scope's normalised HTML.
    """

    def __init__(
        self,
        signal_source: Optional[RowSignalSource] = None,
        *,
        window_radius: int = DEFAULT_WINDOW_RADIUS,
    ) -> None:
        self.signal_source = signal_source or PlaywrightRowSignalSource()
        self.window_radius = window_radius

    async def resolve(
        self,
        scope: Locator,
        room: RoomCategory,
        *,
        normalized_html: str = "",
    ) -> AvailabilityResolution:
        resolution = await self.resolve_from_form_control(scope, room)
        if resolution.is_known:
            logger.debug("%s resolved via form control: %s", room.key, resolution)
            return resolution

        resolution = await self.resolve_from_keyword_rows(scope, room)
        if resolution.is_known:
            logger.debug("%s resolved via keyword rows: %s", room.key, resolution)
            return resolution

        resolution = self.resolve_from_html(normalized_html, room)
        if resolution.is_known:
            logger.debug("%s resolved via page text window: %s", room.key, resolution)
        return resolution

    async def resolve_from_form_control(self, scope: Locator, room: RoomCategory) -> AvailabilityResolution:
        if not room.form_value:
            return AvailabilityResolution.unknown()
        radio = scope.locator(ReservationSelectors.facility_radio(room.form_value))
        if not await radio.count():
            return AvailabilityResolution.unknown()

        rows = radio.locator(ReservationSelectors.row_ancestor)
        best = select_best(await self._resolve_rows(rows))
        if best.is_known:
            return best

        # Layouts without a wrapping row put the status icon right after the radio.
        icon = radio.locator(ReservationSelectors.following_icon)
        if await icon.count():
            alt = ((await icon.first.get_attribute("alt")) or "").strip()
            analysis = classify_text(alt)
            if alt and analysis.status is not AvailabilityStatus.UNKNOWN:
                return AvailabilityResolution(analysis.status, alt)
        return AvailabilityResolution.unknown()

    async def resolve_from_keyword_rows(self, scope: Locator, room: RoomCategory) -> AvailabilityResolution:
        resolutions: List[AvailabilityResolution] = []
        for candidate in room.keyword_candidates():
            if not candidate.strip():
                continue
            rows = scope.locator(ReservationSelectors.row, has_text=candidate)
            resolutions.extend(await self._resolve_rows(rows))
        return select_best(resolutions)

    def resolve_from_html(self, normalized_html: str, room: RoomCategory) -> AvailabilityResolution:
        return classify_near_keyword(
            normalized_html,
            room.keyword_candidates(),
            radius=self.window_radius,
        )

    async def _resolve_rows(self, rows: Locator) -> List[AvailabilityResolution]:
        resolutions: List[AvailabilityResolution] = []
        count = await rows.count()
        for index in range(count):
            snapshot = await self.signal_source.snapshot(rows.nth(index))
            if snapshot is None:
                continue
            resolutions.append(resolve_snapshot(snapshot))
        return resolutions
