"""Extraction of raw availability signals from a table row."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from sunrise_watch.availability.models import RowSnapshot
from sunrise_watch.selectors.reservation_page import (
    ATTRIBUTE_LABELS_SCRIPT,
    ICON_LABELS_SCRIPT,
    ReservationSelectors,
)

logger = logging.getLogger(__name__)


class RowSignalSource(Protocol):
    async def snapshot(self, row: Locator) -> Optional[RowSnapshot]:
        ...


class PlaywrightRowSignalSource:
    """Reads icon labels, attribute labels and visible text from a live row."""

    async def snapshot(self, row: Locator) -> Optional[RowSnapshot]:
        try:
            icons = await row.locator(ReservationSelectors.row_icons).evaluate_all(ICON_LABELS_SCRIPT)
            attributes = await row.evaluate(ATTRIBUTE_LABELS_SCRIPT)
            text = await row.inner_text()
        except PlaywrightError as exc:
            # A row that detached mid-read is treated as "no signal".
            logger.debug("Skipping row snapshot: %s", exc)
            return None
        return RowSnapshot.build(
            icon_indicators=[str(icon) for icon in icons or ()],
            attribute_indicators=[str(value) for value in attributes or ()],
            text_content=(text or "").strip() or None,
        )
