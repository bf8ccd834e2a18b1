"""Navigation and scoping helpers for the reservation form page."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from sunrise_watch.availability.normalizer import normalize_for_search
from sunrise_watch.catalog.trains import Train
from sunrise_watch.config.settings import Settings
from sunrise_watch.selectors.reservation_page import ReservationSelectors

logger = logging.getLogger(__name__)


class PageLoadError(RuntimeError):
    """Raised when the reservation page could not be loaded."""


def candidate_urls(form_url: str, train: Train) -> list[str]:
    return [
        f"{form_url}?train={train.key}",
        f"{form_url}#{train.key}",
        form_url,
    ]


async def navigate_to_train_page(page: Page, train: Train, settings: Settings) -> str:
    """Open the first candidate URL that loads; return it."""
    last_error: Optional[PlaywrightError] = None
    for url in candidate_urls(settings.form_url, train):
        try:
            response = await page.goto(
                url,
                wait_until="networkidle",
                timeout=settings.navigation_timeout_ms,
            )
        except PlaywrightError as exc:
            logger.debug("Navigation to %s failed: %s", url, exc)
            last_error = exc
            continue
        if response is None or response.ok:
            logger.debug("Loaded %s for %s", url, train.name)
            return url
        logger.debug("Navigation to %s returned HTTP %s", url, response.status)

    if last_error is not None:
        raise PageLoadError(f"Failed to load reservation page for {train.key}: {last_error}") from last_error
    raise PageLoadError(f"Failed to load reservation page for {train.key}")


async def find_train_scope(page: Page, train: Train, other_trains: Iterable[Train]) -> Locator:
    """Narrow the page to the element that mentions ``train`` and no other train.

    Falls back to ``body`` when no such element exists.
    """
    other_labels = [other.name for other in other_trains if other.key != train.key]
    for tag in ReservationSelectors.train_scope_tags:
        scoped = page.locator(ReservationSelectors.train_scope(tag, train.name))
        count = await scoped.count()
        for index in range(count):
            element = scoped.nth(index)
            try:
                text = (await element.inner_text()).strip()
            except PlaywrightError:
                continue
            if not text:
                continue
            if not any(label in text for label in other_labels):
                logger.debug("Using <%s> #%s as scope for %s", tag, index, train.name)
                return element
    return page.locator(ReservationSelectors.body)


async def normalized_inner_html(scope: Locator) -> str:
    try:
        html = await scope.inner_html()
    except PlaywrightError as exc:
        logger.debug("Unable to read scope HTML: %s", exc)
        return ""
    return normalize_for_search(html) if html else ""
