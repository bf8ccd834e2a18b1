"""Optional playwright-stealth evasions for the reservation page session.

See: https://github.com/mattwmaster58/playwright_stealth
"""
from __future__ import annotations

from contextlib import AbstractAsyncContextManager

from playwright.async_api import BrowserContext, async_playwright
from playwright_stealth import Stealth

from sunrise_watch.config.settings import Settings


class StealthManager:
    """Acquires Playwright, applying stealth evasions only when configured."""

    def __init__(self, settings: Settings) -> None:
        self.enabled = settings.stealth_enabled
        self._stealth = Stealth(**settings.stealth_kwargs()) if self.enabled else None

    def playwright(self) -> AbstractAsyncContextManager:
        if self._stealth is None:
            return async_playwright()
        return self._stealth.use_async(async_playwright())

    async def apply(self, context: BrowserContext) -> None:
        if self._stealth is None:
            return
        await self._stealth.apply_stealth_async(context)
