"""Save the reservation page HTML for each train so lookups can be replayed offline.

Pair with ``scripts/analyze_page.py`` to see how every watched room resolves
against a captured page without touching the live site.
"""
from __future__ import annotations

import asyncio
import logging
from argparse import ArgumentParser, Namespace
from datetime import datetime
from pathlib import Path

from sunrise_watch.catalog.trains import TRAINS, get_train
from sunrise_watch.config.settings import Settings
from sunrise_watch.core.browser import BrowserSession, ensure_close_context, ensure_close_page
from sunrise_watch.core.logging import configure_logging
from sunrise_watch.tasks.reservation_page import PageLoadError, navigate_to_train_page

logger = logging.getLogger(__name__)


async def wait_for_user(prompt: str) -> None:
    await asyncio.to_thread(input, prompt)


async def main(args: Namespace) -> None:
    settings = Settings(headless=args.headless)
    configure_logging(settings.log_level, settings.log_dir)
    settings.ensure_directories()
    output_dir: Path = args.output or settings.capture_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    trains = [get_train(key) for key in args.train] if args.train else list(TRAINS)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    async with BrowserSession(settings) as session:
        context = await session.new_context()
        try:
            for train in trains:
                page = await context.new_page()
                try:
                    try:
                        url = await navigate_to_train_page(page, train, settings)
                    except PageLoadError as exc:
                        logger.error("Skipping %s: %s", train.name, exc)
                        continue
                    if args.interactive:
                        await wait_for_user(
                            f"Loaded {url} for {train.name}. Press Enter to capture... "
                        )
                    elif settings.page_settle_ms:
                        await page.wait_for_timeout(settings.page_settle_ms)

                    html = await page.content()
                    capture_path = output_dir / f"{train.key}_{timestamp}.html"
                    capture_path.write_text(html, encoding="utf-8")
                    logger.info("Saved %s page (%s chars) to %s", train.name, len(html), capture_path)
                    if args.screenshot:
                        screenshot_path = capture_path.with_suffix(".png")
                        await page.screenshot(path=str(screenshot_path), full_page=True)
                        logger.info("Screenshot saved to %s", screenshot_path)
                finally:
                    await ensure_close_page(page)
        finally:
            await ensure_close_context(context)


if __name__ == "__main__":
    parser = ArgumentParser(description="Capture Sunrise reservation pages for offline analysis")
    parser.add_argument(
        "--train",
        action="append",
        choices=[train.key for train in TRAINS],
        help="Train key to capture (repeatable; defaults to every train)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Directory for captured files")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run browser in headless mode (default false for interactive debugging)",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Wait for user input before saving each page",
    )
    parser.add_argument("--screenshot", action="store_true", help="Also save a full-page screenshot")
    cli_args = parser.parse_args()
    asyncio.run(main(cli_args))
