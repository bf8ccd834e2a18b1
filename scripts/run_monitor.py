"""Entry point for the seat watcher."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from sunrise_watch.catalog.rooms import RoomCatalog
from sunrise_watch.config.prompts import collect_profile
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile, load_profile
from sunrise_watch.core.logging import configure_logging
from sunrise_watch.runtime.monitor import Monitor
from sunrise_watch.services.notifier import NotificationError, build_notifier
from sunrise_watch.tasks.availability_check import AvailabilityChecker

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch Sunrise Seto/Izumo for free compartments")
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Path to the saved watch profile (defaults to SUNRISE_PROFILE_PATH or settings.json)",
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--headed",
        action="store_true",
        help="Force headed browser mode (overrides env)",
    )
    mode_group.add_argument(
        "--headless",
        action="store_true",
        help="Force headless browser mode (overrides env)",
    )
    parser.add_argument(
        "--override",
        action="append",
        metavar="KEY=VALUE",
        help="Override a Settings attribute (repeatable). Values accept JSON literals.",
    )

    commands = parser.add_subparsers(dest="command")
    start = commands.add_parser("start", help="Monitor until the nightly shutdown time")
    start.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between checks (defaults to SUNRISE_CHECK_INTERVAL_S)",
    )
    commands.add_parser("config", help="Show or re-enter the watch profile")
    commands.add_parser("check", help="Run a single check and print the result as JSON")
    return parser


def _decode_override(value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        pass
    lower = value.strip().lower()
    if lower in {"true", "false"}:
        return lower == "true"
    try:
        return float(value)
    except ValueError:
        return value


def _apply_overrides(settings: Settings, overrides: dict[str, object]) -> None:
    for key, raw in overrides.items():
        if not hasattr(settings, key):
            logger.warning("Ignoring unknown override '%s'", key)
            continue
        setattr(settings, key, raw)
        logger.info("Override: set %s=%r", key, raw)


def _resolve_profile(settings: Settings, catalog: RoomCatalog) -> WatchProfile:
    """Use the saved profile as-is when nobody is at the terminal to confirm it."""
    saved = load_profile(settings.profile_path)
    if saved is not None and not sys.stdin.isatty():
        return saved
    return collect_profile(saved, catalog, save_path=settings.profile_path)


async def _start(settings: Settings, profile: WatchProfile, catalog: RoomCatalog, interval: Optional[float]) -> int:
    notifier = build_notifier(profile, settings, catalog)
    try:
        await notifier.verify()
    except NotificationError as exc:
        logger.error("Notification channel check failed: %s", exc)
        return 1

    checker = AvailabilityChecker(settings, catalog)
    monitor = Monitor(settings, profile, checker, notifier, interval_s=interval)

    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    if task is not None:
        try:
            loop.add_signal_handler(signal.SIGTERM, task.cancel)
        except (NotImplementedError, RuntimeError):
            logger.debug("SIGTERM handler not supported on this platform")

    try:
        found = await monitor.run()
    except asyncio.CancelledError:
        logger.info("Monitor cancelled")
        return 0
    logger.info("Seats were found in %s check(s)", found)
    return 0


async def _check(settings: Settings, profile: WatchProfile, catalog: RoomCatalog) -> int:
    checker = AvailabilityChecker(settings, catalog)
    result = await checker.check(profile)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 1 if result.failed else 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()
    overrides: dict[str, object] = {}

    if args.override:
        for entry in args.override:
            if "=" not in entry:
                parser.error(f"Override must be in KEY=VALUE form (got '{entry}')")
            key, value = entry.split("=", 1)
            overrides[key.strip()] = _decode_override(value.strip())

    if args.headed:
        settings.headless = False
    elif args.headless:
        settings.headless = True
    if args.profile is not None:
        settings.profile_path = args.profile
    if overrides:
        try:
            _apply_overrides(settings, overrides)
        except ValidationError as exc:
            parser.error(f"Invalid override: {exc}")

    configure_logging(settings.log_level, settings.log_dir)
    settings.ensure_directories()
    catalog = RoomCatalog.from_settings(settings.room_catalog_path)

    command = args.command or "start"
    if command == "config":
        collect_profile(load_profile(settings.profile_path), catalog, save_path=settings.profile_path)
        return 0

    profile = _resolve_profile(settings, catalog)
    if command == "check":
        return asyncio.run(_check(settings, profile, catalog))
    try:
        return asyncio.run(_start(settings, profile, catalog, getattr(args, "interval", None)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
