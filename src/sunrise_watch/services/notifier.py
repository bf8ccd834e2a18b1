"""Notification channels for seat availability and monitor shutdown."""
from __future__ import annotations

import asyncio
import json
import logging
import shlex
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

import httpx

from sunrise_watch.availability.models import AvailabilityCheckResult
from sunrise_watch.catalog.rooms import RoomCatalog
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "サンライズ 空席通知"
SHUTDOWN_TITLE = "🛑 監視終了"
TEST_MESSAGE = "テスト通知: サンライズ監視システムが正常に起動しました。"

_COLOR_AVAILABLE = 0x00FF00
_COLOR_SHUTDOWN_FOUND = 0x0099FF
_COLOR_SHUTDOWN_NONE = 0x999999

_LINUX_SOUND_COMMAND = (
    "paplay /usr/share/sounds/freedesktop/stereo/complete.oga 2>/dev/null"
    " || beep -f 1000 -l 500 -r 3 2>/dev/null"
    " || printf '\\a'"
)
_MAC_SOUND_COMMAND = "afplay /System/Library/Sounds/Glass.aiff"
_WINDOWS_SOUND_COMMAND = (
    'powershell -c (New-Object Media.SoundPlayer "C:\\Windows\\Media\\notify.wav").PlaySync();'
)


class NotificationError(RuntimeError):
    """Raised when a notification could not be delivered."""


class Notifier(Protocol):
    async def verify(self) -> None:
        ...

    async def notify_availability(self, result: AvailabilityCheckResult, profile: WatchProfile) -> None:
        ...

    async def notify_shutdown(self, found_count: int) -> None:
        ...


def _room_name(catalog: RoomCatalog, key: str) -> str:
    room = catalog.find(key)
    return room.name if room else key


def format_availability_message(
    result: AvailabilityCheckResult,
    catalog: RoomCatalog,
    profile: Optional[WatchProfile] = None,
) -> str:
    """Headline with de-duplicated room names, then the per-train breakdown."""
    room_names = ", ".join(_room_name(catalog, key) for key in result.available_rooms)
    lines = [f"空席が見つかりました！\n{room_names}"]
    if profile is not None:
        lines.append(f"区間: {profile.departure_station} → {profile.arrival_station}")
        lines.append(f"日付: {profile.travel_date.isoformat()}")
    for train in result.trains:
        available = [room.room.name for room in train.available_rooms]
        if available:
            lines.append(f"{train.train.name}: {', '.join(dict.fromkeys(available))}")
    return "\n".join(lines)


def format_shutdown_message(found_count: int) -> str:
    if found_count > 0:
        return f"監視を終了しました。\n空席発見回数: {found_count}回"
    return "監視を終了しました。\n空席は見つかりませんでした。"


class DiscordWebhookNotifier:
    """Posts embeds to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        *,
        catalog: RoomCatalog,
        reservation_url: Optional[str] = None,
        timeout: float = 15.0,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        if not webhook_url:
            raise ValueError("Discord webhook URL must be provided")
        self.webhook_url = webhook_url
        self.catalog = catalog
        self.reservation_url = reservation_url
        self.timeout = timeout
        self._clock = clock

    def build_payload(self, message: str, *, url: Optional[str] = None) -> dict[str, Any]:
        description = f"{message}\n\n**予約URL:**\n{url}" if url else message
        embed: dict[str, Any] = {
            "title": f"🎉 {NOTIFICATION_TITLE}",
            "description": description,
            "color": _COLOR_AVAILABLE,
            "timestamp": self._clock().isoformat(),
        }
        if url:
            embed["url"] = url
        return {
            "content": f"@here {message}" if url else message,
            "embeds": [embed],
        }

    async def _post(self, payload: dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationError(
                f"Discord webhook returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationError(f"Discord webhook request failed: {exc}") from exc

    async def verify(self) -> None:
        logger.info("Sending Discord webhook test message")
        await self._post(self.build_payload(TEST_MESSAGE))
        logger.info("Discord webhook test succeeded")

    async def notify_availability(self, result: AvailabilityCheckResult, profile: WatchProfile) -> None:
        message = format_availability_message(result, self.catalog, profile)
        await self._post(self.build_payload(message, url=self.reservation_url))
        logger.info("Sent availability notification to Discord")

    async def notify_shutdown(self, found_count: int) -> None:
        payload = {
            "embeds": [
                {
                    "title": SHUTDOWN_TITLE,
                    "description": format_shutdown_message(found_count),
                    "color": _COLOR_SHUTDOWN_FOUND if found_count > 0 else _COLOR_SHUTDOWN_NONE,
                    "timestamp": self._clock().isoformat(),
                }
            ]
        }
        try:
            await self._post(payload)
        except NotificationError as exc:
            logger.error("Failed to send shutdown notification: %s", exc)


def sound_command(platform: str = sys.platform) -> Optional[str]:
    if platform.startswith("linux"):
        return _LINUX_SOUND_COMMAND
    if platform == "darwin":
        return _MAC_SOUND_COMMAND
    if platform in ("win32", "cygwin"):
        return _WINDOWS_SOUND_COMMAND
    return None


def toast_command(title: str, message: str, platform: str = sys.platform) -> Optional[str]:
    if platform.startswith("linux"):
        return f"notify-send --urgency=critical {shlex.quote(title)} {shlex.quote(message)}"
    if platform == "darwin":
        quoted_message = json.dumps(message, ensure_ascii=False)
        quoted_title = json.dumps(title, ensure_ascii=False)
        script = f"display notification {quoted_message} with title {quoted_title}"
        return f"osascript -e {shlex.quote(script)}"
    return None


class SoundNotifier:
    """Shows a desktop notification, plays a local alert sound and logs the message."""

    def __init__(self, *, catalog: RoomCatalog, platform: str = sys.platform) -> None:
        self.catalog = catalog
        self.platform = platform

    @staticmethod
    async def _run(command: str) -> int:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        return await process.wait()

    async def show_toast(self, message: str) -> bool:
        command = toast_command(NOTIFICATION_TITLE, message, self.platform)
        if command is None:
            return False
        try:
            returncode = await self._run(command)
        except OSError as exc:
            logger.debug("Unable to show desktop notification: %s", exc)
            return False
        if returncode != 0:
            logger.debug("Desktop notification command exited with %s", returncode)
        return returncode == 0

    async def play(self) -> None:
        command = sound_command(self.platform)
        if command is None:
            self._bell()
            return
        try:
            returncode = await self._run(command)
        except OSError as exc:
            logger.warning("Unable to play alert sound: %s", exc)
            self._bell()
            return
        if returncode != 0:
            logger.debug("Alert sound command exited with %s", returncode)
            self._bell()

    @staticmethod
    def _bell() -> None:
        sys.stdout.write("\a\a\a")
        sys.stdout.flush()

    async def verify(self) -> None:
        return None

    async def notify_availability(self, result: AvailabilityCheckResult, profile: WatchProfile) -> None:
        message = format_availability_message(result, self.catalog, profile)
        logger.warning("%s\n%s", NOTIFICATION_TITLE, message)
        await self.show_toast(message)
        await self.play()

    async def notify_shutdown(self, found_count: int) -> None:
        logger.info("%s", format_shutdown_message(found_count).replace("\n", " "))


def build_notifier(
    profile: WatchProfile,
    settings: Settings,
    catalog: Optional[RoomCatalog] = None,
) -> Notifier:
    if catalog is None:
        catalog = RoomCatalog.from_settings(settings.room_catalog_path)
    if profile.notification_type == "discord" and profile.discord_webhook_url:
        return DiscordWebhookNotifier(
            profile.discord_webhook_url,
            catalog=catalog,
            reservation_url=settings.form_url,
            timeout=settings.webhook_timeout_s,
        )
    return SoundNotifier(catalog=catalog)
