"""Outbound notification services."""

from .notifier import (
    DiscordWebhookNotifier,
    NotificationError,
    Notifier,
    SoundNotifier,
    build_notifier,
)

__all__ = [
    "DiscordWebhookNotifier",
    "NotificationError",
    "Notifier",
    "SoundNotifier",
    "build_notifier",
]
