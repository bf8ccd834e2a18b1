"""The user's watch profile: which journey and rooms to monitor, and how to notify."""
from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from sunrise_watch.catalog.trains import ARRIVAL_STATIONS, DEPARTURE_STATIONS, Train, determine_trains_to_search

logger = logging.getLogger(__name__)

NotificationType = Literal["sound", "discord"]


class WatchProfile(BaseModel):
    """Persisted answers from the interactive setup.

    Stored as camelCase JSON so profiles written by earlier releases still load.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    departure_station: str
    arrival_station: str
    travel_date: date = Field(alias="date")
    room_types: List[str] = Field(min_length=1)
    notification_type: NotificationType = "sound"
    discord_webhook_url: Optional[str] = None

    @field_validator("departure_station")
    @classmethod
    def _known_departure(cls, value: str) -> str:
        value = value.strip()
        if value not in DEPARTURE_STATIONS:
            raise ValueError(f"Unknown departure station '{value}'")
        return value

    @field_validator("arrival_station")
    @classmethod
    def _known_arrival(cls, value: str) -> str:
        value = value.strip()
        if value not in ARRIVAL_STATIONS:
            raise ValueError(f"Unknown arrival station '{value}'")
        return value

    @field_validator("room_types", mode="before")
    @classmethod
    def _coerce_room_types(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return list(dict.fromkeys(str(item).strip() for item in value if str(item).strip()))
        return value

    @field_validator("discord_webhook_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _validate_route_and_channel(self) -> "WatchProfile":
        if self.departure_station == self.arrival_station:
            raise ValueError("departure and arrival stations must differ")
        if self.notification_type == "discord" and not self.discord_webhook_url:
            raise ValueError("discord notifications require a webhook URL")
        return self

    def trains(self) -> tuple[Train, ...]:
        return determine_trains_to_search(self.departure_station, self.arrival_station)

    def to_json(self) -> str:
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(payload, ensure_ascii=False, indent=2)


def load_profile(path: Path) -> Optional[WatchProfile]:
    """Return the saved profile, or ``None`` when absent or unreadable."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return WatchProfile.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring invalid watch profile at %s: %s", path, exc)
        return None


def save_profile(profile: WatchProfile, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(profile.to_json() + "\n", encoding="utf-8")
    logger.info("Saved watch profile to %s", path)
    return path


__all__ = ["NotificationType", "WatchProfile", "load_profile", "save_profile"]
