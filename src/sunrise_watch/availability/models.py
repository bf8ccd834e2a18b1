"""Dataclasses describing availability signals and check results."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from sunrise_watch.catalog.rooms import RoomCategory
from sunrise_watch.catalog.trains import Train


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        """Merge precedence: available > unavailable > unknown."""
        return _STATUS_RANK[self]


_STATUS_RANK = {
    AvailabilityStatus.AVAILABLE: 2,
    AvailabilityStatus.UNAVAILABLE: 1,
    AvailabilityStatus.UNKNOWN: 0,
}


@dataclass(frozen=True, slots=True)
class TextClassification:
    """Outcome of matching text against the keyword vocabulary."""

    status: AvailabilityStatus
    keyword: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AvailabilityResolution:
    """A status plus the raw text that justified it."""

    status: AvailabilityStatus
    indicator: Optional[str] = None

    @classmethod
    def unknown(cls) -> "AvailabilityResolution":
        return cls(AvailabilityStatus.UNKNOWN)

    @property
    def is_known(self) -> bool:
        return self.status is not AvailabilityStatus.UNKNOWN


@dataclass(frozen=True, slots=True)
class RowSnapshot:
    """Signals already extracted from one candidate table row.

    ``icon_indicators`` keeps row order; the resolver relies on it.
    """

    icon_indicators: tuple[str, ...] = ()
    attribute_indicators: tuple[str, ...] = ()
    text_content: Optional[str] = None

    @classmethod
    def build(
        cls,
        icon_indicators: Iterable[str] = (),
        attribute_indicators: Iterable[str] = (),
        text_content: Optional[str] = None,
    ) -> "RowSnapshot":
        return cls(tuple(icon_indicators), tuple(attribute_indicators), text_content)


@dataclass(frozen=True, slots=True)
class RoomAvailability:
    """Resolved status for one room category within one train."""

    room: RoomCategory
    status: AvailabilityStatus
    indicator: Optional[str] = None
    train: Optional[Train] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "room_type": self.room.key,
            "room_name": self.room.name,
            "train": self.train.key if self.train else None,
            "status": self.status.value,
            "indicator": self.indicator,
        }


@dataclass(frozen=True, slots=True)
class TrainAvailability:
    """Per-train breakdown of room statuses."""

    train: Train
    rooms: tuple[RoomAvailability, ...] = ()

    @property
    def available_rooms(self) -> List[RoomAvailability]:
        return [room for room in self.rooms if room.status is AvailabilityStatus.AVAILABLE]

    def to_dict(self) -> dict[str, object]:
        return {
            "train": self.train.key,
            "train_name": self.train.name,
            "rooms": [room.to_dict() for room in self.rooms],
        }


@dataclass(frozen=True, slots=True)
class AvailabilityCheckResult:
    """Aggregated outcome of one availability check across trains."""

    trains: tuple[TrainAvailability, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @classmethod
    def failed_with(cls, error: str) -> "AvailabilityCheckResult":
        return cls(trains=(), error=error)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def has_availability(self) -> bool:
        return any(train.available_rooms for train in self.trains)

    @property
    def available_rooms(self) -> List[str]:
        """Room keys available in any train, de-duplicated in first-seen order."""
        keys: List[str] = []
        for train in self.trains:
            for room in train.available_rooms:
                if room.room.key not in keys:
                    keys.append(room.room.key)
        return keys

    def available_by_train(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for train in self.trains:
            rooms = [room.room.key for room in train.available_rooms]
            if rooms:
                grouped[train.train.key] = list(dict.fromkeys(rooms))
        return grouped

    def to_dict(self) -> dict[str, object]:
        return {
            "has_availability": self.has_availability,
            "available_rooms": self.available_rooms,
            "available_by_train": self.available_by_train(),
            "trains": [train.to_dict() for train in self.trains],
            "error": self.error,
        }
