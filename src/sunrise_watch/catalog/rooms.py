"""Room category catalog helpers."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional


@dataclass(frozen=True)
class RoomCategory:
    """A bookable room type and the strings that identify it on the page."""

    key: str
    name: str
    form_value: Optional[str] = None
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def keyword_candidates(self) -> List[str]:
        """Canonical name followed by aliases, de-duplicated in declared order."""
        seen: set[str] = set()
        candidates: List[str] = []
        for keyword in (self.name, *self.aliases):
            if keyword in seen:
                continue
            seen.add(keyword)
            candidates.append(keyword)
        return candidates


DEFAULT_ROOM_CATEGORIES: tuple[RoomCategory, ...] = (
    RoomCategory(
        key="nobinovi",
        name="普通車 ノビノビ座席",
        form_value="普通車ノビノビ座席",
        aliases=("普通車 ノビノビ座席", "普通車ノビノビ座席", "ノビノビ座席"),
    ),
    RoomCategory(
        key="single_deluxe",
        name="A寝台個室 シングルデラックス",
        form_value="シングルデラックス",
        aliases=("A寝台個室 シングルデラックス", "シングルデラックス", "シングルデラックス A寝台個室"),
    ),
    RoomCategory(
        key="single_twin",
        name="B寝台個室 シングルツイン",
        form_value="シングルツイン",
        aliases=("B寝台個室 シングルツイン", "シングルツイン", "シングルツイン B寝台個室"),
    ),
    RoomCategory(
        key="single",
        name="B寝台個室 シングル",
        form_value="シングル",
        aliases=("B寝台個室 シングル", "シングル B寝台個室"),
    ),
    RoomCategory(
        key="solo",
        name="B寝台個室 ソロ",
        form_value="ソロ",
        aliases=("B寝台個室 ソロ", "ソロ B寝台個室", "ソロ"),
    ),
    RoomCategory(
        key="sunrise_twin",
        name="B寝台個室 サンライズツイン",
        form_value="サンライズツイン",
        aliases=("B寝台個室 サンライズツイン", "サンライズツイン", "サンライズツイン B寝台個室"),
    ),
)


class RoomCatalog:
    """Read-only lookup over room categories, built once per process."""

    def __init__(self, rooms: Mapping[str, RoomCategory], *, source: Optional[Path] = None) -> None:
        self._rooms = dict(rooms)
        self._source = source

    @property
    def source(self) -> Optional[Path]:
        return self._source

    def get(self, key: str) -> RoomCategory:
        try:
            return self._rooms[key]
        except KeyError as exc:
            known = ", ".join(self._rooms)
            origin = self._source or "built-in catalog"
            raise KeyError(f"Room type '{key}' not found in {origin}. Known keys: {known}") from exc

    def find(self, key: str) -> Optional[RoomCategory]:
        return self._rooms.get(key)

    def keys(self) -> List[str]:
        return list(self._rooms)

    def values(self) -> Iterable[RoomCategory]:
        return self._rooms.values()

    def __contains__(self, key: object) -> bool:
        return key in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    @classmethod
    def default(cls) -> "RoomCatalog":
        return cls({room.key: room for room in DEFAULT_ROOM_CATEGORIES})

    @classmethod
    def load(cls, path: Path) -> "RoomCatalog":
        """Load room categories from a JSON file shaped like ``{"rooms": [...]}``."""
        if not path.exists():
            raise FileNotFoundError(f"Room catalog not found at {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
        rooms: dict[str, RoomCategory] = {}
        for entry in data.get("rooms", []):
            room = RoomCategory(
                key=entry["key"],
                name=entry.get("name", entry["key"]),
                form_value=entry.get("form_value") or None,
                aliases=tuple(str(alias) for alias in entry.get("aliases", ()) if str(alias).strip()),
            )
            rooms[room.key] = room
        if not rooms:
            raise ValueError(f"Room catalog {path} does not define any rooms")
        return cls(rooms, source=path)

    @classmethod
    def from_settings(cls, path: Optional[Path]) -> "RoomCatalog":
        if path is None:
            return cls.default()
        return cls.load(path)
