"""Interactive collection of a watch profile on the terminal."""
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from sunrise_watch.catalog.rooms import RoomCatalog
from sunrise_watch.catalog.trains import ARRIVAL_STATIONS, DEPARTURE_STATIONS
from sunrise_watch.config.watch_profile import WatchProfile, save_profile

Ask = Callable[[str], str]
Echo = Callable[[str], None]
# Either a bare value or a (label, value) pair.
Option = Union[str, Tuple[str, str]]

NOTIFICATION_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("Desktop sound", "sound"),
    ("Discord webhook", "discord"),
)


def _label(option: Option) -> str:
    return option if isinstance(option, str) else option[0]


def _value(option: Option) -> str:
    return option if isinstance(option, str) else option[1]


def _parse_index(answer: str, size: int) -> Optional[int]:
    try:
        index = int(answer.strip()) - 1
    except ValueError:
        return None
    if 0 <= index < size:
        return index
    return None


def _confirm(ask: Ask, prompt: str) -> bool:
    return ask(prompt).strip().lower() in ("y", "yes")


def select_one(options: Sequence[Option], prompt: str, *, ask: Ask = input, echo: Echo = print) -> str:
    echo(f"\n{prompt}")
    for number, option in enumerate(options, start=1):
        echo(f"{number}. {_label(option)}")
    while True:
        index = _parse_index(ask("\nEnter a number: "), len(options))
        if index is not None:
            return _value(options[index])
        echo("Invalid number, please try again.")


def select_many(options: Sequence[Option], prompt: str, *, ask: Ask = input, echo: Echo = print) -> List[str]:
    """Collect one or more choices; comma-separated numbers, blank line to finish."""
    echo(f"\n{prompt}")
    for number, option in enumerate(options, start=1):
        echo(f"{number}. {_label(option)}")

    selected: List[str] = []
    while True:
        answer = ask("\nEnter numbers (comma-separated, blank line when done): ")
        if not answer.strip():
            if not selected:
                echo("Select at least one option.")
                continue
            return selected

        indices = [_parse_index(part, len(options)) for part in answer.split(",")]
        if any(index is None for index in indices):
            echo(f"Invalid selection: {answer.strip()}")
            continue
        for index in indices:
            value = _value(options[index])  # type: ignore[index]
            if value not in selected:
                selected.append(value)

        echo("\nCurrently selected:")
        for value in selected:
            label = next((_label(option) for option in options if _value(option) == value), value)
            echo(f"  - {label}")
        echo("Add more, or press Enter to confirm.")


def _ask_date(ask: Ask, echo: Echo) -> date:
    while True:
        answer = ask("\nTravel date (YYYY-MM-DD, e.g. 2025-11-15): ").strip()
        try:
            return date.fromisoformat(answer)
        except ValueError:
            echo(f"'{answer}' is not a valid date.")


def collect_profile(
    saved: Optional[WatchProfile],
    catalog: RoomCatalog,
    *,
    ask: Ask = input,
    echo: Echo = print,
    save_path: Optional[Path] = None,
) -> WatchProfile:
    """Reuse ``saved`` if the user agrees, otherwise prompt for a new profile."""
    if saved is not None:
        echo("\nSaved profile:")
        echo(saved.to_json())
        if _confirm(ask, "\nUse the saved profile? (y/n): "):
            return saved

    while True:
        notification_type = select_one(NOTIFICATION_OPTIONS, "Notification method:", ask=ask, echo=echo)
        webhook_url: Optional[str] = None
        if notification_type == "discord":
            webhook_url = ask("\nDiscord webhook URL: ").strip()

        departure = select_one(DEPARTURE_STATIONS, "Departure station:", ask=ask, echo=echo)
        arrival = select_one(ARRIVAL_STATIONS, "Arrival station:", ask=ask, echo=echo)
        travel_date = _ask_date(ask, echo)
        room_options = [(room.name, room.key) for room in catalog.values()]
        room_types = select_many(room_options, "Room types to watch:", ask=ask, echo=echo)

        try:
            profile = WatchProfile(
                departure_station=departure,
                arrival_station=arrival,
                travel_date=travel_date,
                room_types=room_types,
                notification_type=notification_type,
                discord_webhook_url=webhook_url,
            )
        except ValidationError as exc:
            for error in exc.errors():
                echo(f"Invalid profile: {error['msg']}")
            continue
        break

    if save_path is not None and _confirm(ask, "\nSave this profile? (y/n): "):
        save_profile(profile, save_path)
        echo(f"Saved to {save_path}.")
    return profile


__all__ = ["collect_profile", "select_many", "select_one"]
