"""Train and station reference data for the Sunrise Seto / Izumo services."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Train:
    """A train whose section of the reservation page is scanned separately."""

    key: str
    name: str


SETO = Train(key="seto", name="サンライズ瀬戸")
IZUMO = Train(key="izumo", name="サンライズ出雲")

TRAINS: tuple[Train, ...] = (SETO, IZUMO)
TRAINS_BY_KEY: dict[str, Train] = {train.key: train for train in TRAINS}

DEPARTURE_STATIONS: tuple[str, ...] = (
    "東京", "横浜", "小田原", "熱海", "沼津", "富士", "静岡", "浜松",
    "姫路", "三ノ宮", "大阪", "京都",
)

ARRIVAL_STATIONS: tuple[str, ...] = (
    "東京", "横浜", "小田原", "熱海", "沼津", "富士", "静岡", "浜松",
    "姫路", "三ノ宮", "大阪", "京都", "岡山", "高松", "出雲市",
)

# Tokyo-Okayama stretch shared by both trains before they split.
_COMMON_ROUTE_STATIONS = frozenset(
    {
        "東京", "横浜", "小田原", "熱海", "沼津", "富士", "静岡", "浜松",
        "姫路", "三ノ宮", "大阪", "京都", "岡山",
    }
)
_SETO_TERMINAL = "高松"
_IZUMO_TERMINAL = "出雲市"


def determine_trains_to_search(departure: str, arrival: str) -> tuple[Train, ...]:
    """Return the trains that serve the given station pair."""
    if departure in _COMMON_ROUTE_STATIONS and arrival in _COMMON_ROUTE_STATIONS:
        return TRAINS
    if _SETO_TERMINAL in (departure, arrival):
        return (SETO,)
    if _IZUMO_TERMINAL in (departure, arrival):
        return (IZUMO,)
    return TRAINS


def get_train(key: str) -> Train:
    try:
        return TRAINS_BY_KEY[key]
    except KeyError as exc:
        known = ", ".join(sorted(TRAINS_BY_KEY))
        raise KeyError(f"Train '{key}' is not defined. Known keys: {known}") from exc


__all__ = [
    "ARRIVAL_STATIONS",
    "DEPARTURE_STATIONS",
    "IZUMO",
    "SETO",
    "TRAINS",
    "Train",
    "determine_trains_to_search",
    "get_train",
]
