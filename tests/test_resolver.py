from __future__ import annotations

from sunrise_watch.availability.models import (
    AvailabilityResolution,
    AvailabilityStatus,
    RowSnapshot,
)
from sunrise_watch.availability.resolver import is_negative_icon, resolve_snapshot, select_best

AVAILABLE = AvailabilityStatus.AVAILABLE
UNAVAILABLE = AvailabilityStatus.UNAVAILABLE
UNKNOWN = AvailabilityStatus.UNKNOWN


def test_any_non_negative_icon_means_available() -> None:
    snapshot = RowSnapshot.build(icon_indicators=["残席なし", "icon_seat_ok"])

    resolution = resolve_snapshot(snapshot)

    assert resolution == AvailabilityResolution(AVAILABLE, "icon_seat_ok")


def test_only_negative_icons_report_the_first_one() -> None:
    snapshot = RowSnapshot.build(icon_indicators=["残席なし", "満席"])

    assert resolve_snapshot(snapshot) == AvailabilityResolution(UNAVAILABLE, "残席なし")


def test_icons_take_precedence_over_attributes_and_text() -> None:
    snapshot = RowSnapshot.build(
        icon_indicators=["満席"],
        attribute_indicators=["空席あり"],
        text_content="○",
    )

    assert resolve_snapshot(snapshot).status is UNAVAILABLE


def test_attributes_are_classified_when_no_icons() -> None:
    snapshot = RowSnapshot.build(attribute_indicators=["ご案内", "空席あり"], text_content="満席")

    assert resolve_snapshot(snapshot) == AvailabilityResolution(AVAILABLE, "空席あり")


def test_text_is_the_last_resort() -> None:
    snapshot = RowSnapshot.build(attribute_indicators=["ご案内"], text_content="只今 満席です")

    assert resolve_snapshot(snapshot) == AvailabilityResolution(UNAVAILABLE, "満席")


def test_snapshot_without_signals_is_unknown() -> None:
    assert resolve_snapshot(RowSnapshot()).status is UNKNOWN
    assert resolve_snapshot(RowSnapshot.build(text_content="料金表")).status is UNKNOWN


def test_is_negative_icon_normalises_labels() -> None:
    assert is_negative_icon("残席 なし")
    assert is_negative_icon("（満席）")
    assert not is_negative_icon("空席あり")
    assert not is_negative_icon("")


def test_select_best_prefers_available_then_unavailable() -> None:
    unknown = AvailabilityResolution.unknown()
    first_sold_out = AvailabilityResolution(UNAVAILABLE, "満席")
    second_sold_out = AvailabilityResolution(UNAVAILABLE, "×")
    available = AvailabilityResolution(AVAILABLE, "○")

    assert select_best([unknown, first_sold_out, available]) == available
    assert select_best([unknown, first_sold_out, second_sold_out]) == first_sold_out
    assert select_best([unknown]) == unknown


def test_select_best_of_nothing_is_unknown() -> None:
    assert select_best([]) == AvailabilityResolution.unknown()


def test_select_best_is_order_independent_for_status() -> None:
    candidates = [
        AvailabilityResolution(UNAVAILABLE, "満席"),
        AvailabilityResolution.unknown(),
        AvailabilityResolution(AVAILABLE, "○"),
    ]
    assert select_best(candidates).status is select_best(list(reversed(candidates))).status


def test_seat_phrases_in_attributes_and_text_are_available() -> None:
    assert resolve_snapshot(RowSnapshot.build(attribute_indicators=["空席があります"])).status is AVAILABLE
    assert resolve_snapshot(RowSnapshot.build(text_content="空席わずか")).status is AVAILABLE
    assert resolve_snapshot(
        RowSnapshot.build(attribute_indicators=["空席わずか"], text_content="空席わずか")
    ) == AvailabilityResolution(AVAILABLE, "空席わずか")


def test_positive_icon_wins_over_a_sold_out_icon() -> None:
    snapshot = RowSnapshot.build(icon_indicators=["残席なし", "残席あり"], text_content="残席ありのテスト")

    assert resolve_snapshot(snapshot) == AvailabilityResolution(AVAILABLE, "残席あり")


def test_status_rank_orders_available_above_unavailable_above_unknown() -> None:
    assert AVAILABLE.rank > UNAVAILABLE.rank > UNKNOWN.rank
