from __future__ import annotations

import pytest

from sunrise_watch.availability.normalizer import normalize_for_search


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("空席 あり", "空席あり"),
        ("シングル　ツイン", "シングルツイン"),
        ("ＡＢＣ１２３", "ABC123"),
        ("ｼﾝｸﾞﾙ", "シングル"),
        ("B寝台個室（シングル）", "B寝台個室シングル"),
        ("普通車・ノビノビ座席", "普通車ノビノビ座席"),
        ("東京〜高松", "東京高松"),
        ("A－B", "AB"),
        ("\n\t 空席\r\nなし ", "空席なし"),
    ],
)
def test_normalize_for_search_folds_width_spacing_and_punctuation(raw: str, expected: str) -> None:
    assert normalize_for_search(raw) == expected


def test_status_symbols_survive_normalisation() -> None:
    assert normalize_for_search("○ ◎ △ ×") == "○◎△×"


def test_empty_text_normalises_to_empty() -> None:
    assert normalize_for_search("") == ""
    assert normalize_for_search(" 　 ") == ""


@pytest.mark.parametrize(
    "raw",
    ["Ａ寝台個室 シングルデラックス", "(満席)", "ｻﾝﾗｲｽﾞ・ツイン", "残席　わずか～"],
)
def test_normalize_for_search_is_idempotent(raw: str) -> None:
    once = normalize_for_search(raw)
    assert normalize_for_search(once) == once
