"""Availability keyword vocabulary for the reservation page.

Order matters: classification returns the first entry that matches, so more
specific phrases are declared before the bare symbols.
"""
from __future__ import annotations

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "空席あり",
    "空席有り",
    "空席があります",
    "空席ございます",
    "空席有",
    "残席あり",
    "残席有り",
    "残席僅か",
    "残席わずか",
    "残りわずか",
    "残り僅か",
    "空席わずか",
    "空席僅か",
    "空席◯",
    "空席○",
    "空席◎",
    "空席△",
    "残席◯",
    "残席○",
    "残席◎",
    "○",
    "◎",
    "◯",
    "△",
)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "空席なし",
    "空席はありません",
    "空席ございません",
    "空席ありません",
    "空席ありませんでした",
    "空席ありませんでした。",
    "空席がありません",
    "空席無し",
    "残席なし",
    "満席",
    "発売終了",
    "販売終了",
    "取扱いできません",
    "取扱できません",
    "受付終了",
    "満了",
    "申込不可",
    "受付不可",
    "×",
)

# Icon labels the page uses for "no seats"; any other icon means bookable.
NEGATIVE_ICON_TEXTS: tuple[str, ...] = ("残席なし", "空席なし", "満席")

__all__ = ["NEGATIVE_ICON_TEXTS", "NEGATIVE_KEYWORDS", "POSITIVE_KEYWORDS"]
