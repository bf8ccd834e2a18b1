"""Resolve every catalogued room against a captured reservation page, offline."""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from sunrise_watch.availability.normalizer import normalize_for_search
from sunrise_watch.catalog.rooms import RoomCatalog
from sunrise_watch.catalog.trains import TRAINS, get_train
from sunrise_watch.config.settings import Settings
from sunrise_watch.core.browser import BrowserSession, ensure_close_context
from sunrise_watch.tasks.reservation_page import find_train_scope, normalized_inner_html
from sunrise_watch.tasks.room_lookup import RoomLookup


async def analyze(html_path: Path, train_key: str, catalog: RoomCatalog, settings: Settings) -> list[dict[str, object]]:
    html = html_path.read_text(encoding="utf-8")
    train = get_train(train_key)
    lookup = RoomLookup(window_radius=settings.window_radius)

    rows: list[dict[str, object]] = []
    async with BrowserSession(settings) as session:
        context = await session.new_context()
        try:
            page = await context.new_page()
            await page.set_content(html)
            scope = await find_train_scope(page, train, TRAINS)
            normalized = await normalized_inner_html(scope) or normalize_for_search(html)
            for room in catalog.values():
                strategies = {
                    "form_control": await lookup.resolve_from_form_control(scope, room),
                    "keyword_rows": await lookup.resolve_from_keyword_rows(scope, room),
                    "page_window": lookup.resolve_from_html(normalized, room),
                }
                final = await lookup.resolve(scope, room, normalized_html=normalized)
                rows.append(
                    {
                        "room": room.key,
                        "name": room.name,
                        "status": final.status.value,
                        "indicator": final.indicator,
                        "strategies": {
                            name: {"status": value.status.value, "indicator": value.indicator}
                            for name, value in strategies.items()
                        },
                    }
                )
        finally:
            await ensure_close_context(context)
    return rows


def render(rows: list[dict[str, object]]) -> str:
    lines = [f"{'Room':<24} {'Status':<12} Indicator"]
    lines.append("-" * 60)
    for row in rows:
        lines.append(f"{row['name']!s:<24} {row['status']!s:<12} {row['indicator'] or ''}")
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("html", type=Path, help="HTML file saved by capture_page.py")
    parser.add_argument(
        "--train",
        default=TRAINS[0].key,
        choices=[train.key for train in TRAINS],
        help="Train whose section of the page to analyse",
    )
    parser.add_argument("--catalog", type=Path, default=None, help="Optional room catalog JSON")
    parser.add_argument("--json", action="store_true", help="Emit JSON including per-strategy results")
    args = parser.parse_args()

    settings = Settings(headless=True)
    catalog = RoomCatalog.from_settings(args.catalog or settings.room_catalog_path)
    rows = asyncio.run(analyze(args.html, args.train, catalog, settings))
    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
    else:
        print(render(rows))


if __name__ == "__main__":
    main()
