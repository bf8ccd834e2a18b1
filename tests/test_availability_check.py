from __future__ import annotations

from typing import Any, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from sunrise_watch.availability.models import AvailabilityResolution, AvailabilityStatus
from sunrise_watch.catalog.rooms import RoomCatalog, RoomCategory
from sunrise_watch.catalog.trains import Train
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile
from sunrise_watch.tasks import availability_check
from sunrise_watch.tasks.availability_check import AvailabilityChecker
from sunrise_watch.tasks.reservation_page import PageLoadError


class _DummyPage:
    def __init__(self, html: str = "<html><body>page</body></html>") -> None:
        self.html = html
        self.closed = False
        self.waits: list[int] = []

    async def wait_for_timeout(self, timeout: int) -> None:
        self.waits.append(timeout)

    async def content(self) -> str:
        return self.html

    async def close(self) -> None:
        self.closed = True


class _DummyContext:
    def __init__(self) -> None:
        self.pages: list[_DummyPage] = []
        self.closed = False

    async def new_page(self) -> _DummyPage:
        page = _DummyPage()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class _DummySession:
    instances: list["_DummySession"] = []

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.contexts: list[_DummyContext] = []
        _DummySession.instances.append(self)

    async def __aenter__(self) -> "_DummySession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def new_context(self) -> _DummyContext:
        context = _DummyContext()
        self.contexts.append(context)
        return context


class _DummyLookup:
    def __init__(self, statuses: dict[tuple[str, str], AvailabilityResolution]) -> None:
        self._statuses = statuses
        self.calls: list[tuple[str, str]] = []

    async def resolve(self, scope: Any, room: RoomCategory, *, normalized_html: str = "") -> AvailabilityResolution:
        self.calls.append((scope, room.key))
        return self._statuses.get((scope, room.key), AvailabilityResolution.unknown())


class _Sleeps:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _profile(**overrides: Any) -> WatchProfile:
    data: dict[str, Any] = {
        "departure_station": "東京",
        "arrival_station": "大阪",
        "travel_date": "2025-11-15",
        "room_types": ["solo", "single"],
    }
    data.update(overrides)
    return WatchProfile(**data)


_scope_requests: list[tuple[str, tuple[str, ...]]] = []


@pytest.fixture
def settings() -> Settings:
    return Settings(page_settle_ms=0, max_retries=3, retry_delay_s=3.0)


@pytest.fixture(autouse=True)
def _patch_page_helpers(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    _DummySession.instances.clear()
    _scope_requests.clear()
    navigated: list[str] = []

    async def fake_navigate(page: _DummyPage, train: Train, settings: Settings) -> str:
        navigated.append(train.key)
        return f"{settings.form_url}?train={train.key}"

    async def fake_scope(page: _DummyPage, train: Train, other_trains: Any) -> str:
        _scope_requests.append((train.key, tuple(other.key for other in other_trains)))
        return train.key

    async def fake_inner_html(scope: str) -> str:
        return ""

    monkeypatch.setattr(availability_check, "navigate_to_train_page", fake_navigate)
    monkeypatch.setattr(availability_check, "find_train_scope", fake_scope)
    monkeypatch.setattr(availability_check, "normalized_inner_html", fake_inner_html)
    return navigated


@pytest.mark.asyncio
async def test_check_reports_per_train_breakdown(settings: Settings) -> None:
    lookup = _DummyLookup({("izumo", "solo"): AvailabilityResolution(AvailabilityStatus.AVAILABLE, "○")})
    checker = AvailabilityChecker(
        settings,
        RoomCatalog.default(),
        lookup=lookup,  # type: ignore[arg-type]
        session_factory=_DummySession,  # type: ignore[arg-type]
        sleep=_Sleeps(),
    )

    result = await checker.check(_profile())

    assert not result.failed
    assert result.has_availability
    assert result.available_rooms == ["solo"]
    assert result.available_by_train() == {"izumo": ["solo"]}
    assert [train.train.key for train in result.trains] == ["seto", "izumo"]
    assert len(lookup.calls) == 4

    session = _DummySession.instances[0]
    context = session.contexts[0]
    assert context.closed
    assert len(context.pages) == 2
    assert all(page.closed for page in context.pages)


@pytest.mark.asyncio
async def test_single_train_route_only_checks_that_train(settings: Settings, _patch_page_helpers: list[str]) -> None:
    checker = AvailabilityChecker(
        settings,
        RoomCatalog.default(),
        lookup=_DummyLookup({}),  # type: ignore[arg-type]
        session_factory=_DummySession,  # type: ignore[arg-type]
    )

    result = await checker.check(_profile(arrival_station="高松"))

    assert _patch_page_helpers == ["seto"]
    assert _scope_requests == [("seto", ("seto", "izumo"))]
    assert not result.has_availability
    assert all(room.status is AvailabilityStatus.UNKNOWN for room in result.trains[0].rooms)


@pytest.mark.asyncio
async def test_failed_attempt_is_retried_with_a_fresh_session(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    attempts: list[int] = []

    async def flaky_navigate(page: _DummyPage, train: Train, settings: Settings) -> str:
        attempts.append(1)
        if len(attempts) == 1:
            raise PageLoadError("timeout")
        return settings.form_url

    monkeypatch.setattr(availability_check, "navigate_to_train_page", flaky_navigate)
    sleeps = _Sleeps()
    checker = AvailabilityChecker(
        settings,
        RoomCatalog.default(),
        lookup=_DummyLookup({}),  # type: ignore[arg-type]
        session_factory=_DummySession,  # type: ignore[arg-type]
        sleep=sleeps,
    )

    result = await checker.check(_profile(arrival_station="高松"))

    assert not result.failed
    assert sleeps.delays == [3.0]
    assert len(_DummySession.instances) == 2


@pytest.mark.asyncio
async def test_exhausted_retries_are_reported_not_raised(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken_navigate(page: _DummyPage, train: Train, settings: Settings) -> str:
        raise PlaywrightError("browser crashed")

    monkeypatch.setattr(availability_check, "navigate_to_train_page", broken_navigate)
    sleeps = _Sleeps()
    checker = AvailabilityChecker(
        settings,
        RoomCatalog.default(),
        lookup=_DummyLookup({}),  # type: ignore[arg-type]
        session_factory=_DummySession,  # type: ignore[arg-type]
        sleep=sleeps,
    )

    result = await checker.check(_profile())

    assert result.failed
    assert "browser crashed" in (result.error or "")
    assert not result.has_availability
    assert sleeps.delays == [3.0, 3.0]
    assert len(_DummySession.instances) == 3


def test_unknown_room_keys_are_skipped(settings: Settings) -> None:
    checker = AvailabilityChecker(settings, RoomCatalog.default(), session_factory=_DummySession)  # type: ignore[arg-type]

    rooms = checker.watched_rooms(_profile(room_types=["solo", "missing"]))

    assert [room.key for room in rooms] == ["solo"]


def test_result_serialises_to_json_friendly_dict() -> None:
    result = availability_check.AvailabilityCheckResult.failed_with("boom")

    payload: dict[str, Optional[object]] = result.to_dict()

    assert payload["error"] == "boom"
    assert payload["trains"] == []
    assert payload["has_availability"] is False
