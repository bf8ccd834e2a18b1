from __future__ import annotations

import asyncio
from datetime import datetime, time, timedelta

import pytest

from sunrise_watch.availability.models import (
    AvailabilityCheckResult,
    AvailabilityStatus,
    RoomAvailability,
    TrainAvailability,
)
from sunrise_watch.catalog.rooms import RoomCatalog
from sunrise_watch.catalog.trains import SETO
from sunrise_watch.config.settings import Settings
from sunrise_watch.config.watch_profile import WatchProfile
from sunrise_watch.runtime.monitor import Monitor
from sunrise_watch.runtime.schedule import zone
from sunrise_watch.services.notifier import NotificationError

TOKYO = zone("Asia/Tokyo")

EMPTY = AvailabilityCheckResult()
FOUND = AvailabilityCheckResult(
    trains=(
        TrainAvailability(
            SETO,
            (RoomAvailability(RoomCatalog.default().get("solo"), AvailabilityStatus.AVAILABLE, "○", SETO),),
        ),
    )
)


class _Clock:
    def __init__(self, start: datetime) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += timedelta(seconds=delay)


class _DummyChecker:
    def __init__(self, clock: _Clock, results: list[AvailabilityCheckResult] | None = None) -> None:
        self._clock = clock
        self._results = list(results or [])
        self.checked_at: list[datetime] = []

    async def check(self, profile: WatchProfile) -> AvailabilityCheckResult:
        self.checked_at.append(self._clock())
        return self._results.pop(0) if self._results else EMPTY


class _DummyNotifier:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.availability: list[AvailabilityCheckResult] = []
        self.shutdowns: list[int] = []

    async def verify(self) -> None:
        return None

    async def notify_availability(self, result: AvailabilityCheckResult, profile: WatchProfile) -> None:
        self.availability.append(result)
        if self.fail:
            raise NotificationError("webhook down")

    async def notify_shutdown(self, found_count: int) -> None:
        self.shutdowns.append(found_count)


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "check_interval_s": 60.0,
        "shutdown_time": time(1, 50),
        "schedule_timezone": "Asia/Tokyo",
    }
    values.update(overrides)
    return Settings(**values)


def _profile() -> WatchProfile:
    return WatchProfile(
        departure_station="東京",
        arrival_station="高松",
        travel_date="2025-11-15",
        room_types=["solo"],
    )


def _tokyo(hour: int, minute: int, second: int = 0, day: int = 14) -> datetime:
    return datetime(2025, 11, day, hour, minute, second, tzinfo=TOKYO)


@pytest.mark.asyncio
async def test_monitor_checks_every_interval_until_shutdown() -> None:
    clock = _Clock(_tokyo(1, 45))
    checker = _DummyChecker(clock, [EMPTY, FOUND])
    notifier = _DummyNotifier()
    monitor = Monitor(_settings(), _profile(), checker, notifier, clock=clock, sleep=clock.sleep)

    found = await monitor.run()

    assert found == 1
    assert checker.checked_at == [_tokyo(1, minute) for minute in range(45, 50)]
    assert notifier.availability == [FOUND]
    assert notifier.shutdowns == [1]


@pytest.mark.asyncio
async def test_monitor_pauses_during_maintenance() -> None:
    clock = _Clock(_tokyo(23, 49, 30))
    checker = _DummyChecker(clock)
    notifier = _DummyNotifier()
    monitor = Monitor(
        _settings(shutdown_time=time(0, 7)),
        _profile(),
        checker,
        notifier,
        clock=clock,
        sleep=clock.sleep,
    )

    await monitor.run()

    assert checker.checked_at == [_tokyo(23, 49, 30), _tokyo(0, 6, day=15)]
    assert notifier.shutdowns == [0]


@pytest.mark.asyncio
async def test_notification_failure_does_not_stop_monitoring() -> None:
    clock = _Clock(_tokyo(1, 47))
    checker = _DummyChecker(clock, [FOUND, FOUND])
    notifier = _DummyNotifier(fail=True)
    monitor = Monitor(_settings(), _profile(), checker, notifier, clock=clock, sleep=clock.sleep)

    found = await monitor.run()

    assert found == 2
    assert len(checker.checked_at) == 3
    assert notifier.shutdowns == [2]


@pytest.mark.asyncio
async def test_failed_checks_are_not_counted() -> None:
    clock = _Clock(_tokyo(1, 48))
    checker = _DummyChecker(clock, [AvailabilityCheckResult.failed_with("boom")])
    notifier = _DummyNotifier()
    monitor = Monitor(_settings(), _profile(), checker, notifier, clock=clock, sleep=clock.sleep)

    assert await monitor.run() == 0
    assert monitor.check_count == 2
    assert notifier.availability == []


@pytest.mark.asyncio
async def test_shutdown_notice_is_sent_on_cancellation() -> None:
    clock = _Clock(_tokyo(12, 0))

    class _CancellingChecker(_DummyChecker):
        async def check(self, profile: WatchProfile) -> AvailabilityCheckResult:
            await super().check(profile)
            raise asyncio.CancelledError

    notifier = _DummyNotifier()
    monitor = Monitor(
        _settings(),
        _profile(),
        _CancellingChecker(clock),
        notifier,
        clock=clock,
        sleep=clock.sleep,
    )

    with pytest.raises(asyncio.CancelledError):
        await monitor.run()
    assert notifier.shutdowns == [0]


@pytest.mark.asyncio
async def test_interval_override_and_no_shutdown_time() -> None:
    clock = _Clock(_tokyo(12, 0))

    class _StopAfterThree(_DummyChecker):
        async def check(self, profile: WatchProfile) -> AvailabilityCheckResult:
            result = await super().check(profile)
            if len(self.checked_at) == 3:
                raise asyncio.CancelledError
            return result

    checker = _StopAfterThree(clock)
    monitor = Monitor(
        _settings(shutdown_time=None),
        _profile(),
        checker,
        _DummyNotifier(),
        interval_s=10.0,
        clock=clock,
        sleep=clock.sleep,
    )

    with pytest.raises(asyncio.CancelledError):
        await monitor.run()
    assert clock.sleeps == [10.0, 10.0]
