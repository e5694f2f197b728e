from __future__ import annotations

import asyncio

import pytest
from conftest import FakeUpstream

from fakehelp.exceptions import HelpTransportError
from fakehelp.models.metadata import Metadata
from fakehelp.sync.poller import UpdatePoller


class _Recorder:
    def __init__(self, error: Exception | None = None) -> None:
        self.received: list[Metadata] = []
        self._error = error

    async def __call__(self, metadata: Metadata) -> None:
        self.received.append(metadata)
        if self._error is not None:
            raise self._error


@pytest.mark.asyncio
async def test_start_records_baseline(upstream: FakeUpstream) -> None:
    poller = UpdatePoller(upstream, _Recorder(), interval=60)

    baseline = await poller.start()
    try:
        assert poller.baseline == baseline
        assert baseline.latest_gamedata_version == "0.34.1:AbCdEf"
        assert poller.is_running
    finally:
        await poller.stop()
    assert not poller.is_running


@pytest.mark.asyncio
async def test_start_error_propagates_and_nothing_is_scheduled(upstream: FakeUpstream) -> None:
    upstream.metadata_error = HelpTransportError("unreachable", endpoint="/metadata")
    poller = UpdatePoller(upstream, _Recorder(), interval=60)

    with pytest.raises(HelpTransportError):
        await poller.start()

    assert not poller.is_running
    assert poller.baseline is None


@pytest.mark.asyncio
async def test_poll_once_notifies_only_on_change(upstream: FakeUpstream) -> None:
    recorder = _Recorder()
    poller = UpdatePoller(upstream, recorder, interval=60)
    await poller.start()
    await poller.stop()

    assert await poller.poll_once() is False
    assert recorder.received == []

    upstream.localization_version = "loc-2"
    assert await poller.poll_once() is True
    assert [m.latest_localization_bundle_version for m in recorder.received] == ["loc-2"]
    assert poller.baseline is not None
    assert poller.baseline.latest_localization_bundle_version == "loc-2"

    assert await poller.poll_once() is False
    assert len(recorder.received) == 1


@pytest.mark.asyncio
async def test_loop_survives_poll_errors(upstream: FakeUpstream) -> None:
    recorder = _Recorder()
    poller = UpdatePoller(upstream, recorder, interval=0.01)
    await poller.start()
    try:
        upstream.metadata_error = HelpTransportError("unreachable", endpoint="/metadata")
        await asyncio.sleep(0.05)
        assert poller.is_running

        upstream.metadata_error = None
        upstream.game_version = "0.34.2:New"
        for _ in range(50):
            if recorder.received:
                break
            await asyncio.sleep(0.01)
    finally:
        await poller.stop()

    assert recorder.received[0].latest_gamedata_version == "0.34.2:New"


@pytest.mark.asyncio
async def test_callback_errors_are_swallowed_by_the_loop(upstream: FakeUpstream) -> None:
    recorder = _Recorder(error=RuntimeError("update failed"))
    poller = UpdatePoller(upstream, recorder, interval=0.01)
    await poller.start()
    try:
        upstream.game_version = "0.34.2:New"
        await asyncio.sleep(0.05)
        assert poller.is_running
    finally:
        await poller.stop()

    assert len(recorder.received) == 1


def test_interval_must_be_positive(upstream: FakeUpstream) -> None:
    with pytest.raises(ValueError):
        UpdatePoller(upstream, _Recorder(), interval=0)


@pytest.mark.asyncio
async def test_stop_lets_a_running_poll_finish(upstream: FakeUpstream) -> None:
    started = asyncio.Event()
    finished: list[bool] = []

    async def slow_update(metadata: Metadata) -> None:
        started.set()
        await asyncio.sleep(0.1)
        finished.append(True)

    poller = UpdatePoller(upstream, slow_update, interval=0.01)
    await poller.start()
    upstream.game_version = "0.34.2:New"
    await asyncio.wait_for(started.wait(), timeout=1)

    await poller.stop()

    assert finished == [True]
    assert not poller.is_running
