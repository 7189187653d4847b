from __future__ import annotations

import asyncio

import pytest

from luckmd.core.event_bus import EventBus


def test_emit_calls_handler_once_with_payload() -> None:
    bus = EventBus()
    received = []
    bus.on("saved", received.append)

    assert bus.emit("saved", {"path": "a.md"}) == 1
    assert received == [{"path": "a.md"}]


def test_off_stops_delivery() -> None:
    bus = EventBus()
    received = []
    bus.on("saved", received.append)
    bus.off("saved", received.append)

    assert bus.emit("saved", 1) == 0
    assert received == []


def test_unsubscribe_callback_removes_subscription() -> None:
    bus = EventBus()
    received = []
    unsubscribe = bus.on("saved", received.append)
    unsubscribe()
    bus.emit("saved", 1)
    assert received == []
    assert bus.listener_count("saved") == 0


def test_duplicate_subscription_collapses() -> None:
    bus = EventBus()
    calls = []

    def handler(payload: int) -> None:
        calls.append(payload)

    bus.on("tick", handler)
    bus.on("tick", handler)
    bus.emit("tick", 7)

    assert calls == [7]
    assert bus.listener_count("tick") == 1


def test_off_unknown_handler_is_noop() -> None:
    bus = EventBus()
    bus.off("never", print)
    assert bus.listener_count() == 0


def test_failing_handler_does_not_block_siblings() -> None:
    bus = EventBus()
    received = []

    def broken(_payload: object) -> None:
        raise RuntimeError("boom")

    bus.on("evt", broken)
    bus.on("evt", received.append)
    bus.on("evt", lambda p: received.append(("second", p)))

    assert bus.emit("evt", 1) == 3
    assert received == [1, ("second", 1)]
    assert len(bus.errors) == 1
    assert bus.errors[0].message == "boom"
    assert bus.errors[0].event == "evt"


def test_once_handler_runs_a_single_time() -> None:
    bus = EventBus()
    received = []
    bus.once("ready", received.append)
    bus.emit("ready", 1)
    bus.emit("ready", 2)
    assert received == [1]


def test_async_handler_outside_loop_is_recorded_as_error() -> None:
    bus = EventBus()

    async def handler(_payload: object) -> None:
        return None

    bus.on("evt", handler)
    bus.emit("evt", None)
    assert len(bus.errors) == 1


@pytest.mark.asyncio
async def test_async_handlers_are_fire_and_forget() -> None:
    bus = EventBus()
    gate = asyncio.Event()
    received = []

    async def slow(payload: int) -> None:
        await gate.wait()
        received.append(payload)

    bus.on("evt", slow)
    assert bus.emit("evt", 5) == 1
    assert received == []

    gate.set()
    await bus.drain()
    assert received == [5]


@pytest.mark.asyncio
async def test_async_handler_failure_is_recorded() -> None:
    bus = EventBus()

    async def broken(_payload: object) -> None:
        raise ValueError("async boom")

    bus.on("evt", broken)
    bus.emit("evt", None)
    await bus.drain()

    assert [e.message for e in bus.errors] == ["async boom"]


def test_repeated_once_for_same_handler_collapses() -> None:
    bus = EventBus()
    received = []
    bus.once("ready", received.append)
    bus.once("ready", received.append)

    assert bus.listener_count("ready") == 1
    bus.emit("ready", 1)
    bus.emit("ready", 2)
    assert received == [1]
    assert bus.listener_count("ready") == 0


def test_off_removes_once_subscription() -> None:
    bus = EventBus()
    received = []
    bus.once("ready", received.append)
    bus.off("ready", received.append)

    assert bus.emit("ready", 1) == 0
    assert received == []


def test_once_can_be_renewed_after_firing() -> None:
    bus = EventBus()
    received = []
    bus.once("ready", received.append)
    bus.emit("ready", 1)
    bus.once("ready", received.append)
    bus.emit("ready", 2)
    assert received == [1, 2]
