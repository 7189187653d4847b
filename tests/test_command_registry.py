from __future__ import annotations

import asyncio

import pytest

from luckmd.core.command_registry import CommandRegistry
from luckmd.errors import CommandNotFoundError


@pytest.mark.asyncio
async def test_first_registration_wins() -> None:
    registry = CommandRegistry()
    assert registry.register("greet", lambda: "first") is True
    assert registry.register("greet", lambda: "second") is False
    assert await registry.execute("greet") == "first"
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_execute_unknown_command_raises() -> None:
    registry = CommandRegistry()
    with pytest.raises(CommandNotFoundError) as exc_info:
        await registry.execute("nope")
    assert exc_info.value.command_id == "nope"


@pytest.mark.asyncio
async def test_sync_and_async_handlers_return_results_unchanged() -> None:
    registry = CommandRegistry()
    result = {"ok": True}

    async def fetch(delay: float = 0) -> dict:
        await asyncio.sleep(delay)
        return result

    registry.register("sync", lambda name=None: f"Hello {name}")
    registry.register("async", fetch)

    assert await registry.execute("sync", "Ada") == "Hello Ada"
    assert await registry.execute("async", delay=0) is result


@pytest.mark.asyncio
async def test_handler_errors_propagate_and_are_recorded() -> None:
    registry = CommandRegistry()

    def broken() -> None:
        raise ValueError("bad input")

    registry.register("broken", broken)
    with pytest.raises(ValueError, match="bad input"):
        await registry.execute("broken")

    entry = registry.history[-1]
    assert entry.command_id == "broken"
    assert entry.success is False
    assert entry.error == "bad input"


@pytest.mark.asyncio
async def test_recent_commands_are_most_recent_first() -> None:
    registry = CommandRegistry()
    registry.register("a", lambda: 1)
    registry.register("b", lambda: 2)
    await registry.execute("a")
    await registry.execute("b")
    await registry.execute("a")
    assert [c.id for c in registry.recent()] == ["a", "b"]


def test_search_ranks_title_matches_first() -> None:
    registry = CommandRegistry()
    registry.register("file.save", lambda: None, title="Save File")
    registry.register("view.refresh", lambda: None, description="save nothing, just refresh")
    registry.register("system.quit", lambda: None)

    matches = registry.search("save")
    assert [c.id for c in matches] == ["file.save", "view.refresh"]
    assert registry.search("zzz") == []


def test_command_metadata_defaults() -> None:
    registry = CommandRegistry()
    registry.register("demo.say_hello", lambda: None, source="demo-extension")
    command = registry.get("demo.say_hello")
    assert command is not None
    assert command.title == "demo.say_hello"
    assert command.source == "demo-extension"
    assert "demo.say_hello" in registry
    assert registry.get("missing") is None
