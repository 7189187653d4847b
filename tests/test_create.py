from __future__ import annotations

import asyncio

import pytest

from luckmd.config.schema import ActivationConfig, LuckmdConfig
from luckmd.core.container import Tokens
from luckmd.core.event_bus import RUNTIME_DISPOSED, RUNTIME_READY, THEME_CHANGED
from luckmd.core.slot_registry import SIDEBAR_FOOTER
from luckmd.create import create
from luckmd.errors import ExtensionActivationError, LuckmdError, ServiceNotFoundError
from luckmd.extensions.demo import DemoExtension
from luckmd.plugins.activation import ActivationPolicy, ActivationState
from luckmd.plugins.protocol import FunctionExtension, Plugin, extension
from luckmd.shell.headless import HeadlessShell

P1 = Plugin(id="p1", title="First")
P2 = Plugin(id="p2", title="Second")


async def _resolved(value):
    await asyncio.sleep(0)
    return value


def _slot_extension(ext_id: str, contribution: str) -> FunctionExtension:
    return FunctionExtension(
        id=ext_id,
        activate_fn=lambda ctx: ctx.slots.register(SIDEBAR_FOOTER, contribution),
    )


@pytest.mark.asyncio
async def test_awaitable_plugin_source_reaches_shell() -> None:
    runtime = create(plugins=_resolved([P1, P2]))
    shell = HeadlessShell()

    rendered = await runtime.render(shell)

    assert runtime.registry.all() == [P1, P2]
    assert rendered == [P1, P2]
    assert shell.renders == [[P1, P2]]
    assert shell.active is P1


@pytest.mark.asyncio
async def test_slot_contributions_follow_activation_order() -> None:
    runtime = create(
        extensions=[_slot_extension("e1", "footer-A"), _slot_extension("e2", "footer-B")]
    )
    await runtime.render(HeadlessShell())
    assert runtime.slots.get(SIDEBAR_FOOTER) == ["footer-A", "footer-B"]


@pytest.mark.asyncio
async def test_failing_extension_aborts_remaining(recording_logger) -> None:
    log = []

    def broken(ctx) -> None:
        raise RuntimeError("cannot start")

    runtime = create(
        extensions=[
            FunctionExtension("e3", broken),
            FunctionExtension("e4", lambda ctx: log.append("e4")),
        ],
        logger=recording_logger,
    )
    shell = HeadlessShell()

    with pytest.raises(ExtensionActivationError) as exc_info:
        await runtime.render(shell)

    assert exc_info.value.extension_id == "e3"
    assert [f.extension_id for f in runtime.failures] == ["e3"]
    assert log == []
    assert runtime.state("e4") is ActivationState.UNACTIVATED
    assert shell.renders == []

    # A later render reports the same failure instead of retrying
    with pytest.raises(ExtensionActivationError):
        await runtime.render(shell)


@pytest.mark.asyncio
async def test_collect_policy_renders_despite_failures() -> None:
    config = LuckmdConfig(activation=ActivationConfig(policy=ActivationPolicy.COLLECT))
    runtime = create(
        plugins=[P1],
        extensions=[
            FunctionExtension("bad", lambda ctx: 1 / 0),
            _slot_extension("good", "footer"),
        ],
        config=config,
    )
    shell = HeadlessShell()

    await runtime.render(shell)

    assert shell.renders == [[P1]]
    assert [f.extension_id for f in runtime.failures] == ["bad"]
    assert runtime.report.activated == ["good"]
    assert shell.slot(SIDEBAR_FOOTER) == ["footer"]


@pytest.mark.asyncio
async def test_render_without_shell_does_nothing() -> None:
    calls = []
    runtime = create(plugins=lambda: calls.append("loaded") or [P1])
    assert await runtime.render(None) is None
    assert calls == []


@pytest.mark.asyncio
async def test_duplicate_plugins_reach_shell_once() -> None:
    runtime = create(plugins=[P1, Plugin(id="p1", title="Shadow"), P2])
    shell = HeadlessShell()
    await runtime.render(shell)
    assert shell.renders == [[P1, P2]]


@pytest.mark.asyncio
async def test_sources_are_resolved_once() -> None:
    calls = []

    def source():
        calls.append(1)
        return [P1]

    runtime = create(plugins=source)
    await runtime.render(HeadlessShell())
    await runtime.render(HeadlessShell())
    assert calls == [1]


@pytest.mark.asyncio
async def test_ready_event_lists_plugin_ids() -> None:
    runtime = create(plugins=[P1, P2])
    ready = []
    runtime.events.on(RUNTIME_READY, ready.append)
    await runtime.render(HeadlessShell())
    assert ready == [{"plugins": ["p1", "p2"]}]


def test_instances_do_not_share_services() -> None:
    first, second = create(), create()
    first.commands.register("only.here", lambda: None)
    assert not second.commands.has("only.here")
    assert first.slots is not second.slots


def test_well_known_services_are_seeded() -> None:
    runtime = create(default_theme="dark", default_locale="fr")
    view = runtime.context().container
    for token in Tokens.ALL:
        assert view.has(token)
    assert view.get(Tokens.THEME).current() == "dark"
    assert view.get(Tokens.CONFIG).get("locale") == "fr"
    with pytest.raises(ServiceNotFoundError):
        view.get("clipboard")


def test_theme_service_emits_on_shared_bus() -> None:
    runtime = create()
    seen = []
    runtime.events.on(THEME_CHANGED, seen.append)
    runtime.context().theme.set("dark")
    assert seen == [{"previous": "light", "current": "dark"}]


@pytest.mark.asyncio
async def test_demo_extension_contributes_command_and_slots() -> None:
    runtime = create(extensions=[DemoExtension()])
    await runtime.render(HeadlessShell())

    assert await runtime.commands.execute("demo.say_hello") == "Hello LuckMD"
    assert await runtime.commands.execute("demo.say_hello", "Ada") == "Hello Ada"
    assert runtime.commands.get("demo.say_hello").source == "demo-extension"
    assert runtime.slots.count(SIDEBAR_FOOTER) == 1


@pytest.mark.asyncio
async def test_dispose_deactivates_and_unmounts() -> None:
    log = []

    @extension("tracked", deactivate=lambda ctx: log.append("deactivated"))
    def tracked(ctx) -> None:
        log.append("activated")

    disposed = []
    runtime = create(plugins=[P1], extensions=[tracked])
    runtime.events.on(RUNTIME_DISPOSED, disposed.append)
    shell = HeadlessShell()
    await runtime.render(shell)

    assert await runtime.dispose() == []
    assert await runtime.dispose() == []

    assert log == ["activated", "deactivated"]
    assert shell.mounted is False
    assert runtime.disposed
    assert disposed == [{"failures": 0}]
    with pytest.raises(LuckmdError):
        await runtime.render(shell)


@pytest.mark.asyncio
async def test_async_context_manager_disposes() -> None:
    async with create(plugins=[P1]) as runtime:
        await runtime.render(HeadlessShell())
    assert runtime.disposed


class _StateRecordingShell(HeadlessShell):
    """Headless shell that notes extension states when mounted."""

    def __init__(self, runtime, extension_id: str) -> None:
        super().__init__()
        self._runtime = runtime
        self._extension_id = extension_id
        self.states_at_mount = []

    def mount(self, plugins, services) -> None:
        self.states_at_mount.append(self._runtime.state(self._extension_id))
        super().mount(plugins, services)


@pytest.mark.asyncio
async def test_overlapping_renders_share_one_composition() -> None:
    started = []

    async def slow(ctx) -> None:
        started.append("slow")
        await asyncio.sleep(0.01)

    runtime = create(plugins=_resolved([P1]), extensions=[FunctionExtension("slow", slow)])
    first = _StateRecordingShell(runtime, "slow")
    second = _StateRecordingShell(runtime, "slow")

    results = await asyncio.gather(runtime.render(first), runtime.render(second))

    assert results == [[P1], [P1]]
    assert started == ["slow"]
    assert runtime.report.activated == ["slow"]
    assert first.states_at_mount == [ActivationState.ACTIVATED]
    assert second.states_at_mount == [ActivationState.ACTIVATED]


@pytest.mark.asyncio
async def test_failed_extension_source_is_reported_on_every_render() -> None:
    async def unavailable():
        await asyncio.sleep(0)
        raise ConnectionError("extension source down")

    runtime = create(plugins=[P1], extensions=unavailable())
    shell = HeadlessShell()

    with pytest.raises(ConnectionError, match="extension source down"):
        await runtime.render(shell)
    with pytest.raises(ConnectionError, match="extension source down"):
        await runtime.render(shell)
    assert shell.renders == []


@pytest.mark.asyncio
async def test_failed_plugin_source_is_reported_on_every_render() -> None:
    async def unavailable():
        raise ConnectionError("plugin source down")

    runtime = create(plugins=unavailable())

    for _ in range(2):
        with pytest.raises(ConnectionError, match="plugin source down"):
            await runtime.render(HeadlessShell())
