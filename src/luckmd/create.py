"""Composition root.

``create`` wires a runtime instance:

1. build the service container and seed the six well-known services
2. resolve the plugin source and register each plugin
3. resolve the extension source and activate extensions in order
4. hand the deduplicated plugin list to a rendering shell

Usage:
    runtime = create(
        plugins=load_plugins(),          # list, awaitable or callable
        extensions=[DemoExtension()],
    )
    shell = TextualShell()
    await runtime.render(shell)
    await shell.run_async()
    await runtime.dispose()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from luckmd.config.schema import LuckmdConfig
from luckmd.core.command_registry import CommandRegistry
from luckmd.core.container import ServiceContainer, Tokens
from luckmd.core.event_bus import RUNTIME_DISPOSED, RUNTIME_READY, EventBus
from luckmd.core.log import default_logger
from luckmd.core.settings import MemoryConfig
from luckmd.core.slot_registry import SlotRegistry
from luckmd.core.theme import SimpleTheme
from luckmd.errors import ActivationFailure, LuckmdError
from luckmd.plugins.activation import (
    ActivationReport,
    ActivationState,
    ExtensionActivator,
)
from luckmd.plugins.protocol import ActivationContext, Plugin
from luckmd.plugins.registry import InMemoryRegistry
from luckmd.plugins.sources import (
    ExtensionSource,
    PluginSource,
    resolve_extensions,
    resolve_plugins,
)
from luckmd.shell.base import RenderingShell

logger = logging.getLogger(__name__)

LOCALE_KEY = "locale"


class LuckmdInstance:
    """A wired runtime. Create through ``create``.

    Each instance owns its own container and registries, so several
    runtimes can live in one process.
    """

    def __init__(
        self,
        plugins: PluginSource,
        extensions: ExtensionSource,
        config: LuckmdConfig,
        service_logger: Any = None,
    ) -> None:
        self.config = config
        self.registry = InMemoryRegistry()
        self.container = ServiceContainer()

        events = EventBus()
        settings = MemoryConfig(config.settings)
        settings.set(LOCALE_KEY, config.general.default_locale)

        self.container.set(Tokens.EVENTS, events)
        self.container.set(Tokens.COMMANDS, CommandRegistry())
        self.container.set(Tokens.SLOTS, SlotRegistry())
        self.container.set(Tokens.CONFIG, settings)
        self.container.set(Tokens.THEME, SimpleTheme(config.general.default_theme, events=events))
        self.container.set(Tokens.LOGGER, service_logger or default_logger())

        self._plugin_source = plugins
        self._extension_source = extensions
        self._activator = ExtensionActivator(config.activation.policy)
        self._plugins_task: Optional["asyncio.Future[None]"] = None
        self._activation_task: Optional["asyncio.Future[ActivationReport]"] = None
        self._shell: Optional[RenderingShell] = None
        self._disposed = False

    # -- services ------------------------------------------------------

    @property
    def events(self) -> EventBus:
        return self.container.get(Tokens.EVENTS)

    @property
    def commands(self) -> CommandRegistry:
        return self.container.get(Tokens.COMMANDS)

    @property
    def slots(self) -> SlotRegistry:
        return self.container.get(Tokens.SLOTS)

    def context(self) -> ActivationContext:
        """Build a fresh activation context over the current services."""
        return ActivationContext(
            container=self.container.view(),
            registry=self.registry,
            events=self.container.get(Tokens.EVENTS),
            commands=self.container.get(Tokens.COMMANDS),
            slots=self.container.get(Tokens.SLOTS),
            config=self.container.get(Tokens.CONFIG),
            theme=self.container.get(Tokens.THEME),
            logger=self.container.get(Tokens.LOGGER),
        )

    # -- activation ----------------------------------------------------

    @property
    def report(self) -> ActivationReport:
        return self._activator.report

    @property
    def failures(self) -> List[ActivationFailure]:
        return list(self._activator.report.failures)

    def state(self, extension_id: str) -> ActivationState:
        return self._activator.state(extension_id)

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def load_plugins(self) -> List[Plugin]:
        """Resolve the plugin source once and register its plugins.

        Concurrent callers share one resolution; a failure is re-raised
        to every caller.
        """
        if self._plugins_task is None:
            self._plugins_task = asyncio.ensure_future(self._load_plugins())
        await asyncio.shield(self._plugins_task)
        return self.registry.all()

    async def _load_plugins(self) -> None:
        plugins = await resolve_plugins(self._plugin_source)
        for plugin in plugins:
            self.registry.register(plugin)
        logger.info("Registered %d plugin(s)", len(self.registry))

    async def activate(self) -> ActivationReport:
        """Resolve and activate extensions once.

        Concurrent callers wait for the same run. A failed run (source
        resolution or activation) re-raises its original error.

        Raises:
            ExtensionActivationError: If the abort policy stopped activation
        """
        if self._activation_task is None:
            self._activation_task = asyncio.ensure_future(self._activate())
        return await asyncio.shield(self._activation_task)

    async def _activate(self) -> ActivationReport:
        extensions = await resolve_extensions(self._extension_source)
        report = await self._activator.activate_all(extensions, self.context())
        logger.info("Activated %d extension(s)", len(report.activated))
        return report

    # -- rendering -----------------------------------------------------

    async def render(self, shell: Optional[RenderingShell]) -> Optional[List[Plugin]]:
        """Compose the runtime and hand the plugin list to ``shell``.

        Returns:
            The plugins given to the shell, or None without a shell
        """
        if shell is None:
            return None
        if self._disposed:
            raise LuckmdError("Runtime has been disposed")

        plugins = await self.load_plugins()
        await self.activate()

        self._shell = shell
        shell.mount(plugins, self.container.view())
        self.events.emit(RUNTIME_READY, {"plugins": [p.id for p in plugins]})
        return plugins

    async def dispose(self) -> List[ActivationFailure]:
        """Tear down: deactivate extensions and release the shell.

        Returns:
            Deactivation failures (logged, not raised)
        """
        if self._disposed:
            return []
        self._disposed = True

        failures: List[ActivationFailure] = []
        if self.config.activation.deactivate_on_dispose:
            failures = await self._activator.deactivate_all(self.context())

        if self._shell is not None:
            self._shell.unmount()
            self._shell = None

        self.events.emit(RUNTIME_DISPOSED, {"failures": len(failures)})
        return failures

    async def __aenter__(self) -> "LuckmdInstance":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.dispose()


def create(
    plugins: PluginSource = None,
    extensions: ExtensionSource = None,
    *,
    config: Optional[LuckmdConfig] = None,
    default_theme: Optional[str] = None,
    default_locale: Optional[str] = None,
    logger: Any = None,
) -> LuckmdInstance:
    """Create a runtime instance.

    Args:
        plugins: Plugins, an awaitable of plugins, or a callable returning either
        extensions: Extensions (elements may be awaitables), or an awaitable list
        config: Runtime configuration (defaults to schema defaults)
        default_theme: Overrides ``config.general.default_theme``
        default_locale: Overrides ``config.general.default_locale``
        logger: Object used as the ``logger`` service

    Returns:
        An unrendered LuckmdInstance
    """
    config = config or LuckmdConfig()
    overrides = {}
    if default_theme is not None:
        overrides["default_theme"] = default_theme
    if default_locale is not None:
        overrides["default_locale"] = default_locale
    if overrides:
        config = config.model_copy(
            update={"general": config.general.model_copy(update=overrides)}
        )
    return LuckmdInstance(plugins, extensions, config, service_logger=logger)
