"""Plugin and extension descriptors.

Plugins are feature bundles that expose UI: an optional sidebar, an
optional content pane and an icon. Extensions augment the runtime during
activation by contributing commands, slot content or event handlers.

Renderable fields (``icon``, ``sidebar``, ``content``) are opaque
handles. The runtime stores and returns them unchanged; only a shell
knows how to turn one into output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:
    import logging

    from luckmd.core.command_registry import CommandRegistry
    from luckmd.core.container import ContainerView
    from luckmd.core.event_bus import EventBus
    from luckmd.core.settings import ConfigStore
    from luckmd.core.slot_registry import SlotRegistry
    from luckmd.core.theme import ThemeManager

Renderable = Any


@dataclass(frozen=True)
class Plugin:
    """A registered feature unit.

    Example:
        Plugin(
            id="rss-reader",
            title="RSS Reader",
            icon="R",
            sidebar=FeedList,
            content=ArticleView,
        )
    """

    id: str
    title: str
    description: Optional[str] = None
    icon: Renderable = None
    sidebar: Renderable = None
    content: Renderable = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Plugin id must be a non-empty string")
        if not isinstance(self.title, str) or not self.title:
            raise ValueError(f"Plugin '{self.id}' needs a non-empty title")


@runtime_checkable
class PluginRegistry(Protocol):
    """Protocol for plugin registries handed to extensions."""

    def register(self, plugin: Plugin) -> bool:
        ...

    def all(self) -> List[Plugin]:
        ...


@dataclass(frozen=True)
class ActivationContext:
    """Bundle handed to ``Extension.activate``.

    Built fresh for each activation run. Extensions may keep references
    to the individual services they need.
    """

    container: "ContainerView"
    registry: PluginRegistry
    events: "EventBus"
    commands: "CommandRegistry"
    slots: "SlotRegistry"
    config: "ConfigStore"
    theme: "ThemeManager"
    logger: "logging.Logger"


@runtime_checkable
class Extension(Protocol):
    """Protocol for extensions.

    ``activate`` may be a coroutine function. ``deactivate`` is optional
    and is looked up with ``getattr``.

    Example:
        class ClockExtension:
            id = "clock"

            def activate(self, ctx: ActivationContext) -> None:
                ctx.commands.register("clock.now", datetime.now)
                ctx.slots.register("sidebar.footer", ClockWidget)
    """

    @property
    def id(self) -> str:
        """Unique extension id."""
        ...

    def activate(self, ctx: ActivationContext) -> Union[None, Awaitable[None]]:
        """Contribute to the runtime."""
        ...


ActivateFn = Callable[[ActivationContext], Union[None, Awaitable[None]]]


@dataclass
class FunctionExtension:
    """Wraps plain functions as an extension."""

    id: str
    activate_fn: ActivateFn
    deactivate_fn: Optional[ActivateFn] = None

    def activate(self, ctx: ActivationContext) -> Union[None, Awaitable[None]]:
        return self.activate_fn(ctx)

    def deactivate(self, ctx: ActivationContext) -> Union[None, Awaitable[None]]:
        if self.deactivate_fn is None:
            return None
        return self.deactivate_fn(ctx)


def extension(
    extension_id: str,
    deactivate: Optional[ActivateFn] = None,
) -> Callable[[ActivateFn], FunctionExtension]:
    """Decorator turning an activate function into an extension.

    Example:
        @extension("hello")
        def hello(ctx):
            ctx.commands.register("hello.say", lambda: "hi")
    """

    def decorator(fn: ActivateFn) -> FunctionExtension:
        return FunctionExtension(id=extension_id, activate_fn=fn, deactivate_fn=deactivate)

    return decorator
