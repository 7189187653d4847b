"""Headless shell for non-UI contexts and tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List, Optional

from luckmd.core.container import Tokens
from luckmd.core.event_bus import PLUGIN_ACTIVATED

if TYPE_CHECKING:
    from luckmd.core.container import ContainerView
    from luckmd.plugins.protocol import Plugin


class HeadlessShell:
    """Minimal shell that records what it was asked to render."""

    def __init__(self, on_activate: Optional[Callable[[Optional["Plugin"]], None]] = None) -> None:
        self.renders: List[List["Plugin"]] = []
        self.plugins: List["Plugin"] = []
        self.active: Optional["Plugin"] = None
        self.mounted = False
        self._services: Optional["ContainerView"] = None
        self._on_activate = on_activate

    def mount(self, plugins: List["Plugin"], services: "ContainerView") -> None:
        """Capture the plugin list; the first plugin becomes active."""
        self.renders.append(list(plugins))
        self.plugins = list(plugins)
        self._services = services
        self.mounted = True
        if self.active is None and self.plugins:
            self._set_active(self.plugins[0])

    def unmount(self) -> None:
        self.mounted = False
        self.active = None

    def activate(self, plugin_id: str) -> "Plugin":
        """Make a plugin active.

        Raises:
            KeyError: If the plugin id was not rendered
        """
        for plugin in self.plugins:
            if plugin.id == plugin_id:
                self._set_active(plugin)
                return plugin
        raise KeyError(plugin_id)

    def _set_active(self, plugin: "Plugin") -> None:
        self.active = plugin
        if self._on_activate is not None:
            self._on_activate(plugin)
        if self._services is not None and self._services.has(Tokens.EVENTS):
            self._services.get(Tokens.EVENTS).emit(PLUGIN_ACTIVATED, {"id": plugin.id})

    def slot(self, name: str) -> List[Any]:
        """Contributions for a slot, in render order."""
        if self._services is None:
            return []
        return self._services.get(Tokens.SLOTS).get(name)
