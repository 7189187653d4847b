"""Multi-pane Textual shell.

Layout, left to right:

- plugin rail: one button per plugin (text icon or first letter)
- sidebar pane: active plugin's sidebar, then the ``sidebar.footer`` slot
- content pane: active plugin's content
- right pane: ``right-sidebar.content`` and ``right-sidebar.footer`` slots

The first plugin is activated on start so the screen is never blank.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Footer, Static

from luckmd.core.container import Tokens
from luckmd.core.event_bus import PLUGIN_ACTIVATED, THEME_CHANGED
from luckmd.core.slot_registry import (
    RIGHT_SIDEBAR_CONTENT,
    RIGHT_SIDEBAR_FOOTER,
    SIDEBAR_FOOTER,
)
from luckmd.core.theme import resolve_textual_theme
from luckmd.shell.render import icon_label, materialize, materialize_all

if TYPE_CHECKING:
    from luckmd.config.schema import UIConfig
    from luckmd.core.container import ContainerView
    from luckmd.core.slot_registry import SlotRegistry
    from luckmd.plugins.protocol import Plugin

logger = logging.getLogger(__name__)


def _dom_id(prefix: str, name: str) -> str:
    return f"{prefix}-{re.sub(r'[^A-Za-z0-9_-]', '-', name)}"


class PluginButton(Button):
    """Rail button bound to a plugin id."""

    def __init__(self, plugin: "Plugin") -> None:
        super().__init__(
            icon_label(plugin.icon, plugin.title),
            id=_dom_id("plugin", plugin.id),
            classes="rail-button",
        )
        self.tooltip = plugin.title
        self.plugin_id = plugin.id


class SlotView(Vertical):
    """Renders every contribution of one slot, in order."""

    DEFAULT_CSS = """
    SlotView {
        height: auto;
    }
    """

    def __init__(self, slot_name: str, slots: Optional["SlotRegistry"], **kwargs: Any) -> None:
        super().__init__(id=_dom_id("slot", slot_name), **kwargs)
        self.slot_name = slot_name
        self._slots = slots

    def compose(self) -> ComposeResult:
        if self._slots is None:
            return
        yield from materialize_all(self._slots.get(self.slot_name))


class MultiPaneApp(App):
    """Textual application backing ``TextualShell``."""

    CSS = """
    #luckmd-root {
        height: 1fr;
    }

    #plugin-rail {
        width: 8;
        border-right: solid $primary;
        padding: 0 1;
    }

    .rail-button {
        min-width: 5;
        width: 100%;
        margin-bottom: 1;
    }

    .rail-button.-active {
        background: $accent;
    }

    #sidebar-pane {
        width: 32;
        border-right: solid $primary;
    }

    #sidebar-body {
        height: 1fr;
    }

    #content-pane {
        width: 1fr;
        padding: 0 1;
    }

    #right-pane {
        width: 28;
        border-left: solid $primary;
    }

    .pane-title {
        text-style: bold;
        border-bottom: solid $primary;
    }

    .placeholder {
        color: $text-muted;
        padding: 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+b", "toggle_sidebar", "Sidebar", show=True),
        Binding("ctrl+r", "toggle_right", "Panel", show=True),
        Binding("ctrl+q", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        ui: Optional["UIConfig"] = None,
        on_activate: Optional[Callable[[Optional["Plugin"]], None]] = None,
    ) -> None:
        super().__init__()
        self.plugins: List["Plugin"] = []
        self.active: Optional["Plugin"] = None
        self._services: Optional["ContainerView"] = None
        self._on_activate = on_activate
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._ui = ui
        if ui is not None:
            self.title = ui.title

    # -- data ----------------------------------------------------------

    def set_plugins(self, plugins: List["Plugin"], services: "ContainerView") -> None:
        """Replace the plugin list; refreshes the rail when running."""
        self.plugins = list(plugins)
        self._services = services
        if self.is_running:
            self.call_later(self._reload)

    def _service(self, token: str) -> Any:
        if self._services is None or not self._services.has(token):
            return None
        return self._services.get(token)

    # -- layout --------------------------------------------------------

    def compose(self) -> ComposeResult:
        slots = self._service(Tokens.SLOTS)
        with Horizontal(id="luckmd-root"):
            with Vertical(id="plugin-rail"):
                for plugin in self.plugins:
                    yield PluginButton(plugin)
            with Vertical(id="sidebar-pane"):
                yield VerticalScroll(
                    Static("Select a plugin", classes="placeholder"), id="sidebar-body"
                )
                yield SlotView(SIDEBAR_FOOTER, slots)
            yield VerticalScroll(Static("Content", classes="placeholder"), id="content-pane")
            with Vertical(id="right-pane"):
                yield Static("Panel", classes="pane-title")
                with VerticalScroll():
                    yield SlotView(RIGHT_SIDEBAR_CONTENT, slots)
                yield SlotView(RIGHT_SIDEBAR_FOOTER, slots)
        yield Footer()

    async def on_mount(self) -> None:
        if self._ui is not None:
            sidebar = self.query_one("#sidebar-pane")
            right = self.query_one("#right-pane")
            sidebar.display = self._ui.sidebar.visible
            right.display = self._ui.right_sidebar.visible
            if self._ui.sidebar.width:
                sidebar.styles.width = self._ui.sidebar.width
            if self._ui.right_sidebar.width:
                right.styles.width = self._ui.right_sidebar.width

        theme = self._service(Tokens.THEME)
        if theme is not None:
            self.theme = resolve_textual_theme(theme.current())
        events = self._service(Tokens.EVENTS)
        if events is not None:
            self._unsubscribe = events.on(THEME_CHANGED, self._on_theme_changed)

        if self.active is None and self.plugins:
            await self.activate_plugin(self.plugins[0].id)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _reload(self) -> None:
        rail = self.query_one("#plugin-rail")
        await rail.remove_children()
        await rail.mount_all([PluginButton(p) for p in self.plugins])
        ids = {p.id for p in self.plugins}
        if self.active is None or self.active.id not in ids:
            self.active = None
            if self.plugins:
                await self.activate_plugin(self.plugins[0].id)

    # -- behavior ------------------------------------------------------

    async def activate_plugin(self, plugin_id: str) -> None:
        """Show a plugin's sidebar and content.

        Raises:
            KeyError: If no rendered plugin has this id
        """
        plugin = next((p for p in self.plugins if p.id == plugin_id), None)
        if plugin is None:
            raise KeyError(plugin_id)

        self.active = plugin
        for button in self.query(PluginButton):
            button.set_class(button.plugin_id == plugin_id, "-active")

        sidebar = self.query_one("#sidebar-body")
        await sidebar.remove_children()
        if plugin.sidebar is not None:
            await sidebar.mount(materialize(plugin.sidebar))
        else:
            await sidebar.mount(Static("Select a plugin", classes="placeholder"))

        content = self.query_one("#content-pane")
        await content.remove_children()
        if plugin.content is not None:
            await content.mount(materialize(plugin.content))
        else:
            await content.mount(Static("Content", classes="placeholder"))

        logger.debug("Activated plugin '%s'", plugin.id)
        if self._on_activate is not None:
            self._on_activate(plugin)
        events = self._service(Tokens.EVENTS)
        if events is not None:
            events.emit(PLUGIN_ACTIVATED, {"id": plugin.id})

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, PluginButton):
            event.stop()
            await self.activate_plugin(event.button.plugin_id)

    def _on_theme_changed(self, payload: dict[str, Any]) -> None:
        self.theme = resolve_textual_theme(payload.get("current"))

    def action_toggle_sidebar(self) -> None:
        pane = self.query_one("#sidebar-pane")
        pane.display = not pane.display

    def action_toggle_right(self) -> None:
        pane = self.query_one("#right-pane")
        pane.display = not pane.display


class TextualShell:
    """RenderingShell that presents plugins in a ``MultiPaneApp``.

    Usage:
        shell = TextualShell()
        await runtime.render(shell)
        await shell.run_async()
    """

    def __init__(
        self,
        ui: Optional["UIConfig"] = None,
        on_activate: Optional[Callable[[Optional["Plugin"]], None]] = None,
    ) -> None:
        self.app = MultiPaneApp(ui=ui, on_activate=on_activate)

    def mount(self, plugins: List["Plugin"], services: "ContainerView") -> None:
        self.app.set_plugins(plugins, services)

    def unmount(self) -> None:
        if self.app.is_running:
            self.app.exit()

    async def run_async(self) -> None:
        await self.app.run_async()

    def run(self) -> None:
        self.app.run()
