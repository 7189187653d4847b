"""In-memory plugin registry."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from luckmd.plugins.protocol import Plugin

logger = logging.getLogger(__name__)


class InMemoryRegistry:
    """Ordered plugin registry where the first registration of an id wins."""

    def __init__(self, plugins: Optional[Iterable[Plugin]] = None):
        self._plugins: List[Plugin] = []
        self._ids: set[str] = set()
        for plugin in plugins or ():
            self.register(plugin)

    def register(self, plugin: Plugin) -> bool:
        """Add a plugin unless its id is already registered.

        Returns:
            True if the plugin was added
        """
        if plugin.id in self._ids:
            logger.debug("PluginRegistry: '%s' already registered; ignoring duplicate", plugin.id)
            return False
        self._plugins.append(plugin)
        self._ids.add(plugin.id)
        return True

    def get(self, plugin_id: str) -> Optional[Plugin]:
        for plugin in self._plugins:
            if plugin.id == plugin_id:
                return plugin
        return None

    def all(self) -> List[Plugin]:
        """Registered plugins in registration order (a copy)."""
        return list(self._plugins)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._ids

    def __len__(self) -> int:
        return len(self._plugins)
