"""Slot Registry - named, ordered extension points.

A slot collects renderable contributions from any number of extensions.
Contributions are kept in registration order with no deduplication and
cannot be removed; they live as long as the registry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Slots rendered by the bundled shells
SIDEBAR_FOOTER = "sidebar.footer"
RIGHT_SIDEBAR_CONTENT = "right-sidebar.content"
RIGHT_SIDEBAR_FOOTER = "right-sidebar.footer"

SlotProvider = Any


class SlotRegistry:
    """Append-only mapping of slot name to ordered contributions."""

    def __init__(self):
        self._slots: Dict[str, List[SlotProvider]] = {}

    def register(self, name: str, provider: SlotProvider) -> None:
        """Append a contribution to a slot, creating the slot if needed."""
        self._slots.setdefault(name, []).append(provider)
        logger.debug("SlotRegistry: %s now has %d contribution(s)", name, len(self._slots[name]))

    def get(self, name: str) -> List[SlotProvider]:
        """Snapshot of a slot's contributions. Unknown slots are empty."""
        return list(self._slots.get(name, ()))

    def names(self) -> List[str]:
        return list(self._slots)

    def count(self, name: str) -> int:
        return len(self._slots.get(name, ()))

    def __contains__(self, name: object) -> bool:
        return name in self._slots
