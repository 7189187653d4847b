"""Theme service.

The runtime only tracks a theme *name*. Shells decide what the name
looks like; ``resolve_textual_theme`` maps it onto Textual's themes.

Usage:
    theme = SimpleTheme(events=bus)
    theme.set("dark")   # emits "theme.changed"
    theme.current()     # "dark"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from textual.theme import BUILTIN_THEMES

from luckmd.core.event_bus import THEME_CHANGED

if TYPE_CHECKING:
    from luckmd.core.event_bus import EventBus

logger = logging.getLogger(__name__)

DEFAULT_THEME = "light"


@runtime_checkable
class ThemeManager(Protocol):
    """Protocol for the ``theme`` service."""

    def current(self) -> str:
        ...

    def set(self, theme: str) -> None:
        ...


class SimpleTheme:
    """Holds the current theme name and announces changes."""

    def __init__(self, name: str = DEFAULT_THEME, events: Optional["EventBus"] = None):
        self._name = name or DEFAULT_THEME
        self._events = events

    def current(self) -> str:
        return self._name

    def set(self, theme: str) -> None:
        """Switch theme. Emits ``theme.changed`` when bound to a bus."""
        previous = self._name
        self._name = theme
        logger.info(f"Theme set to: {theme}")
        if self._events is not None and previous != theme:
            self._events.emit(THEME_CHANGED, {"previous": previous, "current": theme})

    def bind(self, events: "EventBus") -> None:
        self._events = events


def resolve_textual_theme(name: Optional[str]) -> str:
    """Map a runtime theme name onto a Textual builtin theme."""
    normalized = (name or "").strip().lower().replace("_", "-")
    if not normalized or normalized == "light":
        return "textual-light"
    if normalized == "dark":
        return "textual-dark"

    if normalized in BUILTIN_THEMES:
        return normalized

    is_light = normalized.endswith("-light")
    base = normalized.removesuffix("-light").removesuffix("-dark")
    for candidate in (f"{base}-light" if is_light else f"{base}-dark", base):
        if candidate in BUILTIN_THEMES:
            return candidate

    fallback = "textual-light" if is_light else "textual-dark"
    logger.warning("Unknown theme '%s'; falling back to '%s'", name, fallback)
    return fallback
