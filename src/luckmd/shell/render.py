"""Turn opaque renderable handles into Textual widgets."""

from __future__ import annotations

from typing import Any, Iterable, List

from textual.widget import Widget
from textual.widgets import Static


def materialize(renderable: Any, **props: Any) -> Widget:
    """Build a widget from a renderable handle.

    Accepts a widget instance, a widget class, a factory returning either
    of those, or anything ``Static`` can display (str, Rich renderables).
    """
    if isinstance(renderable, Widget):
        return renderable
    if isinstance(renderable, type) and issubclass(renderable, Widget):
        return renderable(**props)
    if callable(renderable):
        produced = renderable(**props)
        if isinstance(produced, Widget):
            return produced
        return Static(produced if produced is not None else "")
    return Static(renderable if renderable is not None else "")


def materialize_all(renderables: Iterable[Any], **props: Any) -> List[Widget]:
    return [materialize(r, **props) for r in renderables]


def icon_label(icon: Any, title: str) -> str:
    """Rail label: a short text icon, or the first letter of the title."""
    if isinstance(icon, str) and icon:
        return icon
    return title[:1].upper()
