"""Adapters from foreign plugin shapes to ``Plugin``."""

from __future__ import annotations

from typing import Optional

from luckmd.plugins.protocol import Plugin, Renderable


def adapt_plugin(
    plugin_id: str,
    title: str,
    sidebar: Renderable,
    content: Renderable,
    icon: Renderable = None,
    description: Optional[str] = None,
) -> Plugin:
    """Build a Plugin from a sidebar/content pair. Has no side effects."""
    return Plugin(
        id=plugin_id,
        title=title,
        description=description,
        icon=icon,
        sidebar=sidebar,
        content=content,
    )
