"""Normalize plugin and extension sources.

A source may be given as an immediate value or a deferred one:

- ``None`` (nothing to load)
- a sequence
- an awaitable yielding a sequence
- a zero-argument callable returning any of the above

Both resolvers turn every shape into a coroutine before anything touches
a registry.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable
from typing import Any, Awaitable, Callable, List, Sequence, Union

from luckmd.plugins.protocol import Extension, Plugin

PluginSource = Union[
    None,
    Sequence[Plugin],
    Awaitable[Sequence[Plugin]],
    Callable[[], Any],
]
ExtensionSource = Union[
    None,
    Sequence[Union[Extension, Awaitable[Extension]]],
    Awaitable[Sequence[Extension]],
    Callable[[], Any],
]


async def _settle(source: Any) -> List[Any]:
    value = source
    if callable(value) and not isinstance(value, Iterable):
        value = value()
    if inspect.isawaitable(value):
        value = await value
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"Expected a collection, got {type(value).__name__}")
    return list(value)


async def resolve_plugins(source: PluginSource) -> List[Plugin]:
    """Resolve a plugin source into an ordered list of plugins."""
    plugins = await _settle(source)
    for plugin in plugins:
        if not isinstance(plugin, Plugin):
            raise TypeError(f"Not a Plugin: {plugin!r}")
    return plugins


async def resolve_extensions(source: ExtensionSource) -> List[Extension]:
    """Resolve an extension source.

    Awaitable elements are gathered concurrently; activation order still
    follows the order of the source.
    """
    items = await _settle(source)
    resolved = await asyncio.gather(*(_resolve_item(item) for item in items))
    return list(resolved)


async def _resolve_item(item: Any) -> Extension:
    if inspect.isawaitable(item):
        item = await item
    if isinstance(item, type):
        item = item()
    if not isinstance(getattr(item, "id", None), str) or not callable(
        getattr(item, "activate", None)
    ):
        raise TypeError(f"Not an extension (needs 'id' and 'activate'): {item!r}")
    return item
