"""Plugin and extension system.

Keep imports light here; the loader is only imported on demand.
"""

from __future__ import annotations

from typing import Any

from luckmd.plugins.activation import (
    ActivationPolicy,
    ActivationReport,
    ActivationState,
    ExtensionActivator,
)
from luckmd.plugins.adapters import adapt_plugin
from luckmd.plugins.protocol import (
    ActivationContext,
    Extension,
    FunctionExtension,
    Plugin,
    PluginRegistry,
    extension,
)
from luckmd.plugins.registry import InMemoryRegistry
from luckmd.plugins.sources import resolve_extensions, resolve_plugins

__all__ = [
    "ActivationContext",
    "ActivationPolicy",
    "ActivationReport",
    "ActivationState",
    "Extension",
    "ExtensionActivator",
    "ExtensionLoader",
    "FunctionExtension",
    "InMemoryRegistry",
    "Plugin",
    "PluginRegistry",
    "adapt_plugin",
    "extension",
    "resolve_extensions",
    "resolve_plugins",
]


def __getattr__(name: str) -> Any:
    if name == "ExtensionLoader":
        from luckmd.plugins.loader import ExtensionLoader

        return ExtensionLoader
    raise AttributeError(name)
