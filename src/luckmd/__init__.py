"""luckmd - an in-process extensibility runtime for plugins and extensions."""

from luckmd.core import (
    CommandRegistry,
    ContainerView,
    EventBus,
    MemoryConfig,
    ServiceContainer,
    SimpleTheme,
    SlotRegistry,
    Tokens,
)
from luckmd.create import LuckmdInstance, create
from luckmd.errors import (
    ActivationFailure,
    CommandNotFoundError,
    ExtensionActivationError,
    LuckmdError,
    ServiceNotFoundError,
)
from luckmd.plugins import (
    ActivationContext,
    ActivationPolicy,
    ActivationState,
    Extension,
    FunctionExtension,
    InMemoryRegistry,
    Plugin,
    adapt_plugin,
    extension,
)

__version__ = "0.1.0"

__all__ = [
    "ActivationContext",
    "ActivationFailure",
    "ActivationPolicy",
    "ActivationState",
    "CommandNotFoundError",
    "CommandRegistry",
    "ContainerView",
    "EventBus",
    "Extension",
    "ExtensionActivationError",
    "FunctionExtension",
    "InMemoryRegistry",
    "LuckmdError",
    "LuckmdInstance",
    "MemoryConfig",
    "Plugin",
    "ServiceContainer",
    "ServiceNotFoundError",
    "SimpleTheme",
    "SlotRegistry",
    "Tokens",
    "adapt_plugin",
    "create",
    "extension",
]
