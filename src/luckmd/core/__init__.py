"""Core services shared by plugins and extensions.

- EventBus: Named pub/sub channel
- CommandRegistry: Named invocable actions
- SlotRegistry: Ordered contribution points
- ServiceContainer: Token-keyed singletons
- MemoryConfig / SimpleTheme: Config and theme services
"""

from luckmd.core.command_registry import Command, CommandHistoryEntry, CommandRegistry
from luckmd.core.container import ContainerView, ServiceContainer, Tokens
from luckmd.core.event_bus import EventBus
from luckmd.core.log import Logger, default_logger
from luckmd.core.settings import ConfigStore, MemoryConfig
from luckmd.core.slot_registry import SlotRegistry
from luckmd.core.theme import SimpleTheme, ThemeManager, resolve_textual_theme

__all__ = [
    # Event Bus
    "EventBus",
    # Command Registry
    "Command",
    "CommandHistoryEntry",
    "CommandRegistry",
    # Slot Registry
    "SlotRegistry",
    # Container
    "ContainerView",
    "ServiceContainer",
    "Tokens",
    # Services
    "ConfigStore",
    "MemoryConfig",
    "SimpleTheme",
    "ThemeManager",
    "resolve_textual_theme",
    "Logger",
    "default_logger",
]
