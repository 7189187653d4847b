"""Service container keyed by well-known string tokens."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator

from luckmd.errors import ServiceNotFoundError

logger = logging.getLogger(__name__)


class Tokens:
    """Well-known service tokens seeded by the composition root."""

    EVENTS = "events"
    COMMANDS = "commands"
    SLOTS = "slots"
    CONFIG = "config"
    THEME = "theme"
    LOGGER = "logger"

    ALL = (EVENTS, COMMANDS, SLOTS, CONFIG, THEME, LOGGER)


class ServiceContainer:
    """Token -> singleton lookup.

    ``set`` overwrites (last write wins). ``get`` raises
    ``ServiceNotFoundError`` naming the token when nothing was set. No
    type checking is done; callers use each token consistently.
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def set(self, token: str, instance: Any) -> None:
        if token in self._services:
            logger.debug("ServiceContainer: Replacing '%s'", token)
        self._services[token] = instance

    def get(self, token: str) -> Any:
        try:
            return self._services[token]
        except KeyError:
            raise ServiceNotFoundError(token) from None

    def has(self, token: str) -> bool:
        return token in self._services

    def __contains__(self, token: object) -> bool:
        return token in self._services

    def tokens(self) -> list[str]:
        return list(self._services)

    def view(self) -> "ContainerView":
        return ContainerView(self)


class ContainerView:
    """Read-only projection of a container handed to extensions and shells."""

    __slots__ = ("_container",)

    def __init__(self, container: ServiceContainer):
        self._container = container

    def get(self, token: str) -> Any:
        return self._container.get(token)

    def has(self, token: str) -> bool:
        return self._container.has(token)

    def __contains__(self, token: object) -> bool:
        return token in self._container

    def __iter__(self) -> Iterator[str]:
        return iter(self._container.tokens())
