"""Rendering shell boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

if TYPE_CHECKING:
    from luckmd.core.container import ContainerView
    from luckmd.plugins.protocol import Plugin


@runtime_checkable
class RenderingShell(Protocol):
    """Protocol for shells that present plugins.

    The composition root calls ``mount`` once per render with the final
    ordered plugin list. The shell decides which plugin is active and
    renders sidebars, content panes and slot contributions; it reaches
    the slot registry and other services through ``services``.
    """

    def mount(self, plugins: List["Plugin"], services: "ContainerView") -> None:
        ...

    def unmount(self) -> None:
        ...
