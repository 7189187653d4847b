"""Rendering shells.

The Textual shell is imported on demand so headless use stays light.
"""

from __future__ import annotations

from typing import Any

from luckmd.shell.base import RenderingShell
from luckmd.shell.headless import HeadlessShell

__all__ = ["HeadlessShell", "RenderingShell", "TextualShell"]


def __getattr__(name: str) -> Any:
    if name == "TextualShell":
        from luckmd.shell.textual_shell import TextualShell

        return TextualShell
    raise AttributeError(name)
