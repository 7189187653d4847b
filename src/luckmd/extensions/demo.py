"""Demo extension showing commands and slot contributions."""

from __future__ import annotations

from typing import Optional

from textual.widgets import Static

from luckmd.core.slot_registry import (
    RIGHT_SIDEBAR_CONTENT,
    RIGHT_SIDEBAR_FOOTER,
    SIDEBAR_FOOTER,
)
from luckmd.plugins.protocol import ActivationContext

DEFAULT_NAME = "LuckMD"


def _footer() -> Static:
    return Static("DemoExtension loaded", classes="placeholder")


def _panel() -> Static:
    return Static(
        "[b]Demo extension[/b]\n"
        "Adds content to the right panel.\n\n"
        "Slots:\n"
        f"  - {SIDEBAR_FOOTER}\n"
        f"  - {RIGHT_SIDEBAR_CONTENT}\n"
        f"  - {RIGHT_SIDEBAR_FOOTER}"
    )


def _panel_footer() -> Static:
    return Static("DemoExtension panel", classes="placeholder")


class DemoExtension:
    """Registers ``demo.say_hello`` and fills the shell's slots."""

    id = "demo-extension"

    def activate(self, ctx: ActivationContext) -> None:
        logger = ctx.logger

        def say_hello(name: Optional[str] = None) -> str:
            logger.info("[demo.say_hello] %s", name or DEFAULT_NAME)
            return f"Hello {name or DEFAULT_NAME}"

        ctx.commands.register(
            "demo.say_hello",
            say_hello,
            title="Say Hello",
            description="Greet someone from the demo extension",
            source=self.id,
        )
        ctx.slots.register(SIDEBAR_FOOTER, _footer)
        ctx.slots.register(RIGHT_SIDEBAR_CONTENT, _panel)
        ctx.slots.register(RIGHT_SIDEBAR_FOOTER, _panel_footer)

    def deactivate(self, ctx: ActivationContext) -> None:
        ctx.logger.info("DemoExtension deactivated")
