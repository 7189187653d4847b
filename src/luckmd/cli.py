"""luckmd command line interface."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from luckmd.config.loader import load_config
from luckmd.config.schema import LuckmdConfig
from luckmd.errors import ExtensionActivationError
from luckmd.plugins.adapters import adapt_plugin
from luckmd.plugins.protocol import Plugin

app = typer.Typer(
    name="luckmd",
    help="LuckMD - plugin and extension runtime with a multi-pane terminal shell.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

WELCOME_TEXT = """\
# Welcome to LuckMD

Plugins appear in the rail on the left. Select one to show its sidebar
and content. Extensions contribute commands and panel content.

- `ctrl+b` toggles the sidebar
- `ctrl+r` toggles the right panel
- `ctrl+q` quits
"""


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(config_path: Optional[Path]) -> LuckmdConfig:
    try:
        return load_config(config_path)
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1)


def _welcome_plugin() -> Plugin:
    from textual.widgets import Markdown, Static

    return adapt_plugin(
        "welcome",
        "Welcome",
        sidebar=lambda: Static("Getting started", classes="placeholder"),
        content=lambda: Markdown(WELCOME_TEXT),
        icon="W",
        description="Introduction to the shell",
    )


async def _run_shell(cfg: LuckmdConfig, demo: bool) -> None:
    from luckmd.create import create
    from luckmd.extensions.demo import DemoExtension
    from luckmd.plugins.loader import ExtensionLoader
    from luckmd.shell.textual_shell import TextualShell

    loader = ExtensionLoader(cfg.extensions.extension_dirs)
    extensions = loader.load_many(cfg.extensions.enabled)
    if demo:
        extensions.insert(0, DemoExtension())

    runtime = create(plugins=lambda: [_welcome_plugin()], extensions=extensions, config=cfg)
    shell = TextualShell(ui=cfg.ui)
    try:
        await runtime.render(shell)
        await shell.run_async()
    finally:
        await runtime.dispose()


@app.command("run", help="Launch the multi-pane shell.")
def run(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a luckmd.toml file"
    ),
    no_demo: bool = typer.Option(False, "--no-demo", help="Do not load the demo extension"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    _setup_logging(verbose)
    cfg = _load(config_path)
    try:
        asyncio.run(_run_shell(cfg, demo=cfg.extensions.load_demo and not no_demo))
    except ExtensionActivationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("extensions", help="List discoverable extensions.")
def list_extensions(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a luckmd.toml file"
    ),
) -> None:
    from luckmd.plugins.loader import ExtensionLoader

    cfg = _load(config_path)
    loader = ExtensionLoader(cfg.extensions.extension_dirs)
    names = loader.discover()

    if not names:
        console.print("[dim]No extensions found.[/dim]")
        return

    enabled = set(cfg.extensions.enabled)
    table = Table(title="Extensions")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled")
    for name in names:
        table.add_row(name, "yes" if name in enabled else "-")
    console.print(table)


@app.command("config", help="Show the resolved configuration as JSON.")
def show_config(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a luckmd.toml file"
    ),
    section: Optional[str] = typer.Option(
        None, "--section", "-s", help="Only show one section (e.g. 'activation')"
    ),
) -> None:
    cfg = _load(config_path)
    data = cfg.model_dump(mode="json")
    if section:
        if section not in data:
            console.print(f"[red]Error:[/red] Unknown section '{section}'")
            console.print(f"Available sections: {', '.join(data)}")
            raise typer.Exit(1)
        data = data[section]
    console.print_json(json.dumps(data))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
