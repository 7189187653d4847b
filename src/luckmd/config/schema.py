"""Pydantic configuration models for luckmd."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from luckmd.plugins.activation import ActivationPolicy


class GeneralConfig(BaseModel):
    """General runtime settings."""

    default_theme: str = "light"
    default_locale: str = "en"


class ActivationConfig(BaseModel):
    """Extension activation behavior."""

    policy: ActivationPolicy = Field(
        default=ActivationPolicy.ABORT,
        description="abort: stop at the first failing extension; collect: try all and report",
    )
    deactivate_on_dispose: bool = True


class ExtensionsConfig(BaseModel):
    """Which extensions to load and where to find them."""

    enabled: list[str] = Field(default_factory=list)
    extension_dirs: list[Path] = Field(default_factory=list)
    load_demo: bool = True


class PanelConfig(BaseModel):
    """Configuration for a UI panel."""

    visible: bool = True
    width: Optional[int] = None


class UIConfig(BaseModel):
    """Shell layout configuration."""

    title: str = "LuckMD"
    sidebar: PanelConfig = Field(default_factory=lambda: PanelConfig(width=32))
    right_sidebar: PanelConfig = Field(default_factory=lambda: PanelConfig(width=28))


class LuckmdConfig(BaseModel):
    """Root configuration."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    activation: ActivationConfig = Field(default_factory=ActivationConfig)
    extensions: ExtensionsConfig = Field(default_factory=ExtensionsConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    # Seeds the ``config`` service
    settings: dict[str, Any] = Field(default_factory=dict)
