"""Configuration models and loader."""

from luckmd.config.loader import load_config
from luckmd.config.schema import (
    ActivationConfig,
    ExtensionsConfig,
    GeneralConfig,
    LuckmdConfig,
    PanelConfig,
    UIConfig,
)

__all__ = [
    "ActivationConfig",
    "ExtensionsConfig",
    "GeneralConfig",
    "LuckmdConfig",
    "PanelConfig",
    "UIConfig",
    "load_config",
]
