"""Logger service used by extensions and the runtime."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

LOGGER_NAME = "luckmd"


@runtime_checkable
class Logger(Protocol):
    """Protocol for the ``logger`` service (a ``logging.Logger`` fits)."""

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        ...

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        ...

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        ...


def default_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
