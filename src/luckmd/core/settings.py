"""Config service - in-memory key/value settings shared with extensions.

Keys are flat strings; dotted names such as ``"editor.font_size"`` are a
naming convention only. Values live for the process lifetime.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ConfigStore(Protocol):
    """Protocol for the ``config`` service."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryConfig:
    """Dictionary-backed ConfigStore."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, falling back to ``default`` when missing or None."""
        value = self._data.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        self._data.update(values)

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        if key in self._data:
            del self._data[key]
            return True
        return False

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of every stored value."""
        return copy.deepcopy(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
