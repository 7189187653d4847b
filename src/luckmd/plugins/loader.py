"""Extension loader for discovering extensions outside the host."""

from __future__ import annotations

import importlib.util
import logging
import sys
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, List, Optional

from luckmd.plugins.protocol import Extension, FunctionExtension

logger = logging.getLogger(__name__)


def _coerce(name: str, obj: Any) -> Optional[Extension]:
    """Turn an entry point target or module attribute into an extension."""
    if isinstance(obj, type):
        obj = obj()
    if isinstance(obj, Extension):
        return obj
    if callable(obj):
        return FunctionExtension(id=name, activate_fn=obj)
    return None


class ExtensionLoader:
    """Loads extensions from entry points and directories.

    Extensions can be discovered from:
    1. Python entry points (``luckmd.extensions`` group)
    2. Extension directories (``name.py`` files or ``name/`` packages)

    A module provides its extension as an ``extension`` attribute, an
    ``Extension`` class, or a module-level ``activate(ctx)`` function.

    Example:
        loader = ExtensionLoader(extension_dirs=[Path("~/.config/luckmd/extensions")])
        available = loader.discover()
        extensions = loader.load_many(available)
    """

    ENTRY_POINT_GROUP = "luckmd.extensions"

    def __init__(self, extension_dirs: Optional[Iterable[Path]] = None):
        self._dirs = [Path(p).expanduser() for p in (extension_dirs or [])]
        self._loaded: dict[str, Extension] = {}

    def discover(self) -> List[str]:
        """Discover available extension names, sorted."""
        names: set[str] = set()

        for ep in entry_points(group=self.ENTRY_POINT_GROUP):
            names.add(ep.name)

        for directory in self._dirs:
            if not directory.is_dir():
                continue
            for item in directory.iterdir():
                if item.suffix == ".py" and not item.name.startswith("_"):
                    names.add(item.stem)
                elif item.is_dir() and (item / "__init__.py").exists():
                    names.add(item.name)

        return sorted(names)

    def load(self, name: str) -> Optional[Extension]:
        """Load an extension by name.

        Returns:
            Extension instance, or None if not found or broken
        """
        if name in self._loaded:
            return self._loaded[name]

        ext = self._load_from_entry_point(name) or self._load_from_directory(name)
        if ext is None:
            logger.warning("Extension '%s' not found", name)
            return None

        self._loaded[name] = ext
        return ext

    def load_many(self, names: Iterable[str]) -> List[Extension]:
        """Load several extensions, keeping order and dropping failures."""
        loaded = []
        for name in names:
            ext = self.load(name)
            if ext is not None:
                loaded.append(ext)
        return loaded

    def _load_from_entry_point(self, name: str) -> Optional[Extension]:
        for ep in entry_points(group=self.ENTRY_POINT_GROUP):
            if ep.name != name:
                continue
            try:
                return _coerce(name, ep.load())
            except Exception as exc:
                logger.warning("Failed to load extension entry point '%s': %s", name, exc)
                return None
        return None

    def _load_from_directory(self, name: str) -> Optional[Extension]:
        for directory in self._dirs:
            module_path = directory / f"{name}.py"
            if module_path.exists():
                return self._load_from_file(name, module_path)

            package_path = directory / name / "__init__.py"
            if package_path.exists():
                return self._load_from_file(name, package_path)
        return None

    def _load_from_file(self, name: str, path: Path) -> Optional[Extension]:
        module_name = f"luckmd_ext_{name.replace('-', '_')}"
        try:
            spec = importlib.util.spec_from_file_location(
                module_name,
                path,
                submodule_search_locations=[str(path.parent)] if path.name == "__init__.py" else None,
            )
            if spec is None or spec.loader is None:
                return None
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            logger.warning("Failed to import extension '%s' from %s: %s", name, path, exc)
            return None

        return self._from_module(name, module)

    def _from_module(self, name: str, module: ModuleType) -> Optional[Extension]:
        if hasattr(module, "extension"):
            return _coerce(name, module.extension)

        class_name = "".join(word.capitalize() for word in name.replace("_", "-").split("-"))
        for attr in (class_name, f"{class_name}Extension"):
            if isinstance(getattr(module, attr, None), type):
                return _coerce(name, getattr(module, attr))

        if callable(getattr(module, "activate", None)):
            deactivate = getattr(module, "deactivate", None)
            return FunctionExtension(
                id=getattr(module, "EXTENSION_ID", name),
                activate_fn=module.activate,
                deactivate_fn=deactivate if callable(deactivate) else None,
            )

        logger.warning("Module for extension '%s' exposes no extension", name)
        return None

    @property
    def loaded(self) -> List[str]:
        return list(self._loaded)
