from __future__ import annotations

from pathlib import Path

import pytest

from luckmd.plugins.loader import ExtensionLoader
from luckmd.plugins.protocol import FunctionExtension


@pytest.fixture
def extension_dir(tmp_path: Path) -> Path:
    root = tmp_path / "extensions"
    root.mkdir()
    (root / "clock.py").write_text(
        """
class ClockExtension:
    id = "clock"

    def activate(self, ctx):
        ctx.commands.register("clock.now", lambda: "12:00")
"""
    )
    (root / "greeter.py").write_text(
        """
EXTENSION_ID = "greeter-ext"

def activate(ctx):
    ctx.commands.register("greeter.hi", lambda: "hi")

def deactivate(ctx):
    pass
"""
    )
    package = root / "bundle"
    package.mkdir()
    (package / "__init__.py").write_text(
        """
from luckmd.plugins.protocol import FunctionExtension

extension = FunctionExtension(id="bundle", activate_fn=lambda ctx: None)
"""
    )
    (root / "broken.py").write_text("raise ImportError('missing dependency')\n")
    (root / "_private.py").write_text("")
    return root


def test_discover_lists_files_and_packages(extension_dir: Path) -> None:
    names = ExtensionLoader([extension_dir]).discover()
    for name in ("bundle", "clock", "greeter", "broken"):
        assert name in names
    assert "_private" not in names


def test_load_extension_class(extension_dir: Path) -> None:
    ext = ExtensionLoader([extension_dir]).load("clock")
    assert ext is not None
    assert ext.id == "clock"


def test_load_module_functions(extension_dir: Path) -> None:
    ext = ExtensionLoader([extension_dir]).load("greeter")
    assert isinstance(ext, FunctionExtension)
    assert ext.id == "greeter-ext"
    assert ext.deactivate_fn is not None


def test_load_package_attribute(extension_dir: Path) -> None:
    loader = ExtensionLoader([extension_dir])
    ext = loader.load("bundle")
    assert ext is not None and ext.id == "bundle"
    assert loader.load("bundle") is ext
    assert loader.loaded == ["bundle"]


def test_broken_and_missing_extensions_are_skipped(extension_dir: Path) -> None:
    loader = ExtensionLoader([extension_dir])
    assert loader.load("broken") is None
    assert loader.load("nowhere") is None
    assert [e.id for e in loader.load_many(["clock", "broken", "bundle"])] == ["clock", "bundle"]


def test_missing_directory_is_ignored(tmp_path: Path) -> None:
    assert ExtensionLoader([tmp_path / "absent"]).load("clock") is None
