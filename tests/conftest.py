"""Shared fixtures: small module trees written to a temporary directory."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from jsbundle.paths import ModuleLayout

# a <- b <- c, with c also depending on a directly
ABC_MODULES = {
    "a": "module.exports = function a() { return 'a'; };\n",
    "b": (
        "var a = require('./a');\n"
        "\n"
        "// b wraps a\n"
        "module.exports = function b() { return a(); };\n"
    ),
    "c": (
        "var a = require('./a');\n"
        "var b = require('./b');\n"
        "\n"
        "module.exports = function c() { return a() + b(); };\n"
    ),
}

WriteModules = Callable[..., ModuleLayout]


@pytest.fixture
def write_modules(tmp_path: Path) -> WriteModules:
    """Write {identifier: source} into tmp_path/src and return the layout."""

    def write(modules: dict[str, str], internal_dir: str = "internal") -> ModuleLayout:
        layout = ModuleLayout(src_dir=tmp_path / "src", internal_dir=internal_dir)
        layout.src_dir.mkdir(parents=True, exist_ok=True)
        for identifier, source in modules.items():
            path = layout.identifier_to_filename(identifier)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source)
        return layout

    return write


@pytest.fixture
def abc_layout(write_modules: WriteModules) -> ModuleLayout:
    """Layout holding the a/b/c modules."""
    return write_modules(ABC_MODULES)
