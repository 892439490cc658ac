"""Module layout: mapping between identifiers and source files.

A source tree looks like this:

    src/
    ├── add.js              # public module `add`
    ├── map.js              # public module `map`
    └── internal/
        ├── _curry2.js      # internal module `_curry2`
        └── _map.js         # internal module `_map`

Every identifier starting with an underscore (other than `__` itself) lives
in the internal directory; everything else lives directly in `src/`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from jsbundle.errors import ConfigError

if TYPE_CHECKING:
    from jsbundle.config import BundleConfig

# Config file stays at project root (user-editable)
CONFIG_FILE = ".jsbundlerc.toml"

# Template text replaced by the generated declarations
DEFAULT_MARKER = "/* global R */"

_INTERNAL_IDENTIFIER = re.compile(r"^(?!__$)_")


def is_internal(identifier: str) -> bool:
    """Check whether an identifier names an internal module."""
    return _INTERNAL_IDENTIFIER.match(identifier) is not None


@dataclass(frozen=True)
class ModuleLayout:
    """Where modules live on disk."""

    src_dir: Path
    internal_dir: str = "internal"
    extension: str = ".js"

    @classmethod
    def from_config(cls, config: BundleConfig, root: Path | None = None) -> ModuleLayout:
        """Build a layout from configuration, resolving against the project root."""
        base = Path(root if root is not None else config.layout.root).resolve()
        return cls(
            src_dir=base / config.layout.src_dir,
            internal_dir=config.layout.internal_dir,
            extension=config.layout.extension,
        )

    def identifier_to_filename(self, identifier: str) -> Path:
        """Get the source file for a module identifier."""
        directory = self.src_dir / self.internal_dir if is_internal(identifier) else self.src_dir
        return directory / f"{identifier}{self.extension}"

    def filename_to_identifier(self, filename: str | Path) -> str:
        """Get the module identifier for a source file (basename minus extension)."""
        name = Path(filename).name
        if name.endswith(self.extension) and name != self.extension:
            return name[: -len(self.extension)]
        return name

    def discover(self) -> list[Path]:
        """List every public module file in the source directory.

        Only direct children of the source directory are considered: internal
        modules are reached through dependencies, never requested directly.
        """
        if not self.src_dir.is_dir():
            raise ConfigError(
                f"Source directory not found: {self.src_dir}", src_dir=str(self.src_dir)
            )
        return sorted(
            p for p in self.src_dir.iterdir() if p.is_file() and p.name.endswith(self.extension)
        )
