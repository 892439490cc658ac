"""Dependency extraction from a module's import block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsbundle.conventions import (
    check_binding_name,
    check_require_call,
    check_single_binding,
    check_sorted,
    is_var_declaration,
    string_value,
)
from jsbundle.logging import get_logger
from jsbundle.parser import SourceParser
from jsbundle.paths import ModuleLayout


@dataclass(frozen=True)
class ImportDecl:
    """One `var name = require('path');` statement."""

    name: str
    path: str
    line: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "line": self.line, "text": self.text}


class DependencyExtractor:
    """Reads the import block of a module and validates it.

    The import block is the leading run of top-level `var` declarations.
    Extraction stops at the first statement of any other kind, normally the
    `module.exports = ...` assignment.
    """

    def __init__(self, parser: SourceParser, layout: ModuleLayout):
        self.parser = parser
        self.layout = layout

    def imports_of(self, identifier: str) -> list[ImportDecl]:
        """Get the validated import declarations of a module, in file order.

        Raises:
            ParseError: If the module's file is not valid JavaScript
            ConventionViolation: If a declaration is not a single require binding
            UnsortedImports: If the bound names are not in ascending order
            NamingMismatch: If a bound name does not match its require path
        """
        parsed = self.parser.parse(self.layout.identifier_to_filename(identifier))

        declarations = []
        for statement in parsed.statements:
            if not is_var_declaration(statement):
                break
            declarations.append(statement)

        bindings = []
        for declaration in declarations:
            declarator = check_single_binding(parsed, declaration).raise_if_failed().node
            literal = check_require_call(parsed, declarator).raise_if_failed().node
            bindings.append((declaration, declarator, string_value(parsed, literal)))

        names = [parsed.text(d.child_by_field_name("name")) for _, d, _ in bindings]
        check_sorted(parsed, names).raise_if_failed()

        for _, declarator, path in bindings:
            check_binding_name(parsed, declarator, path, self.layout.internal_dir).raise_if_failed()

        return [
            ImportDecl(name=name, path=path, line=parsed.line(declaration), text=parsed.text(declaration))
            for name, (declaration, _, path) in zip(names, bindings)
        ]

    def dependencies_of(self, identifier: str) -> list[str]:
        """Get the identifiers a module imports, in file order."""
        dependencies = [decl.name for decl in self.imports_of(identifier)]
        get_logger().debug(f"{identifier} depends on {dependencies}")
        return dependencies
