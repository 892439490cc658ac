"""Rewrite a module's export assignment into a named declaration."""

from __future__ import annotations

from jsbundle.conventions import check_export_assignment
from jsbundle.logging import get_logger
from jsbundle.parser import SourceParser, attach_comments
from jsbundle.paths import ModuleLayout


class ModuleTransformer:
    """Turns `module.exports = <value>;` into `var <identifier> = <value>;`."""

    def __init__(self, parser: SourceParser, layout: ModuleLayout):
        self.parser = parser
        self.layout = layout

    def get_modified_source(self, identifier: str) -> str:
        """Get a module's exported value as a standalone declaration.

        All comments of the file are emitted verbatim ahead of the
        declaration, in source order. Comments inside the exported value are
        kept in place as part of the value's own text.

        Args:
            identifier: Module identifier, also the declared variable name

        Returns:
            Declaration source text, without a trailing newline

        Raises:
            ParseError: If the module's file is not valid JavaScript
            ConventionViolation: If the file does not end in `module.exports = <value>`
        """
        parsed = attach_comments(self.parser.parse(self.layout.identifier_to_filename(identifier)))
        value = check_export_assignment(parsed).raise_if_failed().node

        leading = [
            c.text
            for c in parsed.comments
            if not (c.placement == "inner" and c.within(value))
        ]
        get_logger().debug(f"Transforming {identifier} ({len(leading)} leading comments)")

        lines = leading + [f"var {identifier} = {parsed.text(value)};"]
        return "\n".join(lines)
