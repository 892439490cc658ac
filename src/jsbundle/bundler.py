"""jsbundle Assembler - joins transformed modules into a single bundle."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsbundle.config import BundleConfig
from jsbundle.extractor import DependencyExtractor
from jsbundle.graph import DependencyGraph, build_graph, order_dependencies
from jsbundle.logging import get_logger
from jsbundle.parser import SourceParser
from jsbundle.paths import ModuleLayout
from jsbundle.template import load_template, splice
from jsbundle.transformer import ModuleTransformer

# A newline that starts a non-empty line; \r, \u2028 and \u2029 also end lines
_LINE_START = re.compile(r"\n(?![\n\r\u2028\u2029]|$)")


@dataclass
class BundlePlan:
    """What goes into a bundle, and in which order."""

    requested: list[str]  # Modules exposed on the aggregate object
    graph: DependencyGraph = field(default_factory=dict)
    order: list[str] = field(default_factory=list)  # Every module, dependencies first

    def to_dict(self) -> dict[str, Any]:
        return {
            "requested": self.requested,
            "graph": self.graph,
            "order": self.order,
        }


def render_aggregate(identifiers: Iterable[str], name: str = "R", indent: str = "    ") -> str:
    """Render the object literal exposing the requested modules.

    Starts with a blank line so it can follow the declarations directly.
    """
    entries = ",".join(f"\n{indent}{identifier}: {identifier}" for identifier in identifiers)
    return f"\n\nvar {name} = {{{entries}\n}};"


def indent_lines(text: str, indent: str = "    ") -> str:
    """Indent every line but the first by one level, leaving blank lines bare."""
    return _LINE_START.sub(lambda _: "\n" + indent, text)


class Bundler:
    """Builds a bundle from a set of requested module files."""

    def __init__(
        self,
        config: BundleConfig | None = None,
        layout: ModuleLayout | None = None,
        parser: SourceParser | None = None,
    ):
        self.config = config if config is not None else BundleConfig()
        self.layout = layout if layout is not None else ModuleLayout.from_config(self.config)
        self.parser = parser if parser is not None else SourceParser()
        self.extractor = DependencyExtractor(self.parser, self.layout)
        self.transformer = ModuleTransformer(self.parser, self.layout)

    def plan(self, filenames: Iterable[str | Path]) -> BundlePlan:
        """Resolve requested files into the full, ordered module list."""
        requested = sorted({self.layout.filename_to_identifier(f) for f in filenames})
        graph = build_graph(requested, self.extractor.dependencies_of)
        order = order_dependencies(graph)
        get_logger().debug(f"Bundling {len(order)} modules for {len(requested)} requested")
        return BundlePlan(requested=requested, graph=graph, order=order)

    def render(self, plan: BundlePlan) -> str:
        """Render declarations and the aggregate object, indented one level."""
        output = self.config.output
        declarations = "\n\n".join(
            self.transformer.get_modified_source(identifier) for identifier in plan.order
        )
        aggregate = render_aggregate(plan.requested, output.aggregate_name, output.indent)
        return indent_lines(declarations + aggregate, output.indent)

    def build(self, filenames: Iterable[str | Path], template: str | None = None) -> str:
        """Build the bundle text for the requested files.

        Args:
            filenames: Module files to expose; only their basenames matter
            template: Template text (default: configured template file, or the built-in one)

        Returns:
            The template with its marker replaced by the generated code
        """
        if template is None:
            path = self.config.template.path
            template = load_template(
                Path(self.config.layout.root) / path if path is not None else None,
                self.config.template.marker,
                self.config.output.aggregate_name,
            )
        body = self.render(self.plan(filenames))
        return splice(template, self.config.template.marker, body)
