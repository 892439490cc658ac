"""Data models for parsed JavaScript sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from tree_sitter import Node, Tree

# Node types that sit between statements without being statements
NON_STATEMENT_TYPES = frozenset({"comment", "html_comment", "hash_bang_line"})


@dataclass
class Comment:
    """A source comment and, once attached, the statement it belongs to."""

    kind: Literal["Line", "Block"]
    text: str  # Full comment text including the // or /* */ delimiters
    start_byte: int
    end_byte: int
    line: int  # 1-based
    statement: int | None = None  # Index of the owning top-level statement
    placement: Literal["leading", "inner", "trailing"] | None = None

    @property
    def value(self) -> str:
        """Comment body without delimiters."""
        if self.kind == "Block":
            return self.text[2:-2]
        return self.text[2:]

    def within(self, node: Node) -> bool:
        """Check whether the comment lies inside a node's byte range."""
        return node.start_byte <= self.start_byte and self.end_byte <= node.end_byte

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "text": self.text,
            "range": [self.start_byte, self.end_byte],
            "line": self.line,
            "statement": self.statement,
            "placement": self.placement,
        }


@dataclass(frozen=True)
class Token:
    """A non-comment leaf of the syntax tree."""

    type: str
    text: str
    start_byte: int
    end_byte: int


@dataclass
class ParsedSource:
    """Syntax tree of one file together with its comments and tokens."""

    path: str
    source: bytes
    tree: Tree
    comments: list[Comment] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)
    comments_attached: bool = False

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def statements(self) -> list[Node]:
        """Top-level statements in source order."""
        return [n for n in self.root.named_children if n.type not in NON_STATEMENT_TYPES]

    def text(self, node: Node) -> str:
        """Source text of a node."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def line(self, node: Node) -> int:
        """1-based line a node starts on."""
        return node.start_point[0] + 1
