"""jsbundle Parser - Tree-sitter based JavaScript parsing."""

from jsbundle.parser.base import (
    SourceParser,
    attach_comments,
    get_node_text,
    named_children,
    parse_source,
    walk,
)
from jsbundle.parser.models import Comment, ParsedSource, Token

__all__ = [
    "SourceParser",
    "attach_comments",
    "get_node_text",
    "named_children",
    "parse_source",
    "walk",
    "Comment",
    "ParsedSource",
    "Token",
]
