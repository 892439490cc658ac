"""Tree-sitter parsing with a per-run cache."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Language, Node, Parser

from jsbundle.errors import ParseError
from jsbundle.logging import get_logger
from jsbundle.parser.models import Comment, ParsedSource, Token

_language: Language | None = None


def _get_language() -> Language:
    """Get or create the Tree-sitter JavaScript Language instance."""
    global _language
    if _language is None:
        import tree_sitter_javascript as tsjavascript

        _language = Language(tsjavascript.language())
    return _language


def walk(node: Node) -> Iterator[Node]:
    """Yield a node and all its descendants in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def get_node_text(node: Node, source: bytes) -> str:
    """Extract text content of a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def named_children(node: Node) -> list[Node]:
    """Named children of a node, skipping comments."""
    return [child for child in node.named_children if child.type != "comment"]


def _first_error(root: Node) -> Node | None:
    for node in walk(root):
        if node.is_error or node.is_missing:
            return node
    return None


def _collect(root: Node, source: bytes) -> tuple[list[Comment], list[Token]]:
    comments: list[Comment] = []
    tokens: list[Token] = []
    for node in walk(root):
        if node.type == "comment":
            text = get_node_text(node, source)
            comments.append(
                Comment(
                    kind="Block" if text.startswith("/*") else "Line",
                    text=text,
                    start_byte=node.start_byte,
                    end_byte=node.end_byte,
                    line=node.start_point[0] + 1,
                )
            )
        elif node.child_count == 0:
            tokens.append(
                Token(
                    type=node.type,
                    text=get_node_text(node, source),
                    start_byte=node.start_byte,
                    end_byte=node.end_byte,
                )
            )
    return comments, tokens


def parse_source(source: bytes, path: str = "<string>") -> ParsedSource:
    """Parse JavaScript source bytes.

    Raises:
        ParseError: If the source is not syntactically valid
    """
    tree = Parser(_get_language()).parse(source)
    if tree.root_node.has_error:
        error = _first_error(tree.root_node)
        line = error.start_point[0] + 1 if error is not None else None
        kind = "Missing" if error is not None and error.is_missing else "Unexpected"
        detail = error.type if error is not None and error.is_missing else "syntax"
        raise ParseError(f"{kind} {detail} in {path} at line {line}", file_path=path, line=line)

    comments, tokens = _collect(tree.root_node, source)
    return ParsedSource(path=path, source=source, tree=tree, comments=comments, tokens=tokens)


def attach_comments(parsed: ParsedSource) -> ParsedSource:
    """Tag every comment with the top-level statement it belongs to.

    A comment before a statement is its "leading" comment, one inside it is
    "inner", and anything after the last statement is "trailing" on that
    statement. Mutates the comments in place; running it again is a no-op.
    """
    if parsed.comments_attached:
        return parsed

    statements = parsed.statements
    for comment in parsed.comments:
        comment.statement = None
        comment.placement = None
        for index, statement in enumerate(statements):
            if comment.start_byte < statement.end_byte:
                comment.statement = index
                inside = comment.start_byte >= statement.start_byte
                comment.placement = "inner" if inside else "leading"
                break
        else:
            if statements:
                comment.statement = len(statements) - 1
                comment.placement = "trailing"

    parsed.comments_attached = True
    return parsed


class SourceParser:
    """Parses source files, caching the result per resolved path.

    Later stages mutate the cached result (comment attachment), so parsing
    the same path twice must return the very same object.
    """

    def __init__(self) -> None:
        self._cache: dict[Path, ParsedSource] = {}

    def parse(self, file_path: Path | str) -> ParsedSource:
        """Parse a file, or return the cached result for it.

        Raises:
            ParseError: If the file cannot be read or is not valid JavaScript
        """
        logger = get_logger()
        key = Path(file_path).resolve()
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Parse cache hit: {key}")
            return cached

        try:
            source = key.read_bytes()
        except FileNotFoundError as e:
            raise ParseError(f"File not found: {key}", file_path=str(key)) from e
        except PermissionError as e:
            raise ParseError(f"Permission denied: {key}", file_path=str(key)) from e

        logger.debug(f"Parsing {key}")
        parsed = parse_source(source, str(key))
        self._cache[key] = parsed
        return parsed

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, Path)):
            return False
        return Path(file_path).resolve() in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """Drop every cached parse."""
        self._cache.clear()
