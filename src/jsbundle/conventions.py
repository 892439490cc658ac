"""Structural checks for the one-export-per-file module convention.

Every module follows this shape:

    var _curry2 = require('./internal/_curry2');
    var map = require('./map');

    module.exports = _curry2(function add(a, b) { ... });

Each predicate inspects one tree-sitter node (or one property of a file) and
returns a CheckResult instead of raising, so callers decide when to fail.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from jsbundle.errors import ConventionViolation, NamingMismatch, UnsortedImports
from jsbundle.parser import ParsedSource, named_children

RULE_SINGLE_BINDING = "single-binding"
RULE_REQUIRE_CALL = "require-call"
RULE_SORTED_IMPORTS = "sorted-imports"
RULE_BINDING_NAME = "binding-name"
RULE_EXPORT_ASSIGNMENT = "export-assignment"

_RULE_ERRORS: dict[str, type[ConventionViolation]] = {
    RULE_SORTED_IMPORTS: UnsortedImports,
    RULE_BINDING_NAME: NamingMismatch,
}

_LEADING_RELATIVE = re.compile(r"^\.{1,2}/")
_DOT_LETTER = re.compile(r"\.([a-z])")
_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SINGLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = {"\n", "\r\n", "\r", "\u2028", "\u2029"}


@dataclass
class CheckResult:
    """Outcome of one structural check."""

    passed: bool
    rule: str
    file_path: str
    line: int | None = None
    message: str = ""
    construct: str | None = None  # Source text of the offending node
    expected: Any = None
    actual: Any = None
    node: Node | None = None  # Node the check matched (when it passed)

    def to_error(self) -> ConventionViolation:
        """Build the exception matching this failed check."""
        error_cls = _RULE_ERRORS.get(self.rule, ConventionViolation)
        return error_cls(
            self.message,
            file_path=self.file_path,
            line=self.line,
            construct=self.construct,
            rule=self.rule,
            expected=self.expected,
            actual=self.actual,
        )

    def raise_if_failed(self) -> CheckResult:
        if not self.passed:
            raise self.to_error()
        return self


def derive_binding_name(require_path: str, internal_dir: str = "internal") -> str:
    """Derive the name an import must be bound to from its require path.

    './internal/_curry2' -> '_curry2', '../add' -> 'add',
    './String.prototype.trim' -> 'StringPrototypeTrim'.
    """
    name = re.sub(rf"^\./{re.escape(internal_dir)}/", "./", require_path, count=1)
    name = _LEADING_RELATIVE.sub("", name, count=1)
    return _DOT_LETTER.sub(lambda m: m.group(1).upper(), name)


def _unescape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape in _LINE_CONTINUATIONS:
        return ""
    if escape.startswith("u{"):
        return chr(int(escape[2:-1], 16))
    if len(escape) > 1 and escape[0] in "ux":
        return chr(int(escape[1:], 16))
    return _SINGLE_ESCAPES.get(escape, escape)


def string_value(parsed: ParsedSource, node: Node) -> str:
    """Value of a string literal node."""
    return _ESCAPE.sub(_unescape, parsed.text(node)[1:-1])


def _failed(parsed: ParsedSource, rule: str, node: Node, message: str, **kwargs: Any) -> CheckResult:
    line = parsed.line(node)
    return CheckResult(
        passed=False,
        rule=rule,
        file_path=parsed.path,
        line=line,
        message=f"{parsed.path}:{line}: {message}",
        construct=parsed.text(node),
        **kwargs,
    )


def is_var_declaration(node: Node) -> bool:
    """Check for a `var` declaration (let/const are lexical_declaration)."""
    return node.type == "variable_declaration"


def check_single_binding(parsed: ParsedSource, declaration: Node) -> CheckResult:
    """A declaration statement must bind exactly one name."""
    declarators = [c for c in named_children(declaration) if c.type == "variable_declarator"]
    if len(declarators) != 1:
        return _failed(
            parsed,
            RULE_SINGLE_BINDING,
            declaration,
            f"expected one binding per import declaration, found {len(declarators)}: "
            f"{parsed.text(declaration)}",
            expected=1,
            actual=len(declarators),
        )
    return CheckResult(True, RULE_SINGLE_BINDING, parsed.path, node=declarators[0])


def check_require_call(parsed: ParsedSource, declarator: Node) -> CheckResult:
    """The binding must be `name = require('<string literal>')`.

    On success the result's node is the string literal argument.
    """

    def fail(actual: str) -> CheckResult:
        return _failed(
            parsed,
            RULE_REQUIRE_CALL,
            declarator,
            f"import must have the form `var name = require('path')`: {parsed.text(declarator)}",
            expected="require('<path>')",
            actual=actual,
        )

    name = declarator.child_by_field_name("name")
    if name is None or name.type != "identifier":
        return fail(name.type if name is not None else "no binding")

    value = declarator.child_by_field_name("value")
    if value is None:
        return fail("no initializer")
    if value.type != "call_expression":
        return fail(value.type)

    callee = value.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or parsed.text(callee) != "require":
        return fail(parsed.text(callee) if callee is not None else "no callee")

    arguments = value.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return fail(arguments.type if arguments is not None else "no arguments")

    args = named_children(arguments)
    if len(args) != 1:
        return fail(f"{len(args)} arguments")
    if args[0].type != "string":
        return fail(args[0].type)

    return CheckResult(True, RULE_REQUIRE_CALL, parsed.path, node=args[0])


def check_sorted(parsed: ParsedSource, names: list[str]) -> CheckResult:
    """Bound names, in file order, must be strictly ascending."""
    if all(a < b for a, b in zip(names, names[1:])):
        return CheckResult(True, RULE_SORTED_IMPORTS, parsed.path)
    expected = sorted(set(names))
    return CheckResult(
        passed=False,
        rule=RULE_SORTED_IMPORTS,
        file_path=parsed.path,
        line=None,
        message=f"{parsed.path}: imports must be sorted by name without duplicates: "
        f"expected {expected}, got {names}",
        expected=expected,
        actual=names,
    )


def check_binding_name(
    parsed: ParsedSource,
    declarator: Node,
    require_path: str,
    internal_dir: str = "internal",
) -> CheckResult:
    """The bound name must equal the name derived from the require path."""
    actual = parsed.text(declarator.child_by_field_name("name"))
    expected = derive_binding_name(require_path, internal_dir)
    if actual != expected:
        return _failed(
            parsed,
            RULE_BINDING_NAME,
            declarator,
            f"require('{require_path}') must be bound to {expected!r}, not {actual!r}",
            expected=expected,
            actual=actual,
        )
    return CheckResult(True, RULE_BINDING_NAME, parsed.path, node=declarator)


def check_export_assignment(parsed: ParsedSource) -> CheckResult:
    """The file must end with `module.exports = <value>;`.

    On success the result's node is the assigned value.
    """
    statements = parsed.statements
    if not statements:
        return CheckResult(
            passed=False,
            rule=RULE_EXPORT_ASSIGNMENT,
            file_path=parsed.path,
            message=f"{parsed.path}: module is empty, expected `module.exports = <value>`",
            expected="module.exports = <value>",
            actual="empty module",
        )

    last = statements[-1]

    def fail(actual: str) -> CheckResult:
        return _failed(
            parsed,
            RULE_EXPORT_ASSIGNMENT,
            last,
            f"last statement must be `module.exports = <value>`: {parsed.text(last)}",
            expected="module.exports = <value>",
            actual=actual,
        )

    if last.type != "expression_statement":
        return fail(last.type)
    expressions = named_children(last)
    if len(expressions) != 1 or expressions[0].type != "assignment_expression":
        return fail(expressions[0].type if expressions else "empty statement")

    assignment = expressions[0]
    left = assignment.child_by_field_name("left")
    if left is None or left.type != "member_expression":
        return fail(left.type if left is not None else "no target")

    obj = left.child_by_field_name("object")
    prop = left.child_by_field_name("property")
    if obj is None or obj.type != "identifier" or parsed.text(obj) != "module":
        return fail(parsed.text(left))
    if prop is None or prop.type != "property_identifier" or parsed.text(prop) != "exports":
        return fail(parsed.text(left))

    right = assignment.child_by_field_name("right")
    if right is None:
        return fail("no value")
    return CheckResult(True, RULE_EXPORT_ASSIGNMENT, parsed.path, node=right)
