# topmark:header:start
#
#   project      : ScopeReport
#   file         : templates.py
#   file_relpath : src/scopereport/resolver/templates.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Message template compiler.

Templates use `str.format` syntax and are compiled once, at decoration time, into an
f-string expression tree:

- ``{}`` and ``{0}`` fields refer to the marker's positional arguments; the caller
  supplies the expression each of them stands for;
- any other field is a Python expression evaluated in the annotated function's
  scope (``"Reading {path.name!r}"``);
- conversions (``!r``, ``!s``, ``!a``) and format specs, including nested fields
  (``"{value:>{width}}"``), behave as in `str.format`.

Field expressions cannot contain a top-level ``!`` or ``:`` (those end the field in
`str.format` syntax), and, since messages are evaluated inside a lambda, they cannot
use ``await``, ``yield``, ``:=`` or argument-less ``super()``.
"""

from __future__ import annotations

import ast
import copy
import string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_FORMATTER = string.Formatter()

_CONVERSIONS: dict[str, int] = {"s": ord("s"), "r": ord("r"), "a": ord("a")}

# str.format accepts one level of nested replacement fields inside a format spec
_MAX_SPEC_DEPTH = 1


class TemplateError(ValueError):
    """Malformed message template."""


def find_unliftable(node: ast.AST) -> str | None:
    """Return a description of the first construct that cannot move into a lambda.

    Args:
        node (ast.AST): Expression tree to inspect.

    Returns:
        str | None: A short description such as ``"await"`` or ``"yield"``,
        or None when the whole tree can be evaluated inside a lambda.
    """
    for child in ast.walk(node):
        if isinstance(child, ast.Await):
            return "await"
        if isinstance(child, (ast.Yield, ast.YieldFrom)):
            return "yield"
        if isinstance(child, ast.NamedExpr):
            return "an assignment expression (:=)"
        if isinstance(child, ast.comprehension) and child.is_async:
            return "an async comprehension"
        if (
            isinstance(child, ast.Call)
            and isinstance(child.func, ast.Name)
            and child.func.id == "super"
            and not child.args
            and not child.keywords
        ):
            # Zero-argument super() reads the first argument of the enclosing frame
            return "super() without arguments"
    return None


class _Numbering:
    """Tracks positional field numbering across one template."""

    def __init__(self, count: int) -> None:
        self.count = count
        self.mode: str | None = None
        self.next_index = 0
        self.used: set[int] = set()

    def automatic(self) -> int:
        if self.mode == "manual":
            raise TemplateError("cannot switch from manual field numbering to automatic numbering")
        self.mode = "automatic"
        index = self.next_index
        self.next_index += 1
        return self._use(index)

    def manual(self, index: int) -> int:
        if self.mode == "automatic":
            raise TemplateError(
                "cannot switch from automatic field numbering to manual field specification"
            )
        self.mode = "manual"
        return self._use(index)

    def _use(self, index: int) -> int:
        if index >= self.count:
            raise TemplateError(
                f"field {{{index}}} refers to a missing positional argument "
                f"({self.count} given)"
            )
        self.used.add(index)
        return index


def compile_template(
    template: str,
    positional: Sequence[ast.expr] = (),
    *,
    anchor: ast.AST | None = None,
) -> ast.expr:
    """Compile ``template`` into an expression producing the formatted message.

    Args:
        template (str): `str.format`-style template.
        positional (Sequence[ast.expr]): Expressions standing for the positional
            arguments; each reference gets its own copy.
        anchor (ast.AST | None): Node whose source location is given to the parsed
            field expressions.

    Returns:
        ast.expr: An `ast.Constant` for templates without fields, otherwise an
        `ast.JoinedStr`.

    Raises:
        TemplateError: If the template is malformed, refers to a missing positional
            argument, or leaves a positional argument unused.
    """
    numbering = _Numbering(len(positional))
    expr = _compile(template, positional, numbering, anchor, depth=0)
    unused = [index for index in range(len(positional)) if index not in numbering.used]
    if unused:
        raise TemplateError(f"positional argument {unused[0]} is never used by the template")
    return expr


def _compile(
    template: str,
    positional: Sequence[ast.expr],
    numbering: _Numbering,
    anchor: ast.AST | None,
    *,
    depth: int,
) -> ast.expr:
    try:
        parts = list(_FORMATTER.parse(template))
    except ValueError as exc:
        raise TemplateError(f"malformed template {template!r}: {exc}") from None

    values: list[ast.expr] = []
    for literal, field, spec, conversion in parts:
        if literal:
            values.append(ast.Constant(value=literal))
        if field is None:
            continue
        value = _field_value(field, positional, numbering, anchor)
        conversion_code = -1
        if conversion is not None:
            if conversion not in _CONVERSIONS:
                raise TemplateError(f"invalid conversion {conversion!r} in field {{{field}}}")
            conversion_code = _CONVERSIONS[conversion]
        format_spec: ast.expr | None = None
        if spec:
            if depth >= _MAX_SPEC_DEPTH:
                raise TemplateError(f"format spec {spec!r} is nested too deeply")
            nested = _compile(spec, positional, numbering, anchor, depth=depth + 1)
            format_spec = nested if isinstance(nested, ast.JoinedStr) else ast.JoinedStr([nested])
        values.append(
            ast.FormattedValue(value=value, conversion=conversion_code, format_spec=format_spec)
        )

    if all(isinstance(value, ast.Constant) for value in values):
        text = "".join(str(value.value) for value in values if isinstance(value, ast.Constant))
        return ast.Constant(value=text)
    return ast.JoinedStr(values=values)


def _field_value(
    field: str,
    positional: Sequence[ast.expr],
    numbering: _Numbering,
    anchor: ast.AST | None,
) -> ast.expr:
    if field == "":
        return copy.deepcopy(positional[numbering.automatic()])
    if field.isascii() and field.isdigit():
        return copy.deepcopy(positional[numbering.manual(int(field))])
    return _parse_field_expression(field, anchor)


def _parse_field_expression(field: str, anchor: ast.AST | None) -> ast.expr:
    if not field.strip():
        raise TemplateError("empty field expression")
    try:
        tree = ast.parse(f"({field})", mode="eval")
    except SyntaxError as exc:
        raise TemplateError(f"invalid field expression {field!r}: {exc.msg}") from None
    construct = find_unliftable(tree.body)
    if construct is not None:
        raise TemplateError(f"field expression {field!r} cannot use {construct}")
    if anchor is not None:
        for node in ast.walk(tree.body):
            ast.copy_location(node, anchor)
    return tree.body
