"""Restricted comparison expressions for the `expr` check.

Grammar (one comparison, nothing else):

    FIELD OP VALUE

    FIELD := node.id | node.raw_text | node.type | node.params[N]
           | node.params.length | node.children.length
    OP    := == | != | < | <= | > | >= | contains | startswith | endswith | matches
    VALUE := "string" | 'string' | integer | true | false | null

Expressions are parsed once at compile time into a closure over the node.
There is no evaluation of arbitrary code.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from netaudit.errors import ExpressionError
from netaudit.models import ConfigNode
from netaudit.rules.dsl import MAX_EXPRESSION_LENGTH, validate_pattern

NodeExpression = Callable[[ConfigNode], bool]

_FIELD = re.compile(
    r"node\.(?:"
    r"params\[(?P<index>\d+)\]"
    r"|(?P<length>params|children)\.length"
    r"|(?P<attr>id|raw_text|rawText|type)"
    r")"
)
_OPERATOR = re.compile(r"\s*(?P<op>==|!=|<=|>=|<|>|contains\b|startswith\b|endswith\b|matches\b)\s*")
_INTEGER = re.compile(r"-?\d+")
_STRING = re.compile(r"""(?P<quote>["'])(?P<body>(?:\\.|(?!(?P=quote)).)*)(?P=quote)""")
_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "null": None}

_ORDERING = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}
_STRING_OPS = {
    "contains": lambda left, right: right in left,
    "startswith": lambda left, right: left.startswith(right),
    "endswith": lambda left, right: left.endswith(right),
}


@dataclass(frozen=True)
class Comparison:
    """Parsed form of an expression, kept for display and tests."""

    field: str
    op: str
    value: Any


def _field_reader(match: re.Match[str]) -> Callable[[ConfigNode], Any]:
    if match.group("index") is not None:
        index = int(match.group("index"))
        return lambda node: node.params[index] if index < len(node.params) else None
    if match.group("length") == "params":
        return lambda node: len(node.params)
    if match.group("length") == "children":
        return lambda node: len(node.children)
    attr = match.group("attr")
    if attr in ("raw_text", "rawText"):
        return lambda node: node.raw_text
    if attr == "type":
        return lambda node: node.type.value
    return lambda node: node.id


def _parse_value(text: str, expr: str) -> Any:
    if text in _KEYWORDS:
        return _KEYWORDS[text]
    if _INTEGER.fullmatch(text):
        return int(text)
    match = _STRING.fullmatch(text)
    if match:
        # Only quotes and backslashes are unescaped; regex escapes such as \s survive
        return re.sub(r"\\([\\'\"])", r"\1", match.group("body"))
    raise ExpressionError(f"invalid value {text!r} in expression {expr!r}")


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value)
    return None


def parse_expression(expr: str) -> Comparison:
    """Parse an expression without building an evaluator.

    Raises:
        ExpressionError: If the text is outside the grammar.
    """
    if len(expr) > MAX_EXPRESSION_LENGTH:
        raise ExpressionError(
            f"expression too long: {len(expr)} chars exceeds limit of {MAX_EXPRESSION_LENGTH}"
        )
    text = expr.strip()
    field_match = _FIELD.match(text)
    if field_match is None:
        raise ExpressionError(f"expression must start with a node field: {expr!r}")
    op_match = _OPERATOR.match(text, field_match.end())
    if op_match is None:
        raise ExpressionError(f"missing or unknown operator in expression {expr!r}")
    value_text = text[op_match.end():].strip()
    if not value_text:
        raise ExpressionError(f"missing value in expression {expr!r}")
    value = _parse_value(value_text, expr)
    return Comparison(field=field_match.group(0), op=op_match.group("op"), value=value)


def compile_expression(expr: str, rule_id: str | None = None) -> NodeExpression:
    """Compile an expression into a predicate over one node.

    Comparisons against an integer coerce numeric-looking string fields
    (`node.params[2] > 100`). A missing parameter compares equal to null
    and is false for every other operator.

    Raises:
        ExpressionError: If the expression is outside the grammar or the
            operator does not accept the value's type.
    """
    try:
        comparison = parse_expression(expr)
    except ExpressionError as exc:
        raise ExpressionError(exc.reason, rule_id=rule_id) from exc

    read = _field_reader(_FIELD.match(expr.strip()))
    op, value = comparison.op, comparison.value

    if op in ("==", "!="):
        expected = value

        def equals(node: ConfigNode) -> bool:
            actual = read(node)
            if isinstance(expected, int) and not isinstance(expected, bool):
                return _as_int(actual) == expected
            if isinstance(expected, bool):
                return isinstance(actual, str) and actual.lower() == str(expected).lower()
            return actual == expected

        if op == "==":
            return equals
        return lambda node: not equals(node)

    if op in _ORDERING:
        compare = _ORDERING[op]
        if isinstance(value, bool) or value is None:
            raise ExpressionError(f"operator {op!r} needs an integer or string value: {expr!r}", rule_id=rule_id)
        if isinstance(value, int):
            def ordered_int(node: ConfigNode) -> bool:
                actual = _as_int(read(node))
                return actual is not None and compare(actual, value)

            return ordered_int

        def ordered_str(node: ConfigNode) -> bool:
            actual = read(node)
            return isinstance(actual, str) and compare(actual, value)

        return ordered_str

    if not isinstance(value, str):
        raise ExpressionError(f"operator {op!r} needs a string value: {expr!r}", rule_id=rule_id)

    if op == "matches":
        try:
            validate_pattern(value)
        except ValueError as exc:
            raise ExpressionError(str(exc), rule_id=rule_id) from exc
        pattern = re.compile(value)

        def matches(node: ConfigNode) -> bool:
            actual = read(node)
            return isinstance(actual, str) and pattern.search(actual) is not None

        return matches

    string_op = _STRING_OPS[op]

    def string_test(node: ConfigNode) -> bool:
        actual = read(node)
        return isinstance(actual, str) and string_op(actual, value)

    return string_test
