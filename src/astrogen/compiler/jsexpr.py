"""Syntax-tree helpers for embedded JavaScript expressions.

Binding code is parsed with tree-sitter's JavaScript grammar. The compiler
only needs a few things from the tree: where member accesses on `state` and
`props` sit, which nodes are keys of an object literal (so style objects can
have their keys renamed), and whether every value of an object is a plain
literal (so a style object can be turned into CSS declarations).
"""

import json
from functools import lru_cache
from typing import Any, Callable, Iterator, List, Optional, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Parser

from astrogen.compiler.exceptions import ExpressionSyntaxError, StyleObjectParseError

# Expressions are parsed as `(<code>\n)` so that an object literal is not
# read as a block statement. The newline keeps a trailing line comment from
# swallowing the closing paren.
_OPEN = b"("
_CLOSE = b"\n)"

_LITERAL_KEYWORDS = ("true", "false", "null")


@lru_cache(maxsize=None)
def _parser() -> Parser:
    return Parser(Language(tree_sitter_javascript.language()))


class ParsedCode:
    """A parsed piece of code and the byte offset of the user's text in it."""

    def __init__(self, code: str, as_expression: bool = True) -> None:
        self.code = code
        self.source = code.encode("utf-8")
        self.offset = len(_OPEN) if as_expression else 0
        self.data = _OPEN + self.source + _CLOSE if as_expression else self.source
        self.tree = _parser().parse(self.data)
        self.root = self.tree.root_node

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    def text(self, node: Any) -> str:
        return node.text.decode("utf-8")

    def span(self, node: Any) -> Tuple[int, int]:
        """Byte range of `node` within the user's text."""
        return node.start_byte - self.offset, node.end_byte - self.offset

    def expression(self) -> Optional[Any]:
        """The single expression the code parsed to, if it parsed to one."""
        if self.offset == 0 or self.has_error:
            return None
        statements = [c for c in self.root.named_children if c.type != "comment"]
        if len(statements) != 1 or statements[0].type != "expression_statement":
            return None
        paren = statements[0].named_children[0]
        if paren.type != "parenthesized_expression":
            return None
        inner = [c for c in paren.named_children if c.type != "comment"]
        return inner[0] if len(inner) == 1 else None

    def first_error_offset(self) -> Optional[int]:
        for node in walk(self.root):
            if node.type == "ERROR" or node.is_missing:
                return max(0, min(node.start_byte - self.offset, len(self.source)))
        return None

    def apply(self, edits: List[Tuple[int, int, str]]) -> str:
        """Replace byte ranges of the user's text, later ranges first."""
        result = self.source
        for start, end, text in sorted(edits, reverse=True):
            result = result[:start] + text.encode("utf-8") + result[end:]
        return result.decode("utf-8")


def parse_code(code: str) -> ParsedCode:
    """
    Parse `code` as an expression, falling back to statements.

    Binding code is usually an expression, but hook and method bodies are
    statement lists. A tree with errors is still returned; callers decide
    whether that matters.
    """
    parsed = ParsedCode(code)
    if not parsed.has_error:
        return parsed
    statements = ParsedCode(code, as_expression=False)
    if not statements.has_error:
        return statements
    return parsed


def walk(node: Any) -> Iterator[Any]:
    """Pre-order walk over `node` and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _object_of(code: str) -> Tuple[ParsedCode, Optional[Any]]:
    parsed = ParsedCode(code)
    node = parsed.expression()
    if node is not None and node.type == "object":
        return parsed, node
    return parsed, None


def _entries(obj: Any) -> List[Any]:
    return [c for c in obj.named_children if c.type != "comment"]


def is_object_literal(code: str) -> bool:
    """True when the whole of `code` is one object literal expression."""
    return _object_of(code)[1] is not None


def transform_object_keys(code: str, rename: Callable[[str], str]) -> Optional[str]:
    """
    Rename identifier keys of an object literal, nested literals included.

    Renamed keys become double-quoted string keys; shorthand entries are
    expanded to `"key": name`. Returns None when `code` is not an object
    literal. Raises `ExpressionSyntaxError` if `code` does not parse.
    """
    parsed, obj = _object_of(code)
    if parsed.has_error:
        raise ExpressionSyntaxError("Could not parse expression", code, parsed.first_error_offset())
    if obj is None:
        return None

    edits: List[Tuple[int, int, str]] = []
    _collect_key_edits(parsed, obj, rename, edits)
    return parsed.apply(edits)


def _collect_key_edits(
    parsed: ParsedCode,
    obj: Any,
    rename: Callable[[str], str],
    edits: List[Tuple[int, int, str]],
) -> None:
    for entry in _entries(obj):
        if entry.type == "shorthand_property_identifier":
            name = parsed.text(entry)
            start, end = parsed.span(entry)
            edits.append((start, end, f"{json.dumps(rename(name))}: {name}"))
            continue
        if entry.type != "pair":
            continue

        key = entry.child_by_field_name("key")
        if key is not None and key.type == "property_identifier":
            start, end = parsed.span(key)
            edits.append((start, end, json.dumps(rename(parsed.text(key)))))

        # Nested object literal as the whole value
        value = entry.child_by_field_name("value")
        if value is not None and value.type == "object":
            _collect_key_edits(parsed, value, rename, edits)


def _literal_text(parsed: ParsedCode, node: Any) -> Optional[str]:
    if node.type == "string":
        return _unquote(parsed.text(node))
    if node.type == "number":
        return parsed.text(node)
    if node.type == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if (
            operator is not None
            and argument is not None
            and parsed.text(operator) in ("-", "+")
            and argument.type == "number"
        ):
            return parsed.text(operator).lstrip("+") + parsed.text(argument)
        return None
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        return parsed.text(node)[1:-1]
    if node.type in _LITERAL_KEYWORDS:
        return node.type
    return None


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    if literal[0] == "'":
        body = body.replace("\\'", "'").replace('"', '\\"')
    try:
        return json.loads(f'"{body}"')
    except json.JSONDecodeError:
        return body


_ENTRY_NAMES = {
    "spread_element": "spread",
    "shorthand_property_identifier": "shorthand",
    "method_definition": "method",
}


def evaluate_object_literal(code: str) -> List[Tuple[str, str]]:
    """
    Read a literal-only object into `(key, value)` string pairs.

    Raises `StyleObjectParseError` for anything that needs runtime evaluation:
    spreads, computed keys, nested objects, or references to variables.
    """
    parsed, obj = _object_of(code.strip())
    if parsed.has_error:
        raise StyleObjectParseError("Could not parse style object", code)
    if obj is None:
        raise StyleObjectParseError("Not an object literal", code)

    pairs = []
    for entry in _entries(obj):
        if entry.type != "pair":
            kind = _ENTRY_NAMES.get(entry.type, entry.type)
            raise StyleObjectParseError(f"Unsupported {kind} entry", code)
        key = entry.child_by_field_name("key")
        if key.type == "computed_property_name":
            raise StyleObjectParseError("Unsupported computed entry", code)
        name = _unquote(parsed.text(key)) if key.type == "string" else parsed.text(key)
        value = _literal_text(parsed, entry.child_by_field_name("value"))
        if value is None:
            raise StyleObjectParseError(f"Value of {name!r} is not a literal", code)
        pairs.append((name, value))
    return pairs
