from typing import Any, List, Optional, Tuple

from astrogen.compiler.jsexpr import ParsedCode, parse_code

CONTAINERS = ("state", "props")


def _reference(parsed: ParsedCode, node: Any) -> Optional[Tuple[str, str]]:
    """
    `(container, member)` when `node` is `state.x` or `props.x`.

    A chained prefix counts as one container access: `state.props.x`
    resolves to `("props", "x")`.
    """
    if node.type != "member_expression":
        return None
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None or prop is None or prop.type != "property_identifier":
        return None
    # Plain `.` only; optional chaining and whitespace are left alone
    if parsed.data[obj.end_byte : prop.start_byte] != b".":
        return None

    member = parsed.text(prop)
    if obj.type == "identifier" and parsed.text(obj) in CONTAINERS:
        return parsed.text(obj), member
    inner = _reference(parsed, obj)
    if inner is not None and inner[1] in CONTAINERS:
        return inner[1], member
    return None


def _references(parsed: ParsedCode) -> List[Tuple[Any, str, str]]:
    found = []
    stack = [parsed.root]
    while stack:
        node = stack.pop()
        ref = _reference(parsed, node)
        if ref is not None:
            found.append((node, *ref))
            continue
        stack.extend(reversed(node.children))
    return found


def rewrite_references(code: str, qualify_props: bool = False) -> str:
    """
    Rewrite `state.x`/`props.x` member accesses into plain local names.

    The frontmatter exposes state entries as local variables, so `state.count`
    becomes `count`. Props are either destructured locals (template) or only
    reachable through the `props` container (frontmatter), which is what
    `qualify_props` selects.

    Example:
        state.count + props.step  ->  count + step
        (qualify_props=True)      ->  count + props.step

    Only real member expressions are touched; string, template text, regex
    and comment nodes keep text like "state.x" as written.
    """
    if "state" not in code and "props" not in code:
        return code

    parsed = parse_code(code)
    edits = []
    for node, container, member in _references(parsed):
        start, end = parsed.span(node)
        if container == "props" and qualify_props:
            edits.append((start, end, f"props.{member}"))
        else:
            edits.append((start, end, member))
    return parsed.apply(edits)


def find_prop_references(code: str) -> List[str]:
    """Names accessed as `props.<name>` in code, in first-seen order."""
    if "props" not in code:
        return []
    seen: List[str] = []
    for _, container, member in _references(parse_code(code)):
        if container == "props" and member not in seen:
            seen.append(member)
    return seen
