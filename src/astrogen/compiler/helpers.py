"""Helpers over the component tree shared by the code generators."""

import hashlib
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from astrogen.compiler.ast_nodes import Component, Node
from astrogen.compiler.preprocessor import find_prop_references

_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")
_EVENT_KEY = re.compile(r"^on[A-Z]")


def _words(value: str) -> List[str]:
    return _WORDS.findall(value)


def kebab_case(value: str) -> str:
    """fontSize -> font-size, MSTransform -> ms-transform."""
    return "-".join(word.lower() for word in _words(value))


def camel_case(value: str) -> str:
    """my-input-ref -> myInputRef."""
    words = [word.lower() for word in _words(value)]
    if not words:
        return value
    return words[0] + "".join(word.capitalize() for word in words[1:])


def hyphenate_property(name: str) -> str:
    """CSS property name for a style object key (WebkitFoo -> -webkit-foo)."""
    return re.sub(r"([A-Z])", r"-\1", name).lower()


def check_is_event(key: str) -> bool:
    return bool(_EVENT_KEY.match(key))


def filter_empty_text_nodes(nodes: Iterable[Node]) -> List[Node]:
    """Drop whitespace-only text nodes."""
    return [node for node in nodes if not node.is_empty_text()]


def walk_nodes(nodes: Iterable[Node]) -> Iterator[Node]:
    """Depth-first walk, including the else branch of conditionals."""
    for node in nodes:
        yield node
        yield from walk_nodes(node.children)
        else_branch = node.else_branch
        if else_branch is not None:
            yield from walk_nodes([else_branch])


def get_refs(component: Component) -> List[str]:
    """Ref names used anywhere in the tree, first-seen order."""
    refs: List[str] = []
    for node in walk_nodes(component.children):
        binding = node.bindings.get("ref")
        if binding is not None and binding.code and binding.code not in refs:
            refs.append(binding.code)
    return refs


def iter_component_code(component: Component) -> Iterator[str]:
    """Every code string carried by the component."""
    for entry in component.state.values():
        if isinstance(entry.code, str):
            yield entry.code
    hooks = component.hooks
    if hooks.on_init is not None:
        yield hooks.on_init.code
    for hook in hooks.on_mount:
        yield hook.code
    for hook in hooks.on_update or []:
        yield hook.code
    for node in walk_nodes(component.children):
        for binding in node.bindings.values():
            if binding.code:
                yield binding.code


def get_prop_names(component: Component) -> List[str]:
    """Declared props followed by props only referenced as `props.<name>`."""
    names = list(component.props)
    for code in iter_component_code(component):
        for name in find_prop_references(code):
            if name not in names:
                names.append(name)
    return names


def has_props(component: Component) -> bool:
    return bool(get_prop_names(component))


def get_for_arguments(node: Node) -> Tuple[str, Optional[str]]:
    """(item name, index name) of a repetition node."""
    item_name = node.scope.get("forName") or "item"
    index_name = node.scope.get("indexName") or None
    return item_name, index_name


def _strip_node(node: Node) -> None:
    for key in [k for k in node.properties if k.startswith("$")]:
        del node.properties[key]
    for key in [k for k in node.bindings if k.startswith("$")]:
        del node.bindings[key]
    for child in node.children:
        _strip_node(child)
    else_branch = node.else_branch
    if else_branch is not None:
        _strip_node(else_branch)
    node.refresh_kind()


def strip_meta_properties(component: Component) -> Component:
    """Remove internal `$`-prefixed properties and bindings, in place."""
    for node in component.children:
        _strip_node(node)
    return component


def short_hash(value: str) -> str:
    """Stable 8 character content hash."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()[:8]
