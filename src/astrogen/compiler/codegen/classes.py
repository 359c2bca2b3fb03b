"""`class` attribute collection, including scoped inline style objects."""

import json
from typing import List, Tuple

from astrogen.compiler.ast_nodes import CSS_KEY, Node
from astrogen.compiler.codegen.bindings import MARKUP, process_binding
from astrogen.compiler.codegen.context import RenderContext
from astrogen.compiler.helpers import short_hash

CLASS_KEYS = ("class", "className")


def scoped_class_name(node: Node, code: str) -> str:
    return f"{node.name}-{short_hash(code)}"


def collect_class_string(node: Node, ctx: RenderContext) -> str:
    """
    Build the `class` attribute of an element, or "" if it has none.

    Sources, in order: literal `class`, literal `className`, `class` binding,
    `className` binding, then a scoped class for an inline `css` style object
    (which is recorded in `ctx.styles`). A lone literal renders as
    `class="..."`; anything else becomes a filtered join so empty dynamic
    values leave no stray spaces.
    """
    # (is_literal, text)
    classes: List[Tuple[bool, str]] = []

    for key in CLASS_KEYS:
        value = node.properties.get(key)
        if value and value.strip():
            classes.append((True, value))

    for key in CLASS_KEYS:
        binding = node.bindings.get(key)
        if binding is not None and binding.code:
            classes.append((False, process_binding(binding.code, MARKUP)))

    css = node.bindings.get(CSS_KEY)
    if css is not None and css.code:
        class_name = scoped_class_name(node, css.code)
        classes.append((True, class_name))
        ctx.styles.add(class_name, css.code)

    if not classes:
        return ""

    if len(classes) == 1 and classes[0][0]:
        return 'class="{}"'.format(classes[0][1].replace('"', "&quot;"))

    entries = [json.dumps(text) if literal else text for literal, text in classes]
    return "class={[" + ", ".join(entries) + "].filter(Boolean).join(' ')}"
