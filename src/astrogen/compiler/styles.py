"""Style collection for the generated `<style>` block."""

import logging
from typing import Dict, Optional

from astrogen.compiler.ast_nodes import Component
from astrogen.compiler.exceptions import StyleObjectParseError
from astrogen.compiler.helpers import hyphenate_property
from astrogen.compiler.jsexpr import evaluate_object_literal

logger = logging.getLogger(__name__)


def scope_attribute(prefix: str) -> str:
    return f"data-astro-{prefix}"


class StyleCollector:
    """Scoped class name -> raw style object code, for one compilation."""

    def __init__(self) -> None:
        self._styles: Dict[str, str] = {}

    def add(self, class_name: str, code: str) -> bool:
        """Record a style object. Returns True if the class is new."""
        if class_name in self._styles:
            return False
        self._styles[class_name] = code
        return True

    def as_dict(self) -> Dict[str, str]:
        return dict(self._styles)

    def __len__(self) -> int:
        return len(self._styles)

    def render(self) -> str:
        """One rule block per collected class, in insertion order."""
        blocks = []
        for class_name, code in self._styles.items():
            rule = render_scoped_rule(class_name, code)
            if rule:
                blocks.append(rule)
        return "\n\n".join(blocks)


def style_object_to_css(code: str) -> str:
    """Turn a literal style object into indented CSS declarations.

    Raises:
        StyleObjectParseError: the object is not made of literal values
    """
    lines = []
    for prop, value in evaluate_object_literal(code):
        lines.append(f"  {hyphenate_property(prop)}: {value};")
    return "\n".join(lines)


def render_scoped_rule(class_name: str, code: str) -> str:
    """CSS rule for a scoped class; a comment if the object can't be read."""
    try:
        declarations = style_object_to_css(code)
    except StyleObjectParseError as e:
        logger.warning("Could not convert style object for .%s: %s", class_name, e)
        source = code.replace("*/", "* /")
        return f"/* .{class_name}: could not convert style object: {source} */"

    if not declarations:
        return ""
    return f".{class_name} {{\n{declarations}\n}}"


def rewrite_css(css: str, attribute: str) -> str:
    """Append `[attribute]` to every selector of top-level rules."""
    new_parts = []
    last_idx = 0
    depth = 0
    for i, char in enumerate(css):
        if char == "{":
            if depth == 0:
                selectors = css[last_idx:i]
                leading = selectors[: len(selectors) - len(selectors.lstrip())]
                if selectors.strip().startswith("@"):
                    # At-rules are kept as written
                    new_parts.append(selectors)
                else:
                    rewritten = ", ".join(
                        f"{s.strip()}[{attribute}]" for s in selectors.split(",") if s.strip()
                    )
                    new_parts.append(f"{leading}{rewritten} ")
                last_idx = i
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                new_parts.append(css[last_idx : i + 1])
                last_idx = i + 1

    new_parts.append(css[last_idx:])
    return "".join(new_parts)


def collect_css(component: Component, prefix: Optional[str] = None) -> str:
    """Component-level CSS, selectors scoped by `prefix` when requested."""
    css = (component.style or "").strip()
    if not css:
        return ""

    if prefix and component.meta.get("scopedStyle"):
        logger.debug("Scoping component styles of %s with %s", component.name, prefix)
        return rewrite_css(css, scope_attribute(prefix))
    return css
