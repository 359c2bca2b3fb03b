"""Template markup code generation."""

import textwrap
from typing import Callable, Dict, Iterable, List, Optional

from astrogen.compiler.ast_nodes import CSS_KEY, TEXT_KEY, Binding, Node, NodeKind
from astrogen.compiler.codegen.bindings import MARKUP, process_binding
from astrogen.compiler.codegen.classes import CLASS_KEYS, collect_class_string
from astrogen.compiler.codegen.context import RenderContext
from astrogen.compiler.codegen.hydration import HYDRATION_EVENTS
from astrogen.compiler.helpers import (
    camel_case,
    check_is_event,
    filter_empty_text_nodes,
    get_for_arguments,
)

INDENT = "  "


class TemplateCodegen:
    """Renders IR nodes into Astro template markup."""

    # HTML void elements that don't have closing tags
    SELF_CLOSING_TAGS = frozenset(
        {
            "area",
            "base",
            "br",
            "col",
            "embed",
            "hr",
            "img",
            "input",
            "link",
            "meta",
            "param",
            "source",
            "track",
            "wbr",
        }
    )

    # Elements whose `onChange` fires per keystroke as `onInput` in the DOM
    INPUT_LIKE_TAGS = frozenset({"input", "textarea"})

    # Tags that never carry the scoped style attribute
    UNSCOPED_TAGS = frozenset({"style", "script", "slot", "template"})

    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self._renderers: Dict[NodeKind, Callable[[Node], str]] = {
            NodeKind.TEXT: self._render_text,
            NodeKind.DYNAMIC_TEXT: self._render_dynamic_text,
            NodeKind.FRAGMENT: self._render_fragment,
            NodeKind.FOR: self._render_for,
            NodeKind.SHOW: self._render_show,
            NodeKind.ELEMENT: self._render_element,
        }

    def render(self, node: Node) -> str:
        return self._renderers[node.kind](node)

    def render_children(self, nodes: Iterable[Node]) -> str:
        """Render nodes newline-joined, skipping whitespace-only text."""
        return "\n".join(self.render(child) for child in filter_empty_text_nodes(nodes))

    def _expr(self, binding: Optional[Binding]) -> str:
        return process_binding(binding.code if binding is not None else None, MARKUP)

    def _render_text(self, node: Node) -> str:
        return node.properties[TEXT_KEY]

    def _render_dynamic_text(self, node: Node) -> str:
        return f"{{{self._expr(node.bindings[TEXT_KEY])}}}"

    def _render_fragment(self, node: Node) -> str:
        return self.render_children(node.children)

    def _render_for(self, node: Node) -> str:
        item_name, index_name = get_for_arguments(node)
        params = f"{item_name}, {index_name}" if index_name else item_name
        each = self._expr(node.bindings.get("each"))
        body = textwrap.indent(self.render_children(node.children), INDENT)
        return f"{{{each}.map(({params}) => (\n{body}\n))}}"

    def _render_show(self, node: Node) -> str:
        when = self._expr(node.bindings.get("when"))
        then_block = textwrap.indent(self.render_children(node.children), INDENT)

        else_branch = node.else_branch
        else_block = self.render(else_branch) if else_branch is not None else ""
        otherwise = f"({else_block})" if else_block else "null"
        return f"{{{when} ? (\n{then_block}\n) : {otherwise}}}"

    def _render_element(self, node: Node) -> str:
        parts: List[str] = [f"<{node.name}"]

        if self.ctx.scope_attribute and node.name not in self.UNSCOPED_TAGS:
            parts.append(f" {self.ctx.scope_attribute}")

        class_string = collect_class_string(node, self.ctx)
        if class_string:
            parts.append(f" {class_string}")

        for key, value in node.properties.items():
            if key in CLASS_KEYS or key == TEXT_KEY:
                continue
            escaped = value.replace('"', "&quot;")
            parts.append(f' {key}="{escaped}"')

        needs_directive = False
        for key, binding in node.bindings.items():
            if key in CLASS_KEYS or key in (CSS_KEY, TEXT_KEY):
                continue
            if not binding.code:
                continue

            if binding.is_spread:
                parts.append(f" {{...({self._expr(binding)})}}")
            elif key == "ref":
                parts.append(f" bind:this={{{camel_case(binding.code)}}}")
                needs_directive = True
            elif check_is_event(key):
                parts.append(f" {self._event_attribute(node, key, binding)}")
                if key in HYDRATION_EVENTS:
                    needs_directive = True
            elif key == "innerHTML":
                parts.append(f" set:html={{{self._expr(binding)}}}")
            elif key == "style":
                parts.append(f" style={{{self._expr(binding)}}}")
            else:
                parts.append(f" {key}={{{self._expr(binding)}}}")

        directive = self.ctx.client_directive
        if needs_directive and directive and directive != "none":
            parts.append(f" {directive}")

        if node.name in self.SELF_CLOSING_TAGS:
            parts.append(" />")
            return "".join(parts)

        parts.append(">")
        inner_html = node.bindings.get("innerHTML")
        if inner_html is not None and inner_html.code:
            parts.append(f"{{{self._expr(inner_html)}}}")
        else:
            parts.append(self.render_children(node.children))
        parts.append(f"</{node.name}>")
        return "".join(parts)

    def _event_attribute(self, node: Node, key: str, binding: Binding) -> str:
        event = "onInput" if key == "onChange" and node.name in self.INPUT_LIKE_TAGS else key
        async_keyword = "async " if binding.is_async else ""
        params = ", ".join(binding.handler_arguments())
        return f"{event}={{{async_keyword}({params}) => {self._expr(binding)}}}"
