"""Intermediate representation consumed by the Astro code generator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Reserved node names
FRAGMENT_NAME = "Fragment"
FOR_NAME = "For"
SHOW_NAME = "Show"

# Reserved property/binding keys
TEXT_KEY = "_text"
CSS_KEY = "css"

SPREAD_BINDING = "spread"
SINGLE_BINDING = "single"


class NodeKind(Enum):
    """What a node renders as. Resolved once, when the node is built."""

    TEXT = "text"
    DYNAMIC_TEXT = "dynamic_text"
    FRAGMENT = "fragment"
    FOR = "for"
    SHOW = "show"
    ELEMENT = "element"


@dataclass
class Binding:
    """Expression code attached to an attribute, event or control slot."""

    code: Optional[str] = ""
    type: str = SINGLE_BINDING
    arguments: Optional[List[str]] = None
    is_async: bool = False

    @property
    def is_spread(self) -> bool:
        return self.type == SPREAD_BINDING

    def handler_arguments(self) -> List[str]:
        """Parameter names for an event handler; `event` when none declared."""
        return list(self.arguments) if self.arguments else ["event"]

    def __str__(self) -> str:
        return f"Binding(type={self.type}, code={self.code!r})"


@dataclass
class Node:
    """Markup element, text node, or control-flow pseudo element."""

    name: str = "div"
    properties: Dict[str, str] = field(default_factory=dict)
    bindings: Dict[str, Binding] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    scope: Dict[str, str] = field(default_factory=dict)
    kind: NodeKind = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.refresh_kind()

    def refresh_kind(self) -> NodeKind:
        """Recompute `kind` after an in-place rename or rebinding."""
        text = self.properties.get(TEXT_KEY)
        text_binding = self.bindings.get(TEXT_KEY)
        if text:
            self.kind = NodeKind.TEXT
        elif text_binding is not None and text_binding.code:
            self.kind = NodeKind.DYNAMIC_TEXT
        elif self.name == FRAGMENT_NAME:
            self.kind = NodeKind.FRAGMENT
        elif self.name == FOR_NAME:
            self.kind = NodeKind.FOR
        elif self.name == SHOW_NAME:
            self.kind = NodeKind.SHOW
        else:
            self.kind = NodeKind.ELEMENT
        return self.kind

    @property
    def else_branch(self) -> Optional["Node"]:
        branch = self.meta.get("else")
        return branch if isinstance(branch, Node) else None

    def is_empty_text(self) -> bool:
        text = self.properties.get(TEXT_KEY)
        return isinstance(text, str) and not text.strip()

    def __str__(self) -> str:
        if self.kind is NodeKind.TEXT:
            return f"Node(text={self.properties[TEXT_KEY][:30]!r})"
        return (
            f"Node(name={self.name}, kind={self.kind.value}, "
            f"props={len(self.properties)}, bindings={len(self.bindings)}, "
            f"children={len(self.children)})"
        )


@dataclass
class StateEntry:
    """One reactive state value: a plain expression or a function body."""

    code: Any
    type: str = "property"


@dataclass
class HookCode:
    code: str
    deps: Optional[str] = None


@dataclass
class Hooks:
    on_init: Optional[HookCode] = None
    on_mount: List[HookCode] = field(default_factory=list)
    # None means "not declared"; an empty list still counts as declared.
    on_update: Optional[List[HookCode]] = None


@dataclass
class ImportSpec:
    """`imports` maps local name to imported name, `default` or `*`."""

    path: str
    imports: Dict[str, str] = field(default_factory=dict)


@dataclass
class Component:
    """One compilable unit."""

    name: str = "MyComponent"
    imports: List[ImportSpec] = field(default_factory=list)
    state: Dict[str, StateEntry] = field(default_factory=dict)
    # Prop name -> optional type annotation
    props: Dict[str, Optional[str]] = field(default_factory=dict)
    hooks: Hooks = field(default_factory=Hooks)
    children: List[Node] = field(default_factory=list)
    style: Optional[str] = None
    props_type_ref: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return (
            f"Component(name={self.name}, state={len(self.state)}, "
            f"props={len(self.props)}, children={len(self.children)})"
        )
