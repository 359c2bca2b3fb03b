"""State threaded through one compilation."""

from dataclasses import dataclass, field
from typing import Optional

from astrogen.compiler.ast_nodes import Component
from astrogen.compiler.config import DEFAULT_CLIENT_DIRECTIVE, CompileOptions
from astrogen.compiler.styles import StyleCollector


@dataclass
class RenderContext:
    """Created once per top-level compile call and passed down the recursion."""

    component: Component
    options: CompileOptions = field(default_factory=CompileOptions)
    styles: StyleCollector = field(default_factory=StyleCollector)
    client_directive: str = DEFAULT_CLIENT_DIRECTIVE
    # Attribute added to elements when component styles are scoped
    scope_attribute: Optional[str] = None
