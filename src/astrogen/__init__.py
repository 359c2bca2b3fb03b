from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("astrogen")
except PackageNotFoundError:
    __version__ = "unknown"

from astrogen.compiler.ast_nodes import Binding, Component, Node
from astrogen.compiler.codegen.generator import (
    CodeGenerator,
    CompileResult,
    compile_component,
    component_to_astro,
)
from astrogen.compiler.config import CompileOptions
from astrogen.compiler.exceptions import AstrogenError, IRValidationError
from astrogen.compiler.loader import load_component
from astrogen.compiler.plugins import Plugin

__all__ = [
    "Binding",
    "Component",
    "Node",
    "CodeGenerator",
    "CompileResult",
    "CompileOptions",
    "Plugin",
    "compile_component",
    "component_to_astro",
    "load_component",
    "AstrogenError",
    "IRValidationError",
]
