"""Compiler module."""

from astrogen.compiler.codegen.generator import CodeGenerator
from astrogen.compiler.loader import ComponentLoader

__all__ = ["ComponentLoader", "CodeGenerator"]
