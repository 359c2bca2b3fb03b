"""Astro code generators."""

from astrogen.compiler.codegen.generator import CodeGenerator, CompileResult
from astrogen.compiler.codegen.hydration import HydrationAnalysis, analyze_hydration

__all__ = ["CodeGenerator", "CompileResult", "HydrationAnalysis", "analyze_hydration"]
