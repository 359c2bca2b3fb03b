"""Main code generator orchestrator."""

import json
import logging
import re
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from astrogen.compiler.ast_nodes import Component, HookCode, StateEntry
from astrogen.compiler.codegen.bindings import MARKUP, SETUP, process_binding
from astrogen.compiler.codegen.context import RenderContext
from astrogen.compiler.codegen.hydration import HydrationAnalysis, analyze_hydration
from astrogen.compiler.codegen.template import INDENT, TemplateCodegen
from astrogen.compiler.config import CompileOptions, initialize_options
from astrogen.compiler.formatting import format_code
from astrogen.compiler.helpers import (
    camel_case,
    get_prop_names,
    get_refs,
    short_hash,
    strip_meta_properties,
)
from astrogen.compiler.imports import render_imports
from astrogen.compiler.loader import ComponentLoader, clone_component, component_to_dict
from astrogen.compiler.plugins import (
    run_post_code_plugins,
    run_post_json_plugins,
    run_pre_code_plugins,
    run_pre_json_plugins,
)
from astrogen.compiler.styles import StyleCollector, collect_css, scope_attribute

logger = logging.getLogger(__name__)

TARGET = "astro"

_FUNCTION_CODE = re.compile(r"\bfunction\b|=>")

OptionsLike = Union[None, CompileOptions, Mapping[str, Any]]


@dataclass
class CompileResult:
    code: str
    analysis: HydrationAnalysis
    client_directive: str
    style_prefix: str
    scoped_styles: Dict[str, str] = field(default_factory=dict)
    output_format: str = "astro"

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            "needsHydration": self.analysis.needs_hydration,
            "clientDirective": self.client_directive,
            "outputFormat": self.output_format,
        }


class CodeGenerator:
    """Generates an Astro component from a `Component`."""

    def __init__(self, options: OptionsLike = None) -> None:
        self.options = initialize_options(options)

    def generate(self, component: Component) -> CompileResult:
        """Compile one component. The caller's component is never modified."""
        ir = clone_component(component)
        # Copied per call so nothing leaks between compilations
        options = initialize_options(self.options)
        plugins = options.plugins

        if plugins:
            ir = run_pre_json_plugins(ir, plugins)

        analysis = analyze_hydration(ir)
        has_state = len(ir.state) > 0
        prop_names = get_prop_names(ir)
        refs = get_refs(ir)

        style_prefix = short_hash(json.dumps(component_to_dict(ir), sort_keys=True, default=str))
        css = collect_css(ir, prefix=style_prefix)

        if plugins:
            ir = run_post_json_plugins(ir, plugins)
        strip_meta_properties(ir)

        client_directive = options.client_directive or analysis.suggested_directive
        ctx = RenderContext(
            component=ir,
            options=options,
            styles=StyleCollector(),
            client_directive=client_directive,
            scope_attribute=(
                scope_attribute(style_prefix) if css and ir.meta.get("scopedStyle") else None
            ),
        )

        frontmatter = self._generate_frontmatter(ir, options, has_state, prop_names, refs)
        template = TemplateCodegen(ctx).render_children(ir.children)
        client_script = self._generate_client_script(ir) if analysis.needs_hydration else ""
        styles = self._generate_styles(css, ctx.styles)

        code = ""
        if frontmatter.strip():
            code += f"---\n{frontmatter.strip()}\n---\n\n"
        code += template
        if client_script:
            code += f"\n{client_script}"
        if styles:
            code += f"\n{styles}"

        if plugins:
            code = run_pre_code_plugins(ir, code, plugins)

        if options.prettier:
            code = self._format(code, options, ir.name)

        if plugins:
            code = run_post_code_plugins(ir, code, plugins)

        return CompileResult(
            code=code,
            analysis=analysis,
            client_directive=client_directive,
            style_prefix=style_prefix,
            scoped_styles=ctx.styles.as_dict(),
            output_format=options.output_format,
        )

    def _generate_frontmatter(
        self,
        ir: Component,
        options: CompileOptions,
        has_state: bool,
        prop_names: List[str],
        refs: List[str],
    ) -> str:
        sections: List[str] = []

        imports = render_imports(ir, TARGET, options.explicit_import_file_extension)
        if imports.strip():
            sections.append(imports)

        if prop_names:
            sections.append(self._generate_props(ir, options, prop_names, refs))

        if has_state:
            lines = ["// Component state"]
            for key, entry in ir.state.items():
                declaration = self._generate_state_entry(key, entry)
                if declaration:
                    lines.append(declaration)
            sections.append("\n".join(lines))

        if refs:
            lines = ["// Component refs"]
            for ref in refs:
                lines.append(f"let {camel_case(ref)};")
            sections.append("\n".join(lines))

        on_init = ir.hooks.on_init
        if on_init is not None and on_init.code:
            sections.append(
                f"// Component initialization\n{process_binding(on_init.code, SETUP)}"
            )

        return "\n\n".join(sections)

    def _generate_props(
        self,
        ir: Component,
        options: CompileOptions,
        prop_names: List[str],
        refs: List[str],
    ) -> str:
        props_type = ir.props_type_ref or "Props"
        lines: List[str] = []

        if options.typescript:
            if ir.props:
                lines.append(f"interface {props_type} {{")
                for name in prop_names:
                    lines.append(f"  {name}?: {ir.props.get(name) or 'any'};")
                lines.append("}")
            else:
                lines.append(f"type {props_type} = Record<string, any>;")
            lines.append("")
            lines.append(f"const props = Astro.props as {props_type};")
        else:
            lines.append("const props = Astro.props;")

        # State and refs are declared as locals too; never shadow them
        taken = set(ir.state) | {camel_case(ref) for ref in refs}
        locals_ = [name for name in prop_names if name not in taken]
        if locals_:
            lines.append(f"const {{ {', '.join(locals_)} }} = props;")
        return "\n".join(lines)

    def _generate_state_entry(self, key: str, entry: StateEntry) -> Optional[str]:
        code = entry.code
        if code is None:
            return None
        if not isinstance(code, str):
            return f"let {key} = {json.dumps(code)};"

        if entry.type == "method":
            code = self._method_to_function(code)
        keyword = "const" if _FUNCTION_CODE.search(code) else "let"
        return f"{keyword} {key} = {process_binding(code, SETUP)};"

    @staticmethod
    def _method_to_function(code: str) -> str:
        """`foo() {...}` -> `function foo() {...}` (keeps `async`)."""
        stripped = code.lstrip()
        if stripped.startswith("async ") and not stripped[6:].lstrip().startswith("function"):
            return "async function " + stripped[6:].lstrip()
        if stripped.startswith(("function", "async ")) or "=>" in stripped:
            return code
        return "function " + stripped

    def _generate_client_script(self, ir: Component) -> str:
        lines = ["<script>"]

        if ir.hooks.on_mount:
            lines.append(f"{INDENT}// Component mounted")
            lines.extend(self._hook_statements(ir.hooks.on_mount))

        if ir.hooks.on_update:
            lines.append(f"{INDENT}// Update hooks")
            lines.extend(self._hook_statements(ir.hooks.on_update))

        lines.append("</script>")
        return "\n".join(lines)

    @staticmethod
    def _hook_statements(hooks: List[HookCode]) -> List[str]:
        statements = []
        for hook in hooks:
            code = process_binding(hook.code, MARKUP).strip()
            if not code.endswith(";"):
                code += ";"
            statements.append(textwrap.indent(code, INDENT))
        return statements

    @staticmethod
    def _generate_styles(css: str, collector: StyleCollector) -> str:
        blocks = [block for block in (css, collector.render()) if block.strip()]
        if not blocks:
            return ""
        content = "\n\n".join(blocks).strip()
        return f"<style>\n{content}\n</style>"

    @staticmethod
    def _format(code: str, options: CompileOptions, name: str) -> str:
        formatter = options.formatter or format_code
        try:
            return formatter(code)
        except Exception as e:
            logger.warning("Could not format Astro component %s: %s", name, e)
            return code


def compile_component(component: Component, options: OptionsLike = None) -> CompileResult:
    return CodeGenerator(options).generate(component)


def component_to_astro(component: Component, options: OptionsLike = None) -> str:
    """Compile `component` and return the `.astro` source text."""
    return compile_component(component, options).code


def compile_file(path: Union[str, Path], options: OptionsLike = None) -> CompileResult:
    """Load a JSON component document and compile it."""
    component = ComponentLoader().load_file(path)
    return compile_component(component, options)
