"""Import statement rendering for the component frontmatter."""

import re
from typing import List

from astrogen.compiler.ast_nodes import Component, ImportSpec

# Imports of the IR framework itself have no meaning in generated output
FRAMEWORK_PACKAGES = {"@builder.io/mitosis"}

_COMPONENT_SOURCE = re.compile(r"\.lite(?:\.(?:tsx|jsx))?$")

TARGET_EXTENSIONS = {"astro": ".astro"}


def transform_import_path(path: str, target: str, explicit_import_file_extension: bool) -> str:
    if _COMPONENT_SOURCE.search(path):
        return _COMPONENT_SOURCE.sub(TARGET_EXTENSIONS.get(target, ".js"), path)

    if explicit_import_file_extension and path.startswith("."):
        last_segment = path.rsplit("/", 1)[-1]
        if "." not in last_segment.lstrip("."):
            return f"{path}.js"
    return path


def render_import(spec: ImportSpec, target: str, explicit_import_file_extension: bool) -> str:
    path = transform_import_path(spec.path, target, explicit_import_file_extension)
    if not spec.imports:
        return f'import "{path}";'

    default_names: List[str] = []
    namespace_names: List[str] = []
    named: List[str] = []
    for local, imported in spec.imports.items():
        if imported == "default":
            default_names.append(local)
        elif imported == "*":
            namespace_names.append(f"* as {local}")
        elif imported == local:
            named.append(local)
        else:
            named.append(f"{imported} as {local}")

    clauses = default_names[:1]
    if namespace_names:
        clauses.append(namespace_names[0])
    elif named:
        clauses.append("{ " + ", ".join(named) + " }")
    return f'import {", ".join(clauses)} from "{path}";'


def render_imports(
    component: Component,
    target: str = "astro",
    explicit_import_file_extension: bool = False,
) -> str:
    """Render the component's import statements, one per line."""
    lines = []
    for spec in component.imports:
        if spec.path in FRAMEWORK_PACKAGES:
            continue
        line = render_import(spec, target, explicit_import_file_extension)
        if line not in lines:
            lines.append(line)
    return "\n".join(lines)
