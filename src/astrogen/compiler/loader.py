"""Builds the component IR from its JSON interchange document."""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, NoReturn, Optional, Union

from astrogen.compiler.ast_nodes import (
    SINGLE_BINDING,
    Binding,
    Component,
    HookCode,
    Hooks,
    ImportSpec,
    Node,
    StateEntry,
)
from astrogen.compiler.exceptions import IRValidationError

COMPONENT_TYPE = "@builder.io/mitosis/component"
NODE_TYPE = "@builder.io/mitosis/node"


class ComponentLoader:
    """Maps JSON documents onto `Component`/`Node` dataclasses."""

    def __init__(self, file_path: str = "") -> None:
        self.file_path = file_path

    def load_file(self, file_path: Union[str, Path]) -> Component:
        """Load a component from a `.json` file."""
        path = Path(file_path)
        self.file_path = str(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise IRValidationError(
                    f"Invalid JSON: {e.msg}", path=f"$:{e.lineno}", file_path=self.file_path
                )
        return self.load(data)

    def load(self, data: Any) -> Component:
        doc = self._expect_mapping(data, "$")
        doc_type = doc.get("@type")
        if doc_type is not None and doc_type != COMPONENT_TYPE:
            self._fail(f"Expected a component document, got {doc_type!r}", "$.@type")

        return Component(
            name=self._expect_str(doc.get("name", "MyComponent"), "$.name"),
            imports=self._load_imports(doc.get("imports") or [], "$.imports"),
            state=self._load_state(doc.get("state") or {}, "$.state"),
            props=self._load_props(doc.get("props") or {}, "$.props"),
            hooks=self._load_hooks(doc.get("hooks") or {}, "$.hooks"),
            children=self._load_children(doc.get("children") or [], "$.children"),
            style=self._optional_str(doc.get("style"), "$.style"),
            props_type_ref=self._optional_str(doc.get("propsTypeRef"), "$.propsTypeRef"),
            meta=dict(self._expect_mapping(doc.get("meta") or {}, "$.meta")),
        )

    def load_node(self, data: Any, path: str = "$") -> Node:
        doc = self._expect_mapping(data, path)
        doc_type = doc.get("@type")
        if doc_type is not None and doc_type != NODE_TYPE:
            self._fail(f"Expected a node document, got {doc_type!r}", f"{path}.@type")
        if "name" not in doc:
            self._fail("Node is missing 'name'", path)

        properties: Dict[str, str] = {}
        for key, value in self._expect_mapping(doc.get("properties") or {}, f"{path}.properties").items():
            if value is None:
                continue
            properties[key] = value if isinstance(value, str) else str(value)

        bindings: Dict[str, Binding] = {}
        for key, value in self._expect_mapping(doc.get("bindings") or {}, f"{path}.bindings").items():
            if value is None:
                continue
            bindings[key] = self._load_binding(value, f"{path}.bindings.{key}")

        meta: Dict[str, Any] = {}
        for key, value in self._expect_mapping(doc.get("meta") or {}, f"{path}.meta").items():
            if key == "else" and value is not None:
                meta[key] = self.load_node(value, f"{path}.meta.else")
            else:
                meta[key] = value

        scope = {
            str(k): str(v)
            for k, v in self._expect_mapping(doc.get("scope") or {}, f"{path}.scope").items()
            if v is not None
        }

        return Node(
            name=self._expect_str(doc["name"], f"{path}.name"),
            properties=properties,
            bindings=bindings,
            children=self._load_children(doc.get("children") or [], f"{path}.children"),
            meta=meta,
            scope=scope,
        )

    def _load_binding(self, data: Any, path: str) -> Binding:
        doc = self._expect_mapping(data, path)
        code = doc.get("code")
        if code is not None and not isinstance(code, str):
            self._fail("Binding code must be a string", f"{path}.code")
        arguments = doc.get("arguments")
        if arguments is not None:
            if not isinstance(arguments, list) or not all(isinstance(a, str) for a in arguments):
                self._fail("Binding arguments must be a list of names", f"{path}.arguments")
        return Binding(
            code=code,
            type=self._expect_str(doc.get("type") or SINGLE_BINDING, f"{path}.type"),
            arguments=arguments,
            is_async=bool(doc.get("async", False)),
        )

    def _load_children(self, data: Any, path: str) -> List[Node]:
        if not isinstance(data, list):
            self._fail("Expected a list of nodes", path)
        return [self.load_node(child, f"{path}[{i}]") for i, child in enumerate(data)]

    def _load_imports(self, data: Any, path: str) -> List[ImportSpec]:
        if not isinstance(data, list):
            self._fail("Expected a list of imports", path)
        imports = []
        for i, item in enumerate(data):
            doc = self._expect_mapping(item, f"{path}[{i}]")
            names = self._expect_mapping(doc.get("imports") or {}, f"{path}[{i}].imports")
            imports.append(
                ImportSpec(
                    path=self._expect_str(doc.get("path"), f"{path}[{i}].path"),
                    imports={str(k): str(v) for k, v in names.items()},
                )
            )
        return imports

    def _load_state(self, data: Any, path: str) -> Dict[str, StateEntry]:
        state = {}
        for key, value in self._expect_mapping(data, path).items():
            if isinstance(value, Mapping):
                state[key] = StateEntry(
                    code=value.get("code"), type=str(value.get("type") or "property")
                )
            else:
                # Bare values are shorthand for a property entry
                state[key] = StateEntry(code=value)
        return state

    def _load_props(self, data: Any, path: str) -> Dict[str, Optional[str]]:
        if isinstance(data, list):
            return {self._expect_str(name, f"{path}[{i}]"): None for i, name in enumerate(data)}

        props: Dict[str, Optional[str]] = {}
        for key, value in self._expect_mapping(data, path).items():
            if isinstance(value, Mapping):
                props[key] = self._optional_str(value.get("type"), f"{path}.{key}.type")
            else:
                props[key] = self._optional_str(value, f"{path}.{key}")
        return props

    def _load_hooks(self, data: Any, path: str) -> Hooks:
        doc = self._expect_mapping(data, path)
        hooks = Hooks()

        on_init = doc.get("onInit")
        if on_init is not None:
            hooks.on_init = self._load_hook(on_init, f"{path}.onInit")

        on_mount = doc.get("onMount")
        if isinstance(on_mount, Mapping):
            on_mount = [on_mount]
        if on_mount:
            hooks.on_mount = [
                self._load_hook(h, f"{path}.onMount[{i}]") for i, h in enumerate(on_mount)
            ]

        on_update = doc.get("onUpdate")
        if on_update is not None:
            if isinstance(on_update, Mapping):
                on_update = [on_update]
            hooks.on_update = [
                self._load_hook(h, f"{path}.onUpdate[{i}]") for i, h in enumerate(on_update)
            ]
        return hooks

    def _load_hook(self, data: Any, path: str) -> HookCode:
        doc = self._expect_mapping(data, path)
        return HookCode(
            code=self._expect_str(doc.get("code", ""), f"{path}.code"),
            deps=self._optional_str(doc.get("deps"), f"{path}.deps"),
        )

    def _expect_mapping(self, value: Any, path: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            self._fail(f"Expected an object, got {type(value).__name__}", path)
        return value

    def _expect_str(self, value: Any, path: str) -> str:
        if not isinstance(value, str):
            self._fail(f"Expected a string, got {type(value).__name__}", path)
        return value

    def _optional_str(self, value: Any, path: str) -> Optional[str]:
        if value is None:
            return None
        return self._expect_str(value, path)

    def _fail(self, message: str, path: str) -> NoReturn:
        raise IRValidationError(message, path=path, file_path=self.file_path)


def load_component(data: Any) -> Component:
    """Build a component from an already-decoded JSON document."""
    return ComponentLoader().load(data)


def clone_component(component: Component) -> Component:
    """Deep, independent copy of a component."""
    return copy.deepcopy(component)


def node_to_dict(node: Node) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "@type": NODE_TYPE,
        "name": node.name,
        "properties": dict(node.properties),
        "bindings": {
            key: {
                "code": b.code,
                "type": b.type,
                **({"arguments": list(b.arguments)} if b.arguments else {}),
                **({"async": True} if b.is_async else {}),
            }
            for key, b in node.bindings.items()
        },
        "children": [node_to_dict(child) for child in node.children],
        "meta": {
            key: node_to_dict(value) if isinstance(value, Node) else value
            for key, value in node.meta.items()
        },
    }
    if node.scope:
        data["scope"] = dict(node.scope)
    return data


def component_to_dict(component: Component) -> Dict[str, Any]:
    """Plain, JSON-serializable view of a component."""
    hooks: Dict[str, Any] = {
        "onMount": [{"code": h.code} for h in component.hooks.on_mount],
    }
    if component.hooks.on_init is not None:
        hooks["onInit"] = {"code": component.hooks.on_init.code}
    if component.hooks.on_update is not None:
        hooks["onUpdate"] = [
            {"code": h.code, **({"deps": h.deps} if h.deps else {})}
            for h in component.hooks.on_update
        ]

    data: Dict[str, Any] = {
        "@type": COMPONENT_TYPE,
        "name": component.name,
        "imports": [{"path": i.path, "imports": dict(i.imports)} for i in component.imports],
        "state": {k: {"code": v.code, "type": v.type} for k, v in component.state.items()},
        "props": {k: ({"type": v} if v else {}) for k, v in component.props.items()},
        "hooks": hooks,
        "children": [node_to_dict(child) for child in component.children],
        "meta": dict(component.meta),
    }
    if component.style is not None:
        data["style"] = component.style
    if component.props_type_ref is not None:
        data["propsTypeRef"] = component.props_type_ref
    return data
