import json
import unittest

from astrogen.compiler.ast_nodes import (
    Binding,
    Component,
    HookCode,
    Hooks,
    ImportSpec,
    Node,
    StateEntry,
)
from astrogen.compiler.codegen.generator import (
    CodeGenerator,
    compile_component,
    compile_file,
    component_to_astro,
)
from astrogen.compiler.config import CompileOptions
from astrogen.compiler.exceptions import InvalidOptionError
from astrogen.compiler.helpers import short_hash
from astrogen.compiler.loader import component_to_dict
from astrogen.compiler.plugins import Plugin


def text(value):
    return Node(properties={"_text": value})


def expr(code):
    return Node(bindings={"_text": Binding(code)})


def counter():
    return Component(
        name="Counter",
        state={"count": StateEntry(0)},
        children=[
            Node(name="button", bindings={"onClick": Binding("state.count++")}, children=[text("Click")])
        ],
    )


class TestComponentAssembler(unittest.TestCase):
    def test_markup_only(self):
        component = Component(
            children=[
                Node(
                    name="Show",
                    bindings={"when": Binding("count > 0")},
                    children=[text("yes")],
                    meta={"else": text("no")},
                )
            ]
        )
        self.assertEqual(component_to_astro(component), "{count > 0 ? (\n  yes\n) : (no)}\n")

    def test_interactive_component_untyped(self):
        output = component_to_astro(counter(), {"typescript": False})
        self.assertEqual(
            output,
            "---\n"
            "// Component state\n"
            "let count = 0;\n"
            "---\n"
            "\n"
            "<button onClick={(event) => count++} client:idle>Click</button>\n"
            "<script>\n"
            "</script>\n",
        )

    def test_typed_props(self):
        component = Component(
            props={"title": "string"},
            children=[Node(name="h1", children=[expr("props.title")])],
        )
        self.assertEqual(
            component_to_astro(component),
            "---\n"
            "interface Props {\n"
            "  title?: string;\n"
            "}\n"
            "\n"
            "const props = Astro.props as Props;\n"
            "const { title } = props;\n"
            "---\n"
            "\n"
            "<h1>{title}</h1>\n",
        )

    def test_untyped_props(self):
        component = Component(
            props={"title": "string"},
            children=[Node(name="h1", children=[expr("props.title")])],
        )
        self.assertEqual(
            component_to_astro(component, CompileOptions(typescript=False)),
            "---\nconst props = Astro.props;\nconst { title } = props;\n---\n\n<h1>{title}</h1>\n",
        )

    def test_referenced_props_without_declaration(self):
        component = Component(children=[Node(name="span", children=[expr("props.label")])])
        self.assertEqual(
            component_to_astro(component),
            "---\n"
            "type Props = Record<string, any>;\n"
            "\n"
            "const props = Astro.props as Props;\n"
            "const { label } = props;\n"
            "---\n"
            "\n"
            "<span>{label}</span>\n",
        )

    def test_props_type_ref_and_untyped_entries(self):
        component = Component(
            props={"label": None, "size": "'sm' | 'lg'"},
            props_type_ref="ButtonProps",
            children=[Node(name="button", children=[expr("props.label")])],
        )
        output = component_to_astro(component)
        self.assertIn(
            "interface ButtonProps {\n  label?: any;\n  size?: 'sm' | 'lg';\n}\n", output
        )
        self.assertIn("const props = Astro.props as ButtonProps;\n", output)
        self.assertIn("const { label, size } = props;\n", output)

    def test_state_declarations(self):
        component = Component(
            state={
                "name": StateEntry("'Ada'"),
                "items": StateEntry([1, 2]),
                "greet": StateEntry("() => alert(state.name)"),
                "increment": StateEntry("increment() { state.count++ }", type="method"),
                "count": StateEntry(0),
                "missing": StateEntry(None),
            }
        )
        output = component_to_astro(component)
        self.assertEqual(
            output,
            "---\n"
            "// Component state\n"
            "let name = 'Ada';\n"
            "let items = [1, 2];\n"
            "const greet = () => alert(name);\n"
            "const increment = function increment() { count++ };\n"
            "let count = 0;\n"
            "---\n",
        )

    def test_setup_keeps_props_qualified(self):
        component = Component(
            props={"step": None},
            state={"next": StateEntry("state.count + props.step")},
        )
        self.assertIn("let next = count + props.step;\n", component_to_astro(component))

    def test_refs_hooks_and_script(self):
        component = Component(
            state={"count": StateEntry(0)},
            hooks=Hooks(
                on_init=HookCode("console.log(props.start)"),
                on_mount=[HookCode("inputRef.focus()")],
                on_update=[HookCode("document.title = `${state.count}`;")],
            ),
            children=[Node(name="input", bindings={"ref": Binding("inputRef")})],
        )
        self.assertEqual(
            component_to_astro(component),
            "---\n"
            "type Props = Record<string, any>;\n"
            "\n"
            "const props = Astro.props as Props;\n"
            "const { start } = props;\n"
            "\n"
            "// Component state\n"
            "let count = 0;\n"
            "\n"
            "// Component refs\n"
            "let inputRef;\n"
            "\n"
            "// Component initialization\n"
            "console.log(props.start)\n"
            "---\n"
            "\n"
            "<input bind:this={inputRef} client:load />\n"
            "<script>\n"
            "  // Component mounted\n"
            "  inputRef.focus();\n"
            "  // Update hooks\n"
            "  document.title = `${count}`;\n"
            "</script>\n",
        )

    def test_on_mount_forces_eager_directive(self):
        component = counter()
        component.hooks.on_mount = [HookCode("console.log('mounted')")]
        result = compile_component(component)
        self.assertEqual(result.client_directive, "client:load")
        self.assertIn("<button onClick={(event) => count++} client:load>", result.code)
        self.assertIn("<script>\n  // Component mounted\n  console.log('mounted');\n</script>", result.code)

    def test_explicit_directive_overrides_analysis(self):
        result = compile_component(counter(), {"clientDirective": "client:visible"})
        self.assertIn("client:visible>Click</button>", result.code)
        self.assertEqual(result.analysis.suggested_directive, "client:idle")
        self.assertEqual(
            result.metadata,
            {"needsHydration": True, "clientDirective": "client:visible", "outputFormat": "astro"},
        )

    def test_directive_none(self):
        output = component_to_astro(counter(), CompileOptions(client_directive="none"))
        self.assertIn("<button onClick={(event) => count++}>Click</button>", output)

    def test_imports(self):
        component = Component(
            imports=[
                ImportSpec("@builder.io/mitosis", {"useStore": "useStore"}),
                ImportSpec("./Button.lite", {"Button": "default"}),
                ImportSpec("../utils", {"fmt": "format"}),
            ],
            children=[Node(name="Button")],
        )
        output = component_to_astro(component, {"explicitImportFileExtension": True})
        self.assertEqual(
            output,
            "---\n"
            'import Button from "./Button.astro";\n'
            'import { format as fmt } from "../utils.js";\n'
            "---\n"
            "\n"
            "<Button></Button>\n",
        )

    def test_inline_style_object(self):
        code = "{ color: 'red', fontSize: '12px' }"
        class_name = f"div-{short_hash(code)}"
        component = Component(children=[Node(name="div", bindings={"css": Binding(code)})])
        result = compile_component(component)
        self.assertEqual(
            result.code,
            f'<div class="{class_name}"></div>\n'
            "<style>\n"
            f".{class_name} {{\n"
            "  color: red;\n"
            "  font-size: 12px;\n"
            "}\n"
            "</style>\n",
        )
        self.assertEqual(result.scoped_styles, {class_name: code})

    def test_dynamic_style_object_degrades_to_comment(self):
        code = "{ color: theme.primary }"
        class_name = f"div-{short_hash(code)}"
        component = Component(children=[Node(name="div", bindings={"css": Binding(code)})])
        with self.assertLogs("astrogen.compiler.styles", "WARNING"):
            output = component_to_astro(component)
        self.assertIn(
            f"<style>\n/* .{class_name}: could not convert style object: {code} */\n</style>",
            output,
        )

    def test_scoped_component_style(self):
        component = Component(
            style=".title { color: red; }",
            meta={"scopedStyle": True},
            children=[Node(name="h1", properties={"class": "title"})],
        )
        result = compile_component(component)
        prefix = result.style_prefix
        self.assertEqual(
            result.code,
            f'<h1 data-astro-{prefix} class="title"></h1>\n'
            "<style>\n"
            f".title[data-astro-{prefix}] {{ color: red; }}\n"
            "</style>\n",
        )

    def test_unscoped_component_style(self):
        component = Component(
            style="h1 { margin: 0; }",
            children=[Node(name="h1"), Node(name="div", bindings={"css": Binding("{ padding: 0 }")})],
        )
        output = component_to_astro(component)
        self.assertTrue(output.startswith("<h1></h1>\n"))
        self.assertIn("<style>\nh1 { margin: 0; }\n\n.div-", output)

    def test_style_prefix_is_structural(self):
        first = compile_component(counter()).style_prefix
        self.assertEqual(compile_component(counter()).style_prefix, first)

        changed = counter()
        changed.children[0].properties["id"] = "b"
        self.assertNotEqual(compile_component(changed).style_prefix, first)

    def test_metadata_annotations_stripped(self):
        component = Component(
            children=[
                Node(
                    name="Show",
                    bindings={"when": Binding("ok")},
                    children=[Node(name="p", properties={"$name": "internal", "id": "a"})],
                    meta={"else": Node(name="p", bindings={"$tagName": Binding("x")})},
                )
            ]
        )
        self.assertEqual(
            component_to_astro(component), '{ok ? (\n  <p id="a"></p>\n) : (<p></p>)}\n'
        )

    def test_input_not_mutated_and_output_stable(self):
        component = counter()
        component.children[0].properties["$debug"] = "1"
        before = json.dumps(component_to_dict(component), sort_keys=True)

        generator = CodeGenerator({"typescript": False})
        first = generator.generate(component).code
        second = generator.generate(component).code

        self.assertEqual(first, second)
        self.assertEqual(json.dumps(component_to_dict(component), sort_keys=True), before)

    def test_scoped_styles_do_not_leak_between_calls(self):
        generator = CodeGenerator()
        a = Component(children=[Node(name="a", bindings={"css": Binding("{ color: 'red' }")})])
        b = Component(children=[Node(name="b", bindings={"css": Binding("{ color: 'blue' }")})])

        generator.generate(a)
        result = generator.generate(b)

        blue = short_hash("{ color: 'blue' }")
        self.assertEqual(list(result.scoped_styles), [f"b-{blue}"])
        self.assertNotIn("color: red", result.code)

    def test_plugins_run_in_order(self):
        calls = []

        def make_plugin(name):
            def pre_json(component):
                calls.append(f"pre_json:{name}")
                return component

            def post_json(component):
                calls.append(f"post_json:{name}")
                return component

            def pre_code(component, code):
                calls.append(f"pre_code:{name}")
                return code

            def post_code(component, code):
                calls.append(f"post_code:{name}")
                return code + f"<!-- {name} -->"

            return Plugin(name, pre_json, post_json, pre_code, post_code)

        output = component_to_astro(
            Component(children=[text("hi")]),
            {"plugins": [make_plugin("a"), make_plugin("b")]},
        )

        self.assertEqual(
            calls,
            [
                "pre_json:a",
                "pre_json:b",
                "post_json:a",
                "post_json:b",
                "pre_code:a",
                "pre_code:b",
                "post_code:a",
                "post_code:b",
            ],
        )
        self.assertEqual(output, "hi\n<!-- a --><!-- b -->")

    def test_pre_json_plugin_changes_tree(self):
        def rename(component):
            component.children[0].name = "section"
            component.children[0].refresh_kind()
            return component

        component = Component(children=[Node(name="div")])
        output = component_to_astro(component, {"plugins": [Plugin("rename", pre_json=rename)]})

        self.assertEqual(output, "<section></section>\n")
        self.assertEqual(component.children[0].name, "div")

    def test_pre_code_output_is_formatted(self):
        def pad(component, code):
            return code + "\n\n\n\n<!-- end -->   "

        output = component_to_astro(
            Component(children=[text("hi")]), {"plugins": [Plugin("pad", pre_code=pad)]}
        )
        self.assertEqual(output, "hi\n\n<!-- end -->\n")

    def test_formatting_failure_keeps_raw_text(self):
        def broken(code):
            raise ValueError("boom")

        component = Component(children=[expr("x")])
        with self.assertLogs("astrogen.compiler.codegen.generator", "WARNING") as logs:
            output = component_to_astro(component, CompileOptions(formatter=broken))
        self.assertEqual(output, "{x}")
        self.assertIn("boom", logs.output[0])

    def test_formatting_disabled(self):
        component = Component(children=[expr("x")])
        self.assertEqual(component_to_astro(component, {"prettier": False}), "{x}")

    def test_invalid_options(self):
        with self.assertRaises(InvalidOptionError):
            CodeGenerator({"clientDirective": "client:never"})
        with self.assertRaises(InvalidOptionError):
            CodeGenerator({"colour": "red"})

    def test_output_format_reported(self):
        result = compile_component(Component(), {"outputFormat": "typescript"})
        self.assertEqual(result.output_format, "typescript")
        self.assertEqual(result.code, "\n")


def test_compile_file(tmp_path):
    source = tmp_path / "Greeting.lite.json"
    source.write_text(
        json.dumps(
            {
                "@type": "@builder.io/mitosis/component",
                "name": "Greeting",
                "props": ["name"],
                "children": [
                    {
                        "@type": "@builder.io/mitosis/node",
                        "name": "p",
                        "children": [
                            {"name": "div", "properties": {"_text": "Hello "}},
                            {"name": "div", "bindings": {"_text": {"code": "props.name"}}},
                        ],
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    result = compile_file(source, {"typescript": False})

    assert result.code == (
        "---\nconst props = Astro.props;\nconst { name } = props;\n---\n\n<p>Hello\n{name}</p>\n"
    )
    assert result.analysis.needs_hydration is False
