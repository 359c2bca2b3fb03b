import json

from click.testing import CliRunner

from astrogen.cli.main import cli

COUNTER = {
    "name": "Counter",
    "state": {"count": 0},
    "hooks": {"onMount": [{"code": "console.log('ready')"}]},
    "children": [
        {
            "name": "button",
            "bindings": {"onClick": {"code": "state.count++"}},
            "children": [{"name": "div", "properties": {"_text": "+"}}],
        }
    ],
}


def write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_compile_to_stdout(tmp_path):
    source = write(tmp_path / "Counter.json", COUNTER)

    result = CliRunner().invoke(cli, ["compile", str(source), "--no-typescript"])

    assert result.exit_code == 0, result.output
    assert result.output.startswith("---\n// Component state\nlet count = 0;\n---\n")
    assert "<button onClick={(event) => count++} client:load>+</button>" in result.output


def test_compile_with_directive_to_file(tmp_path):
    source = write(tmp_path / "Counter.json", COUNTER)
    target = tmp_path / "out" / "Counter.astro"

    result = CliRunner().invoke(
        cli,
        ["compile", str(source), "-o", str(target), "--client-directive", "client:visible"],
    )

    assert result.exit_code == 0, result.output
    assert "client:visible>+</button>" in target.read_text(encoding="utf-8")


def test_compile_rejects_unknown_directive(tmp_path):
    source = write(tmp_path / "Counter.json", COUNTER)

    result = CliRunner().invoke(cli, ["compile", str(source), "--client-directive", "soon"])

    assert result.exit_code == 2


def test_compile_invalid_document(tmp_path):
    source = write(tmp_path / "Bad.json", {"children": "nope"})

    result = CliRunner().invoke(cli, ["compile", str(source)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "Expected a list of nodes" in result.output


def test_analyze(tmp_path):
    source = write(tmp_path / "Counter.json", COUNTER)

    result = CliRunner().invoke(cli, ["analyze", str(source)])

    assert result.exit_code == 0, result.output
    assert "has 1 onMount hook(s)" in result.output
    assert "handles onClick on <button>" in result.output
    assert "client:load" in result.output


def test_analyze_static(tmp_path):
    source = write(tmp_path / "Static.json", {"name": "Static", "children": [{"name": "p"}]})

    result = CliRunner().invoke(cli, ["analyze", str(source)])

    assert result.exit_code == 0, result.output
    assert "No hydration needed" in result.output


def test_build(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    write(src / "Counter.json", COUNTER)

    result = CliRunner().invoke(cli, ["build", str(src), "--out-dir", str(tmp_path / "dist")])

    assert result.exit_code == 0, result.output
    assert "components=1" in result.output
    assert (tmp_path / "dist" / "Counter.astro").exists()


def test_build_reports_failures(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "Broken.json").write_text("{", encoding="utf-8")

    result = CliRunner().invoke(cli, ["build", str(src)])

    assert result.exit_code == 1
    assert "failed=1" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output
